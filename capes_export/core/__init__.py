"""Core infrastructure for CAPES Research Exporter."""

from .config import get_config, ExporterConfig
from .errors import CheckpointError, ExportError, ExportTimeoutError, NoRecordsError
from .page_sequencer import (
    PageSequencer,
    PaginationSignals,
    parse_range_indicator,
)

__all__ = [
    # Config
    "get_config",
    "ExporterConfig",
    # Errors
    "ExportError",
    "NoRecordsError",
    "ExportTimeoutError",
    "CheckpointError",
    # Page Sequencer
    "PageSequencer",
    "PaginationSignals",
    "parse_range_indicator",
]
