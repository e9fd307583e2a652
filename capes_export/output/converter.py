"""Format dispatch for citation exports."""

from typing import Callable, Iterable

from ..types.records import ExportFormat, Record
from .bibtex import to_bibtex
from .ris import to_ris

FORMAT_CONVERTERS: dict[ExportFormat, Callable[[Iterable[Record]], str]] = {
    ExportFormat.RIS: to_ris,
    ExportFormat.BIBTEX: to_bibtex,
}


def convert(records: Iterable[Record], export_format: ExportFormat) -> str:
    """Render records in the requested format."""
    return FORMAT_CONVERTERS[export_format](records)
