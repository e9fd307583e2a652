"""Record extractors for supported listing sites."""

from .base_extractor import RecordExtractor
from .capes import (
    CapesRecordExtractor,
    is_listing_url,
    normalize_document_kind,
    parse_metadata_line,
    read_pagination_signals,
)

__all__ = [
    "RecordExtractor",
    "CapesRecordExtractor",
    "is_listing_url",
    "normalize_document_kind",
    "parse_metadata_line",
    "read_pagination_signals",
]

# Registry of available extractors
EXTRACTORS = {
    "capes": CapesRecordExtractor,
}


def get_extractor(name: str) -> type[RecordExtractor]:
    """Get extractor class by name."""
    if name not in EXTRACTORS:
        raise ValueError(f"Unknown extractor: {name}. Available: {list(EXTRACTORS.keys())}")
    return EXTRACTORS[name]


def list_extractors() -> list[str]:
    """Get list of available extractor names."""
    return list(EXTRACTORS.keys())
