"""Type definitions and Pydantic models."""

from .records import (
    ARTICLE,
    BOOK_CHAPTER,
    ERRATUM,
    LETTER,
    REVIEW,
    ExportFormat,
    Record,
)
from .run import Checkpoint, ExportRun

__all__ = [
    # Records
    "Record",
    "ExportFormat",
    "ARTICLE",
    "BOOK_CHAPTER",
    "LETTER",
    "ERRATUM",
    "REVIEW",
    # Run state
    "ExportRun",
    "Checkpoint",
]
