"""Bibliographic record models."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

# Document kind vocabulary
ARTICLE = "Article"
BOOK_CHAPTER = "Book Chapter"
LETTER = "Letter"
ERRATUM = "Erratum"
REVIEW = "Review"


class ExportFormat(str, Enum):
    """Citation file formats supported by the exporter."""

    RIS = "ris"
    BIBTEX = "bibtex"

    @property
    def extension(self) -> str:
        """Canonical file extension for the format."""
        return "ris" if self is ExportFormat.RIS else "bib"

    @classmethod
    def parse(cls, value: Optional[Any]) -> "ExportFormat":
        """Parse a format name, falling back to RIS for absent or unknown values."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.RIS


class Record(BaseModel):
    """One bibliographic entry extracted from a listing page."""

    title: str = Field(description="Article title")
    authors: list[str] = Field(default_factory=list, description="Authors in listing order")
    year: str = Field(default="", description="Raw year text, not necessarily 4 digits")
    venue: str = Field(default="", description="Journal or container title")
    document_kind: str = Field(default=ARTICLE, alias="documentKind")
    open_access: bool = Field(default=False, alias="openAccess")
    peer_reviewed: bool = Field(default=False, alias="peerReviewed")
    external_id: str = Field(default="", alias="externalId")

    model_config = {"populate_by_name": True, "frozen": True}
