"""Export run state and its persisted checkpoint form."""

from dataclasses import dataclass, field
from datetime import datetime

from pydantic import BaseModel, Field, PositiveInt

from .records import ExportFormat, Record


class Checkpoint(BaseModel):
    """Serialized form of an ExportRun.

    visitedPages is stored as a list; order is irrelevant and it is
    rebuilt into a set on load.
    """

    format: ExportFormat
    records: list[Record] = Field(default_factory=list)
    visited_pages: list[PositiveInt] = Field(default_factory=list, alias="visitedPages")
    estimated_total: int = Field(default=0, ge=0, alias="estimatedTotal")
    started_at: datetime = Field(alias="startedAt")

    model_config = {"populate_by_name": True}


@dataclass
class ExportRun:
    """Accumulated state for one user-initiated export.

    records and visited_pages only ever grow; a page index is added at
    most once.
    """

    format: ExportFormat
    records: list[Record] = field(default_factory=list)
    visited_pages: set[int] = field(default_factory=set)
    estimated_total: int = 0
    started_at: datetime = field(default_factory=datetime.now)

    @property
    def record_count(self) -> int:
        return len(self.records)

    @property
    def page_count(self) -> int:
        return len(self.visited_pages)

    def has_visited(self, page_index: int) -> bool:
        return page_index in self.visited_pages

    def add_page(self, page_index: int, records: list[Record]) -> bool:
        """Record a harvested page.

        Args:
            page_index: 1-based index of the harvested page.
            records: Records extracted from that page.

        Returns:
            True if the run changed, False for an empty or already-visited page.
        """
        if not records or page_index in self.visited_pages:
            return False
        self.records.extend(records)
        self.visited_pages.add(page_index)
        return True

    def to_checkpoint(self) -> Checkpoint:
        return Checkpoint(
            format=self.format,
            records=list(self.records),
            visited_pages=sorted(self.visited_pages),
            estimated_total=self.estimated_total,
            started_at=self.started_at,
        )

    @classmethod
    def from_checkpoint(cls, checkpoint: Checkpoint) -> "ExportRun":
        return cls(
            format=checkpoint.format,
            records=list(checkpoint.records),
            visited_pages=set(checkpoint.visited_pages),
            estimated_total=checkpoint.estimated_total,
            started_at=checkpoint.started_at,
        )
