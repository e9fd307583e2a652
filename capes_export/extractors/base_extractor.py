"""Record extractor interface.

An extractor turns one rendered listing page into bibliographic records.
Implementations are site-specific; the orchestrator only depends on this
interface, so tests can feed it synthetic pages.
"""

from abc import ABC, abstractmethod

from ..host.base import PageSnapshot
from ..types.records import Record


class RecordExtractor(ABC):
    """Abstract base class for listing-page record extractors."""

    # Override in subclasses
    name: str = "base"
    description: str = "Base extractor"

    @abstractmethod
    async def extract(self, page: PageSnapshot) -> list[Record]:
        """Extract records from a listing page.

        Args:
            page: The rendered page.

        Returns:
            Records in page order; empty if the page holds none.
        """
        ...
