"""Host page abstraction.

A host is the browsing context the exporter runs in: it knows the current
listing URL, can render the page, can be pointed at a new URL and can
save a finished document. Navigating is a one-way trip for whoever asked
for it: once ``complete_navigation()`` runs, every object built around the
old page is stale and a fresh orchestrator must take over.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..core.page_sequencer import PageSequencer, PaginationSignals


@dataclass(frozen=True)
class PageSnapshot:
    """Rendered content of one loaded listing page."""

    location: str
    html: str
    signals: PaginationSignals = field(default_factory=PaginationSignals)

    def sequencer(self) -> PageSequencer:
        """Build a PageSequencer for this page."""
        return PageSequencer(self.location, self.signals)


class PageHost(ABC):
    """Abstract browsing context holding one current listing page."""

    def __init__(self, location: str):
        self._location = location
        self._pending_location: Optional[str] = None

    @property
    def location(self) -> str:
        """URL of the page currently loaded."""
        return self._location

    @property
    def pending_location(self) -> Optional[str]:
        """URL requested by navigate() that has not been loaded yet."""
        return self._pending_location

    def navigate(self, url: str) -> None:
        """Request navigation to url.

        The current page stays readable until complete_navigation() is
        called by the session driving this host.
        """
        self._pending_location = url

    def complete_navigation(self) -> bool:
        """Load the pending location, discarding the current page.

        Returns:
            True if a navigation was pending.
        """
        if self._pending_location is None:
            return False
        self._location = self._pending_location
        self._pending_location = None
        self._on_page_unload()
        return True

    def _on_page_unload(self) -> None:
        """Drop anything cached for the outgoing page."""

    @abstractmethod
    async def snapshot(self) -> PageSnapshot:
        """Render the current page."""
        ...

    @abstractmethod
    def download(self, content: str, filename: str) -> Optional[Path]:
        """Deliver a finished export document.

        Returns:
            Where the document was saved, if the host saves to disk.
        """
        ...
