"""Browsing session: the restart-and-resume protocol.

A session plays the part of the browser tab. Each page load gets a brand
new ExportOrchestrator, and the first thing that instance does is try to
resume from the checkpoint store. An export in flight moves from page to
page only through that checkpoint, never through in-memory state.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from ..core.config import ExporterConfig, get_config
from ..extractors.base_extractor import RecordExtractor
from ..host.base import PageHost
from ..state.checkpoint_store import CheckpointStore
from ..types.records import ExportFormat
from .export_orchestrator import ExportOrchestrator, ExportState, ProgressCallback

logger = logging.getLogger(__name__)


@dataclass
class SessionResult:
    """Outcome of driving an export through one or more page loads."""

    state: ExportState
    record_count: int = 0
    page_loads: int = 0
    output_path: Optional[Path] = None
    error: Optional[str] = None
    next_location: Optional[str] = None  # Page to resume from when suspended

    @property
    def success(self) -> bool:
        return self.state is ExportState.DONE

    @property
    def suspended(self) -> bool:
        """True if the page-load budget ran out with the export still pending."""
        return self.state is ExportState.NAVIGATING


class BrowsingSession:
    """Drives exports across page loads of a single host."""

    def __init__(
        self,
        host: PageHost,
        extractor_factory: Callable[[], RecordExtractor],
        store: CheckpointStore,
        config: Optional[ExporterConfig] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        """Initialize the session.

        Args:
            host: The browsing context.
            extractor_factory: Builds an extractor for each page load.
            store: Checkpoint store shared by every page load.
            config: Exporter configuration. If None, loads from environment.
            progress_callback: Forwarded to each orchestrator.
        """
        self._host = host
        self._extractor_factory = extractor_factory
        self._store = store
        self._config = config or get_config()
        self._progress_callback = progress_callback

    def _new_orchestrator(self) -> ExportOrchestrator:
        return ExportOrchestrator(
            host=self._host,
            extractor=self._extractor_factory(),
            store=self._store,
            config=self._config,
            progress_callback=self._progress_callback,
        )

    async def export(self, export_format: ExportFormat) -> SessionResult:
        """Start a new export on the current page and follow it to the end."""
        orchestrator = self._new_orchestrator()
        await orchestrator.start(export_format)
        return await self._follow(orchestrator)

    async def on_page_load(self) -> SessionResult:
        """Resume whatever export the checkpoint holds, if any."""
        orchestrator = self._new_orchestrator()
        await orchestrator.resume()
        return await self._follow(orchestrator)

    async def _follow(self, orchestrator: ExportOrchestrator) -> SessionResult:
        """Load pages and resume until the export stops navigating."""
        page_loads = 1

        while orchestrator.state is ExportState.NAVIGATING:
            if page_loads >= self._config.max_page_loads:
                logger.warning(
                    f"Stopping after {page_loads} page loads; "
                    "checkpoint kept, continue with `capes-export resume`"
                )
                break

            if not self._host.complete_navigation():
                logger.error("Orchestrator is navigating but host has no pending page")
                break

            page_loads += 1
            logger.debug(f"Page load {page_loads}: {self._host.location}")

            orchestrator = self._new_orchestrator()
            await orchestrator.resume()

            if orchestrator.state is ExportState.IDLE:
                logger.warning("No checkpoint after navigation; export cannot continue")

        run = orchestrator.run
        return SessionResult(
            state=orchestrator.state,
            record_count=run.record_count if run else 0,
            page_loads=page_loads,
            output_path=orchestrator.output_path,
            error=orchestrator.error,
            next_location=self._host.pending_location,
        )
