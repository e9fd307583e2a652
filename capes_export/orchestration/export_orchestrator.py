"""Export orchestrator: the resumable pagination state machine.

States::

    Idle -> Extracting -> (Navigating -> Extracting)* -> Finalizing -> Done
                  \\__________________ Failed ___________________/

Navigating never returns. The host's page is replaced, which makes this
orchestrator instance stale; the export continues only when a new
instance on the next page calls resume(). Everything needed to continue
is therefore written to the checkpoint store before navigation.
"""

import asyncio
import logging
from enum import Enum
from pathlib import Path
from typing import Awaitable, Callable, Optional

from ..core.config import ExporterConfig, get_config
from ..core.errors import ExportError, ExportTimeoutError, NoRecordsError
from ..extractors.base_extractor import RecordExtractor
from ..host.base import PageHost
from ..output.converter import convert
from ..output.filenames import generate_filename
from ..state.checkpoint_store import CheckpointStore
from ..types.records import ExportFormat
from ..types.run import ExportRun

logger = logging.getLogger(__name__)

# (message, percent 0-100)
ProgressCallback = Callable[[str, int], None]


class ExportState(str, Enum):
    """Lifecycle states of an export on one page load."""

    IDLE = "idle"
    EXTRACTING = "extracting"
    NAVIGATING = "navigating"
    FINALIZING = "finalizing"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ExportState.DONE, ExportState.FAILED)


def calculate_progress(run: ExportRun) -> int:
    """Estimate completion percentage, capped at 90 until the file is built."""
    if run.estimated_total <= 0:
        return min(90, run.page_count * 10)
    return min(90, int(run.record_count / run.estimated_total * 100))


class ExportOrchestrator:
    """Drives one export across a single page load.

    Owns the active ExportRun for its lifetime. A new instance is created
    for every page load; nothing but the checkpoint survives between them.
    """

    def __init__(
        self,
        host: PageHost,
        extractor: RecordExtractor,
        store: CheckpointStore,
        config: Optional[ExporterConfig] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        """Initialize the orchestrator.

        Args:
            host: Browsing context holding the current listing page.
            extractor: Turns the page into records.
            store: Checkpoint persistence shared with later page loads.
            config: Exporter configuration. If None, loads from environment.
            progress_callback: Receives status messages and percentages.
        """
        self._host = host
        self._extractor = extractor
        self._store = store
        self._config = config or get_config()
        self._progress_callback = progress_callback

        self._state = ExportState.IDLE
        self._run: Optional[ExportRun] = None
        self._error: Optional[str] = None
        self._output_path: Optional[Path] = None

    @property
    def state(self) -> ExportState:
        return self._state

    @property
    def run(self) -> Optional[ExportRun]:
        return self._run

    @property
    def error(self) -> Optional[str]:
        """Human-readable failure cause, set once the export has failed."""
        return self._error

    @property
    def output_path(self) -> Optional[Path]:
        return self._output_path

    async def start(self, export_format: ExportFormat) -> ExportState:
        """Start a new export from the current page.

        Any previous checkpoint is discarded first, so a new export never
        interleaves with a leftover one.

        Returns:
            The state this page load ended in.
        """
        self._discard_stale()
        self._run = ExportRun(format=export_format)
        logger.info(f"Starting {export_format.value} export at {self._host.location}")
        self._report_progress("Starting export...", 0)

        return await self._guarded(self._process_current_page)

    async def resume(self) -> ExportState:
        """Continue a checkpointed export on a freshly loaded page.

        Safe to call unconditionally at page load: without a checkpoint
        the orchestrator stays idle.

        Returns:
            The state this page load ended in.
        """
        if self._state is not ExportState.IDLE:
            logger.warning(f"Ignoring resume while {self._state.value}")
            return self._state

        run = self._store.load()
        if run is None:
            return self._state

        self._run = run
        logger.info(
            f"Resuming {run.format.value} export: {run.record_count} records "
            f"from {run.page_count} pages"
        )
        self._report_progress("Resuming export...", calculate_progress(run))

        return await self._guarded(self._resume_after_delay)

    async def _guarded(self, step: Callable[[], Awaitable[None]]) -> ExportState:
        """Run a step, failing the export on any unexpected error."""
        try:
            await step()
        except Exception as e:
            logger.exception("Export failed with unexpected error")
            self._fail(e)
        return self._state

    async def _resume_after_delay(self) -> None:
        await asyncio.sleep(self._config.resume_delay)
        await self._process_current_page()

    async def _process_current_page(self) -> None:
        """Extract this page under the watchdog, then navigate or finalize."""
        self._state = ExportState.EXTRACTING
        timeout = self._config.processing_timeout

        try:
            next_address = await asyncio.wait_for(self._extract_and_decide(), timeout)
        except asyncio.TimeoutError:
            self._fail(ExportTimeoutError(timeout))
            return

        if next_address is not None:
            await self._navigate(next_address)
        else:
            self._finalize()

    async def _extract_and_decide(self) -> Optional[str]:
        """Harvest the current page.

        Returns:
            Address of the next page to visit, or None when the listing is done.
        """
        run = self._run
        snapshot = await self._host.snapshot()
        sequencer = snapshot.sequencer()
        page_index = sequencer.current_page_index()

        if run.estimated_total == 0:
            run.estimated_total = sequencer.estimate_total_records()

        if run.has_visited(page_index):
            logger.info(f"Page {page_index} already harvested, skipping extraction")
        else:
            records = await self._extractor.extract(snapshot)
            if run.add_page(page_index, records):
                logger.info(f"Page {page_index}: collected {len(records)} records")
                self._store.save(run)
            else:
                logger.info(f"Page {page_index} yielded no records")

        self._report_progress(
            f"Collected {run.record_count} records from {run.page_count} pages",
            calculate_progress(run),
        )

        if sequencer.has_more_pages() and not run.has_visited(page_index + 1):
            return sequencer.next_page_address()
        return None

    async def _navigate(self, address: str) -> None:
        """Checkpoint, let the page settle, then hand the host a new address."""
        self._state = ExportState.NAVIGATING
        self._report_progress("Navigating to next page...", calculate_progress(self._run))

        # The next page load can only continue from what is stored here
        self._store.save(self._run)

        await asyncio.sleep(self._config.navigation_delay)
        logger.info(f"Navigating to {address}")
        self._host.navigate(address)

    def _finalize(self) -> None:
        """Render the collected records and hand the file to the host."""
        self._state = ExportState.FINALIZING
        run = self._run

        if not run.records:
            self._fail(NoRecordsError())
            return

        self._report_progress("Generating file...", 95)
        content = convert(run.records, run.format)
        filename = generate_filename(run.format, self._host.location)
        self._output_path = self._host.download(content, filename)

        logger.info(f"Exported {run.record_count} records to {filename}")
        self._finish(
            ExportState.DONE,
            f"Successfully exported {run.record_count} records!",
            100,
        )

    def _fail(self, error: Exception) -> None:
        if self._state.is_terminal:
            return
        self._error = str(error) if isinstance(error, ExportError) else f"Unexpected error: {error}"
        logger.error(f"Export failed: {self._error}")
        self._finish(ExportState.FAILED, f"Export failed: {self._error}", 0)

    def _finish(self, state: ExportState, message: str, percent: int) -> None:
        """Enter a terminal state, clearing the checkpoint exactly once."""
        if self._state.is_terminal:
            return
        self._state = state
        self._store.clear()
        self._report_progress(message, percent)

    def _discard_stale(self) -> None:
        """Drop any leftover export state before starting over."""
        self._store.clear()
        self._state = ExportState.IDLE
        self._run = None
        self._error = None
        self._output_path = None

    def _report_progress(self, message: str, percent: int) -> None:
        """Report progress via callback."""
        if self._progress_callback:
            self._progress_callback(message, percent)
