"""Durable checkpoint storage for the in-flight export.

Holds a single slot: starting a new export overwrites whatever was there.
The slot is a JSON file, so it outlives the orchestrator instance that
wrote it and lets the next page load pick the export back up.
"""

import logging
from pathlib import Path
from typing import Optional

import orjson
import platformdirs
from pydantic import ValidationError

from .. import APP_NAME
from ..core.errors import CheckpointError
from ..types.run import Checkpoint, ExportRun

logger = logging.getLogger(__name__)

APP_AUTHOR = "capes-export"
STORAGE_KEY = "capes_export_state"


def get_state_dir() -> Path:
    """Get the platform-specific state directory."""
    return Path(platformdirs.user_state_dir(APP_NAME, APP_AUTHOR))


def get_checkpoint_path(state_dir: Optional[Path] = None) -> Path:
    """Get the path to the checkpoint file."""
    return (state_dir or get_state_dir()) / f"{STORAGE_KEY}.json"


class CheckpointStore:
    """Single-slot persistence for one ExportRun."""

    def __init__(self, path: Optional[Path] = None):
        """Initialize the checkpoint store.

        Args:
            path: Path to the checkpoint file. Uses default if None.
        """
        self._path = path or get_checkpoint_path()

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        """Check whether a checkpoint is currently stored."""
        return self._path.exists()

    def save(self, run: ExportRun) -> None:
        """Persist the run, overwriting any previous checkpoint.

        Failures are logged and swallowed; the run carries on in memory.
        """
        try:
            payload = run.to_checkpoint().model_dump(by_alias=True, mode="json")
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "wb") as f:
                f.write(orjson.dumps(payload))
            logger.debug(
                f"Saved checkpoint: {run.record_count} records, "
                f"{run.page_count} pages -> {self._path}"
            )
        except (OSError, orjson.JSONEncodeError) as e:
            logger.warning(f"Failed to save export state: {e}")

    def load(self) -> Optional[ExportRun]:
        """Load the stored run.

        Returns:
            The run, or None if nothing is stored or the checkpoint is
            unreadable. An unreadable checkpoint is also cleared.
        """
        if not self._path.exists():
            return None

        try:
            return ExportRun.from_checkpoint(self._read())
        except (OSError, CheckpointError) as e:
            logger.warning(f"Failed to load export state: {e}")
            self.clear()
            return None

    def clear(self) -> None:
        """Remove the checkpoint. Safe to call when nothing is stored."""
        try:
            self._path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to clear export state: {e}")

    def _read(self) -> Checkpoint:
        """Read and validate the checkpoint file."""
        with open(self._path, "rb") as f:
            raw = f.read()

        try:
            return Checkpoint.model_validate(orjson.loads(raw))
        except orjson.JSONDecodeError as e:
            raise CheckpointError(f"Checkpoint is not valid JSON: {e}") from e
        except ValidationError as e:
            raise CheckpointError(
                f"Checkpoint failed validation ({e.error_count()} errors)"
            ) from e
