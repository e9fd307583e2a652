"""Control messages sent to a browsing session.

Mirrors the message channel between the popup and the page: the caller
asks for an export and gets an answer straight away, while the export
itself keeps running in the background.
"""

import asyncio
import logging
from typing import Any, Optional

from pydantic import BaseModel, ValidationError, field_validator

from .. import APP_NAME, __version__
from ..types.records import ExportFormat
from .session import BrowsingSession, SessionResult

logger = logging.getLogger(__name__)

EXPORT_ACTION = "export"
VERSION_ACTION = "getVersion"


class ControlMessage(BaseModel):
    """Message from the caller to the exporter."""

    action: str
    format: ExportFormat = ExportFormat.RIS

    @field_validator("format", mode="before")
    @classmethod
    def _default_format(cls, value: Any) -> ExportFormat:
        return ExportFormat.parse(value)


class MessageHandler:
    """Dispatches control messages to a browsing session."""

    def __init__(self, session: BrowsingSession):
        self._session = session
        self._task: Optional[asyncio.Task] = None

    def handle(self, message: dict[str, Any]) -> dict[str, Any]:
        """Handle one message and respond synchronously.

        Must be called from within a running event loop; an export is
        scheduled as a task and the response is returned before any page
        is processed.
        """
        try:
            parsed = ControlMessage.model_validate(message)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed control message: {e.error_count()} errors")
            return {"success": False}

        if parsed.action == EXPORT_ACTION:
            logger.info(f"Export requested ({parsed.format.value})")
            # Only one export may drive the host and the checkpoint slot
            if self._task is not None and not self._task.done():
                logger.info("Cancelling export in progress")
                self._task.cancel()
            self._task = asyncio.get_running_loop().create_task(
                self._session.export(parsed.format)
            )
            return {"success": True}

        if parsed.action == VERSION_ACTION:
            return {"name": APP_NAME, "version": __version__}

        logger.debug(f"Ignoring unknown action: {parsed.action!r}")
        return {"success": False}

    async def wait(self) -> Optional[SessionResult]:
        """Wait for the most recently scheduled export to finish."""
        if self._task is None:
            return None
        return await self._task
