"""Export orchestration: state machine, session driver and control messages."""

from .export_orchestrator import (
    ExportOrchestrator,
    ExportState,
    ProgressCallback,
    calculate_progress,
)
from .messages import ControlMessage, MessageHandler
from .session import BrowsingSession, SessionResult

__all__ = [
    # Orchestrator
    "ExportOrchestrator",
    "ExportState",
    "ProgressCallback",
    "calculate_progress",
    # Session
    "BrowsingSession",
    "SessionResult",
    # Messages
    "ControlMessage",
    "MessageHandler",
]
