"""Exceptions raised by the export pipeline."""


class ExportError(Exception):
    """Base class for export failures."""


class NoRecordsError(ExportError):
    """The listing was exhausted without collecting a single record."""

    def __init__(self, message: str = "No records found to export"):
        super().__init__(message)


class ExportTimeoutError(ExportError):
    """The watchdog fired before a page finished processing."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"Export timed out after {timeout:g}s")


class CheckpointError(ExportError):
    """A persisted checkpoint could not be read back."""
