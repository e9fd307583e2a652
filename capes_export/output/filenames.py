"""Export filename generation."""

import re
from datetime import datetime
from typing import Optional

import httpx

from ..types.records import ExportFormat

FILENAME_PREFIX = "capes"
DEFAULT_TERM = "capes-export"
MAX_TERM_LENGTH = 20


def get_timestamp(now: Optional[datetime] = None) -> str:
    """Compact timestamp for filenames, e.g. 20240131T142501."""
    return (now or datetime.now()).strftime("%Y%m%dT%H%M%S")


def generate_filename(
    export_format: ExportFormat,
    location: str,
    now: Optional[datetime] = None,
) -> str:
    """Build the download filename for an export.

    Args:
        export_format: Format being exported; decides the extension.
        location: Listing URL; its ``q`` parameter names the file.
        now: Timestamp override.

    Returns:
        Filename like ``capes_machine_learning_20240131T142501.ris``.
    """
    term = httpx.URL(location).params.get("q") or DEFAULT_TERM
    clean_term = re.sub(r"[^a-zA-Z0-9]", "_", term)[:MAX_TERM_LENGTH]
    return f"{FILENAME_PREFIX}_{clean_term}_{get_timestamp(now)}.{export_format.extension}"
