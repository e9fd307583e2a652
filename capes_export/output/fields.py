"""Field helpers shared by the citation formats."""

import re
from typing import Optional

from ..types.records import Record

YEAR_PATTERN = re.compile(r"(\d{4})")

EXTERNAL_ID_LABEL = "CAPES ID"
NOTES_SEPARATOR = "; "


def extract_year(raw: Optional[str]) -> Optional[str]:
    """Pull the first 4-digit run out of a raw year string.

    Returns:
        The 4-digit year, or None for empty or year-less text such as "n.d.".
    """
    if not raw:
        return None
    match = YEAR_PATTERN.search(raw)
    return match.group(1) if match else None


def build_notes(record: Record) -> list[str]:
    """Collect the note fragments for a record, in fixed order."""
    notes = []
    if record.open_access:
        notes.append("Open Access")
    if record.peer_reviewed:
        notes.append("Peer Reviewed")
    if record.external_id:
        notes.append(f"{EXTERNAL_ID_LABEL}: {record.external_id}")
    return notes
