"""RIS export.

Each record becomes a block of ``TAG  - value`` lines terminated by
``ER  - ``. Lines inside a block end with CRLF as the RIS grammar
requires; blocks are separated by a blank line and the document ends
with a single newline.
"""

from typing import Iterable

from ..types import records as kinds
from ..types.records import Record
from .fields import NOTES_SEPARATOR, build_notes, extract_year

RIS_TYPE_MAP = {
    kinds.ARTICLE: "JOUR",
    kinds.BOOK_CHAPTER: "CHAP",
    kinds.LETTER: "NEWS",
    kinds.ERRATUM: "JOUR",
    kinds.REVIEW: "JOUR",
}
DEFAULT_RIS_TYPE = "JOUR"

LINE_TERMINATOR = "\r\n"
RECORD_SEPARATOR = "\n\n"


def _line(tag: str, value: str) -> str:
    return f"{tag:<2}  - {value}"


def record_to_ris(record: Record) -> str:
    """Convert a single record to an RIS block (without trailing newline)."""
    lines = [_line("TY", RIS_TYPE_MAP.get(record.document_kind, DEFAULT_RIS_TYPE))]

    if record.title:
        lines.append(_line("TI", record.title))

    for author in record.authors:
        lines.append(_line("AU", author))

    year = extract_year(record.year)
    if year:
        lines.append(_line("PY", year))

    if record.venue:
        lines.append(_line("T2", record.venue))
        lines.append(_line("JF", record.venue))

    notes = build_notes(record)
    if notes:
        lines.append(_line("N1", NOTES_SEPARATOR.join(notes)))

    lines.append(_line("ER", ""))
    return LINE_TERMINATOR.join(lines)


def to_ris(records: Iterable[Record]) -> str:
    """Convert records to an RIS document."""
    return RECORD_SEPARATOR.join(record_to_ris(record) for record in records) + "\n"
