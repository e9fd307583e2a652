"""BibTeX export."""

import re
from typing import Iterable

from ..types import records as kinds
from ..types.records import Record
from .fields import NOTES_SEPARATOR, build_notes, extract_year

BIBTEX_TYPE_MAP = {
    kinds.ARTICLE: "article",
    kinds.BOOK_CHAPTER: "inbook",
    kinds.LETTER: "article",
    kinds.ERRATUM: "article",
    kinds.REVIEW: "article",
}
DEFAULT_BIBTEX_TYPE = "article"

UNKNOWN_YEAR = "unknown"

# Backslash must go first so later substitutions are not escaped again
_ESCAPES = (
    ("\\", "\\\\"),
    ("{", "\\{"),
    ("}", "\\}"),
    ("$", "\\$"),
    ("&", "\\&"),
    ("%", "\\%"),
    ("#", "\\#"),
)

_KEY_STRIP = re.compile(r"[^a-z0-9\s]")


def escape_bibtex(value: str) -> str:
    """Backslash-escape BibTeX-significant characters."""
    for char, replacement in _ESCAPES:
        value = value.replace(char, replacement)
    return value


def citation_key(record: Record) -> str:
    """Derive a citation key from the title and year.

    Takes the first three title words longer than three characters and
    appends the year (or ``unknown``). Collisions are not resolved.
    """
    cleaned = _KEY_STRIP.sub("", record.title.lower())
    words = [word for word in cleaned.split() if len(word) > 3][:3]
    return "".join(words) + (extract_year(record.year) or UNKNOWN_YEAR)


def record_to_bibtex(record: Record) -> str:
    """Convert a single record to a BibTeX entry (without trailing newline)."""
    entry_type = BIBTEX_TYPE_MAP.get(record.document_kind, DEFAULT_BIBTEX_TYPE)
    lines = [f"@{entry_type}{{{citation_key(record)},"]

    lines.append(f"  title = {{{escape_bibtex(record.title)}}},")

    if record.authors:
        lines.append(f"  author = {{{escape_bibtex(' and '.join(record.authors))}}},")

    if record.venue:
        lines.append(f"  journal = {{{escape_bibtex(record.venue)}}},")

    year = extract_year(record.year)
    if year:
        lines.append(f"  year = {{{year}}},")

    notes = build_notes(record)
    if notes:
        lines.append(f"  note = {{{escape_bibtex(NOTES_SEPARATOR.join(notes))}}},")

    lines.append("}")
    return "\n".join(lines)


def to_bibtex(records: Iterable[Record]) -> str:
    """Convert records to a BibTeX document, skipping untitled records."""
    entries = [record_to_bibtex(record) for record in records if record.title]
    return "\n\n".join(entries) + "\n"
