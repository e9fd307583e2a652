"""Page sequencing for paginated result listings.

Derives the current page from the listing URL, decides whether another
page exists and builds the address of the next one. Two signals feed the
decision:

- an enabled "next page" control, which is authoritative when present
- a textual range indicator such as ``"1–20 of 345"`` (or the site's
  Portuguese ``"1–20 de 345"``), used when no enabled control exists

When the two disagree the control wins, so a stale total cannot end an
export early.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

PAGE_PARAM = "page"

_NUMBER = r"(\d[\d.,]*)"
RANGE_PATTERN = re.compile(
    rf"{_NUMBER}\s*[–-]\s*{_NUMBER}\s*(?:of|de)\s*{_NUMBER}", re.IGNORECASE
)
TOTAL_PATTERN = re.compile(rf"(?:of|de)\s*{_NUMBER}", re.IGNORECASE)


@dataclass(frozen=True)
class PaginationSignals:
    """Pagination cues read from a rendered listing page."""

    next_enabled: bool = False
    range_text: Optional[str] = None


def _to_int(text: str) -> int:
    """Parse a count that may carry thousands separators."""
    return int(re.sub(r"\D", "", text))


def parse_range_indicator(text: Optional[str]) -> Optional[tuple[int, int, int]]:
    """Parse ``"A–B of T"`` into ``(A, B, T)``.

    Returns:
        The three numbers, or None if the text does not match.
    """
    if not text:
        return None
    match = RANGE_PATTERN.search(text)
    if not match:
        return None
    return tuple(_to_int(group) for group in match.groups())


class PageSequencer:
    """Answers pagination questions for one loaded listing page."""

    def __init__(self, location: str, signals: Optional[PaginationSignals] = None):
        """Initialize the sequencer.

        Args:
            location: Full URL of the current listing page.
            signals: Pagination cues from the page. No cues means no next page.
        """
        self._url = httpx.URL(location)
        self._signals = signals or PaginationSignals()

    @property
    def location(self) -> str:
        return str(self._url)

    def current_page_index(self) -> int:
        """Get the 1-based page index from the URL, defaulting to 1."""
        raw = self._url.params.get(PAGE_PARAM)
        if raw is None:
            return 1
        try:
            index = int(raw.strip())
        except ValueError:
            logger.debug(f"Ignoring invalid page parameter: {raw!r}")
            return 1
        return index if index >= 1 else 1

    def has_more_pages(self) -> bool:
        """Check whether the listing continues past the current page."""
        if self._signals.next_enabled:
            return True

        parsed = parse_range_indicator(self._signals.range_text)
        if parsed is None:
            return False

        _, last_shown, total = parsed
        return last_shown < total

    def next_page_address(self) -> str:
        """Build the URL of the following page, keeping all other parameters."""
        next_index = self.current_page_index() + 1
        return str(self._url.copy_set_param(PAGE_PARAM, str(next_index)))

    def estimate_total_records(self) -> int:
        """Get the listing's total hit count, or 0 if it is not shown."""
        text = self._signals.range_text
        if not text:
            return 0

        parsed = parse_range_indicator(text)
        if parsed is not None:
            return parsed[2]

        match = TOTAL_PATTERN.search(text)
        return _to_int(match.group(1)) if match else 0
