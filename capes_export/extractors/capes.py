"""Record extraction for the CAPES periodicals portal.

Parses the portal's search-result markup with BeautifulSoup. The selectors
below track the live site and break whenever its markup changes; nothing
outside this module depends on them.
"""

import asyncio
import logging
import re
from typing import Optional

import httpx
from bs4 import BeautifulSoup, Tag

from ..core.page_sequencer import PaginationSignals
from ..host.base import PageSnapshot
from ..types import records as kinds
from ..types.records import Record
from .base_extractor import RecordExtractor

logger = logging.getLogger(__name__)

CAPES_DOMAIN = "periodicos.capes.gov.br"

SELECTORS = {
    "article": 'div[id^="result-busca-"]:not([id$="-load"])',
    "content": 'div[id^="conteudo-"]',
    "title": ".titulo-busca",
    "authors": ".view-autor",
    "metadata": "p.text-down-01",
    "next_button": '.pagination-arrows button[aria-label*="seguinte"]:not([disabled])',
    "page_info": ".pagination-information",
    "open_access": '[title="Acesso aberto"], [id*="open-acess-item"]',
    "peer_reviewed": '[title="Revisado por pares"], [id*="peer-reviewed-item"]',
    "document_type": ".fw-semibold",
}

ARTICLE_ID_PREFIX = "result-busca-"
MIN_TITLE_LENGTH = 6

# Portal labels -> document kind vocabulary
DOCUMENT_KIND_LABELS = {
    "Artigo": kinds.ARTICLE,
    "Capítulo de livro": kinds.BOOK_CHAPTER,
    "Carta": kinds.LETTER,
    "Errata": kinds.ERRATUM,
    "Revisão": kinds.REVIEW,
}

_TAG_PATTERN = re.compile(r"</?[^>]+>")


def is_listing_url(url: str) -> bool:
    """Check if a URL is a CAPES search results page."""
    if not url or CAPES_DOMAIN not in url:
        return False

    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL:
        return False

    return "q" in parsed.params or "busca" in parsed.path


def clean_text(element: Optional[Tag]) -> str:
    """Get trimmed, whitespace-collapsed text from an element."""
    if element is None:
        return ""
    text = _TAG_PATTERN.sub("", element.get_text())
    return " ".join(text.split())


def parse_metadata_line(text: str) -> Optional[tuple[str, str]]:
    """Split a ``"<year> - <publisher> | <venue>"`` line.

    Returns:
        ``(year, venue)`` with either part possibly empty, or None if the
        line is not a metadata line.
    """
    if " - " not in text or "|" not in text:
        return None

    year_part, rest = text.split(" - ", 1)
    remaining = rest.split(" - ", 1)[0].split(" | ")
    venue = remaining[1].strip() if len(remaining) >= 2 else ""
    return year_part.strip(), venue


def normalize_document_kind(label: str) -> str:
    """Map a portal document label to the document kind vocabulary."""
    if not label:
        return kinds.ARTICLE
    return DOCUMENT_KIND_LABELS.get(label, label)


def read_pagination_signals(html: str) -> PaginationSignals:
    """Read the next-page control and range indicator from a listing page."""
    soup = BeautifulSoup(html, "html.parser")
    info = soup.select_one(SELECTORS["page_info"])
    return PaginationSignals(
        next_enabled=soup.select_one(SELECTORS["next_button"]) is not None,
        range_text=clean_text(info) if info is not None else None,
    )


class CapesRecordExtractor(RecordExtractor):
    """Extracts result records from a CAPES search listing page."""

    name = "capes"
    description = "CAPES periodicals portal search results"

    async def extract(self, page: PageSnapshot) -> list[Record]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.extract_html, page.html)

    def extract_html(self, html: str) -> list[Record]:
        """Synchronously extract records from listing HTML."""
        soup = BeautifulSoup(html, "html.parser")
        records = []

        for index, element in enumerate(soup.select(SELECTORS["article"])):
            content = element.select_one(SELECTORS["content"])
            if content is None:
                continue

            record = self._extract_record(element, content, index)
            if len(record.title) >= MIN_TITLE_LENGTH:
                records.append(record)
            else:
                logger.debug(f"Skipping result {index}: title too short ({record.title!r})")

        return records

    def _extract_record(self, element: Tag, content: Tag, index: int) -> Record:
        """Build a record from one result container."""
        external_id = (element.get("id") or "").replace(ARTICLE_ID_PREFIX, "")
        year, venue = self._extract_metadata(content)

        return Record(
            title=clean_text(content.select_one(SELECTORS["title"])),
            authors=[
                text
                for text in (clean_text(a) for a in content.select(SELECTORS["authors"]))
                if text
            ],
            year=year,
            venue=venue,
            document_kind=normalize_document_kind(
                clean_text(content.select_one(SELECTORS["document_type"]))
            ),
            open_access=content.select_one(SELECTORS["open_access"]) is not None,
            peer_reviewed=content.select_one(SELECTORS["peer_reviewed"]) is not None,
            external_id=external_id or f"article_{index}",
        )

    def _extract_metadata(self, content: Tag) -> tuple[str, str]:
        """Find the first metadata line and split it into year and venue."""
        for meta in content.select(SELECTORS["metadata"]):
            parsed = parse_metadata_line(clean_text(meta))
            if parsed is not None:
                return parsed
        return "", ""
