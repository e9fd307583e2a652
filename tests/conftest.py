"""Shared pytest fixtures: a synthetic host and extractor for page loads."""

import asyncio
from pathlib import Path
from typing import Optional

import pytest

from capes_export.core.config import ExporterConfig
from capes_export.core.page_sequencer import PageSequencer, PaginationSignals
from capes_export.extractors.base_extractor import RecordExtractor
from capes_export.host.base import PageHost, PageSnapshot
from capes_export.state.checkpoint_store import CheckpointStore
from capes_export.types.records import Record

BASE_URL = "https://www.periodicos.capes.gov.br/index.php/acervo/buscador.html?q=machine+learning"

NEXT = PaginationSignals(next_enabled=True)
LAST = PaginationSignals(next_enabled=False)


def page_url(index: int) -> str:
    """URL of a listing page in the synthetic search."""
    return BASE_URL if index == 1 else f"{BASE_URL}&page={index}"


def make_record(title: str = "A Study of X", **fields) -> Record:
    """Build a record with sensible defaults."""
    return Record(title=title, **fields)


class FakeHost(PageHost):
    """In-memory host serving synthetic listing pages."""

    def __init__(
        self,
        signals_by_page: dict[int, PaginationSignals],
        location: str = BASE_URL,
    ):
        super().__init__(location)
        self.signals_by_page = signals_by_page
        self.downloads: list[tuple[str, str]] = []
        self.navigations: list[str] = []

    async def snapshot(self) -> PageSnapshot:
        index = PageSequencer(self.location).current_page_index()
        return PageSnapshot(
            location=self.location,
            html=f"<html><body>page {index}</body></html>",
            signals=self.signals_by_page.get(index, LAST),
        )

    def navigate(self, url: str) -> None:
        self.navigations.append(url)
        super().navigate(url)

    def download(self, content: str, filename: str) -> Optional[Path]:
        self.downloads.append((filename, content))
        return None


class FakeExtractor(RecordExtractor):
    """Extractor returning canned records per page index."""

    name = "fake"

    def __init__(self, records_by_page: dict[int, list[Record]], delay: float = 0.0):
        self.records_by_page = records_by_page
        self.delay = delay
        self.calls: list[int] = []

    async def extract(self, page: PageSnapshot) -> list[Record]:
        index = page.sequencer().current_page_index()
        self.calls.append(index)
        if self.delay:
            await asyncio.sleep(self.delay)
        return list(self.records_by_page.get(index, []))


@pytest.fixture
def config(tmp_path):
    """Exporter config with no delays and paths under tmp_path."""
    return ExporterConfig(
        navigation_delay=0,
        resume_delay=0,
        processing_timeout=5.0,
        output_dir=tmp_path / "exports",
        state_dir=tmp_path / "state",
    )


@pytest.fixture
def store(tmp_path):
    """Checkpoint store backed by a file under tmp_path."""
    return CheckpointStore(tmp_path / "state" / "capes_export_state.json")
