"""Tests for the browsing session driver.

Includes an integration test running the CAPES extractor against an
httpx mock transport.
"""

import httpx
import pytest

from capes_export.extractors import CapesRecordExtractor, read_pagination_signals
from capes_export.host.http_host import HttpPageHost
from capes_export.orchestration import BrowsingSession, ExportState
from capes_export.output.document_writer import DocumentWriter
from capes_export.types.records import ExportFormat

from conftest import BASE_URL, LAST, NEXT, FakeExtractor, FakeHost, make_record


def make_session(host, extractor, store, config):
    return BrowsingSession(host, lambda: extractor, store, config=config)


class TestBrowsingSession:
    """Test exports spanning several page loads."""

    @pytest.mark.asyncio
    async def test_three_page_export(self, store, config):
        host = FakeHost({1: NEXT, 2: NEXT, 3: LAST})
        extractor = FakeExtractor({
            1: [make_record("Paper One"), make_record("Paper Two")],
            2: [make_record("Paper Three")],
            3: [make_record("Paper Four")],
        })

        result = await make_session(host, extractor, store, config).export(ExportFormat.RIS)

        assert result.success
        assert result.record_count == 4
        assert result.page_loads == 3
        assert result.next_location is None
        assert extractor.calls == [1, 2, 3]
        assert "page=3" in host.location
        assert not store.exists()

        content = host.downloads[0][1]
        titles = [line[6:] for line in content.split("\r\n") if line.startswith("TI  - ")]
        assert titles == ["Paper One", "Paper Two", "Paper Three", "Paper Four"]

    @pytest.mark.asyncio
    async def test_empty_last_page(self, store, config):
        host = FakeHost({1: NEXT, 2: LAST})
        record = make_record(
            "A Study of X",
            authors=["Smith, J."],
            year="2020",
            venue="Journal Y",
            open_access=True,
            external_id="123",
        )
        extractor = FakeExtractor({1: [record], 2: []})

        result = await make_session(host, extractor, store, config).export(ExportFormat.RIS)

        assert result.success
        assert host.downloads[0][1] == (
            "TY  - JOUR\r\n"
            "TI  - A Study of X\r\n"
            "AU  - Smith, J.\r\n"
            "PY  - 2020\r\n"
            "T2  - Journal Y\r\n"
            "JF  - Journal Y\r\n"
            "N1  - Open Access; CAPES ID: 123\r\n"
            "ER  - \n"
        )

    @pytest.mark.asyncio
    async def test_empty_middle_page(self, store, config):
        host = FakeHost({1: NEXT, 2: NEXT, 3: LAST})
        extractor = FakeExtractor({1: [make_record("Early")], 3: [make_record("Late")]})

        result = await make_session(host, extractor, store, config).export(ExportFormat.BIBTEX)

        assert result.success
        assert result.record_count == 2
        assert result.page_loads == 3

    @pytest.mark.asyncio
    async def test_failure_reported(self, store, config):
        host = FakeHost({1: NEXT, 2: LAST})
        extractor = FakeExtractor({})

        result = await make_session(host, extractor, store, config).export(ExportFormat.RIS)

        assert result.state is ExportState.FAILED
        assert not result.success
        assert result.error == "No records found to export"

    @pytest.mark.asyncio
    async def test_page_load_budget_suspends_export(self, store, config):
        config.max_page_loads = 2
        host = FakeHost({1: NEXT, 2: NEXT, 3: LAST})
        extractor = FakeExtractor({i: [make_record(f"Paper {i}")] for i in (1, 2, 3)})

        result = await make_session(host, extractor, store, config).export(ExportFormat.RIS)

        assert result.suspended
        assert result.page_loads == 2
        assert result.record_count == 2
        assert "page=3" in result.next_location
        assert store.load().visited_pages == {1, 2}

        # Continue from where the budget ran out
        config.max_page_loads = 500
        next_host = FakeHost({1: NEXT, 2: NEXT, 3: LAST}, location=result.next_location)
        resumed = await make_session(next_host, extractor, store, config).on_page_load()

        assert resumed.success
        assert resumed.record_count == 3
        assert extractor.calls == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_page_load_without_export(self, store, config):
        host = FakeHost({1: NEXT})
        extractor = FakeExtractor({1: [make_record()]})

        result = await make_session(host, extractor, store, config).on_page_load()

        assert result.state is ExportState.IDLE
        assert not result.success and not result.suspended
        assert result.error is None
        assert extractor.calls == []


LISTING_PAGE = """
<html><body>
<div id="result-busca-A1">
  <div id="conteudo-A1">
    <span class="fw-semibold">Artigo</span>
    <a class="titulo-busca">Neural networks for crop yield</a>
    <a class="view-autor">Lima, C.</a>
    <p class="text-down-01">2022 - MDPI | Agronomy</p>
    <span title="Acesso aberto"></span>
  </div>
</div>
<div class="pagination-information">1–1 de 2</div>
<div class="pagination-arrows"><button aria-label="Próxima página seguinte"></button></div>
</body></html>
"""

LAST_LISTING_PAGE = """
<html><body>
<div id="result-busca-B2">
  <div id="conteudo-B2">
    <span class="fw-semibold">Capítulo de livro</span>
    <a class="titulo-busca">Machine learning &amp; soil science</a>
    <a class="view-autor">Costa, D.</a>
    <a class="view-autor">Rocha, E.</a>
    <p class="text-down-01">2019 - Springer | Soil Informatics</p>
  </div>
</div>
<div class="pagination-information">2–2 de 2</div>
<div class="pagination-arrows"><button aria-label="Página seguinte" disabled></button></div>
</body></html>
"""


class TestHttpIntegration:
    """Run a full export over HTTP against a mock transport."""

    @pytest.mark.asyncio
    async def test_bibtex_export_over_http(self, store, config, tmp_path):
        requested = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(request.url.params.get("page"))
            if request.url.params.get("page") == "2":
                return httpx.Response(200, text=LAST_LISTING_PAGE)
            return httpx.Response(200, text=LISTING_PAGE)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        writer = DocumentWriter(tmp_path / "exports")

        async with client:
            host = HttpPageHost(
                BASE_URL, read_pagination_signals, writer=writer, client=client, config=config
            )
            session = BrowsingSession(host, CapesRecordExtractor, store, config=config)
            result = await session.export(ExportFormat.BIBTEX)

        assert result.success
        assert requested == [None, "2"]
        assert result.output_path.parent == tmp_path / "exports"
        assert result.output_path.suffix == ".bib"

        content = result.output_path.read_text(encoding="utf-8")
        assert "@article{neuralnetworkscrop2022," in content
        assert "  note = {Open Access; CAPES ID: A1}," in content
        assert "@inbook{machinelearningsoil2019," in content
        assert "  title = {Machine learning \\& soil science}," in content
        assert "  author = {Costa, D. and Rocha, E.}," in content
