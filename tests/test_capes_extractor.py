"""Tests for the CAPES listing extractor."""

import pytest

from capes_export.core.page_sequencer import PaginationSignals
from capes_export.extractors import (
    CapesRecordExtractor,
    get_extractor,
    is_listing_url,
    list_extractors,
    read_pagination_signals,
)
from capes_export.extractors.capes import normalize_document_kind, parse_metadata_line
from capes_export.host.base import PageSnapshot

LISTING_URL = "https://www.periodicos.capes.gov.br/index.php/acervo/buscador.html?q=soil"

LISTING_HTML = """
<html><body>
<div id="result-busca-W123">
  <div id="conteudo-W123">
    <span class="fw-semibold">Artigo</span>
    <a class="titulo-busca">  Soil carbon
        dynamics in <em>tropical</em> forests </a>
    <a class="view-autor">Silva, A.</a>
    <a class="view-autor"> Souza,  B. </a>
    <a class="view-autor"> </a>
    <p class="text-down-01">Sem metadados</p>
    <p class="text-down-01">2021 - Elsevier | Geoderma - v. 12</p>
    <span title="Acesso aberto"></span>
    <span title="Revisado por pares"></span>
  </div>
</div>
<div id="result-busca-W123-load"><div id="conteudo-loading">Loading placeholder title</div></div>
<div id="result-busca-W456">
  <div id="conteudo-W456">
    <span class="fw-semibold">Capítulo de livro</span>
    <a class="titulo-busca">Erosion models revisited</a>
  </div>
</div>
<div id="result-busca-W789">
  <div id="conteudo-W789">
    <a class="titulo-busca">Short</a>
  </div>
</div>
<div id="result-busca-W999"><p>No content container</p></div>
<div class="pagination-information">1 – 20 de 1.234</div>
<div class="pagination-arrows">
  <button aria-label="Página anterior" disabled></button>
  <button aria-label="Página seguinte"></button>
</div>
</body></html>
"""

LAST_PAGE_HTML = """
<div class="pagination-information">1221–1234 of 1234</div>
<div class="pagination-arrows">
  <button aria-label="Página seguinte" disabled></button>
</div>
"""


class TestCapesRecordExtractor:
    """Test record extraction from listing HTML."""

    @pytest.fixture
    def records(self):
        return CapesRecordExtractor().extract_html(LISTING_HTML)

    def test_keeps_only_real_results(self, records):
        assert [r.external_id for r in records] == ["W123", "W456"]

    def test_full_record(self, records):
        record = records[0]
        assert record.title == "Soil carbon dynamics in tropical forests"
        assert record.authors == ["Silva, A.", "Souza, B."]
        assert record.year == "2021"
        assert record.venue == "Geoderma"
        assert record.document_kind == "Article"
        assert record.open_access is True
        assert record.peer_reviewed is True

    def test_sparse_record(self, records):
        record = records[1]
        assert record.title == "Erosion models revisited"
        assert record.authors == []
        assert record.year == ""
        assert record.venue == ""
        assert record.document_kind == "Book Chapter"
        assert record.open_access is False
        assert record.peer_reviewed is False

    def test_empty_page(self):
        assert CapesRecordExtractor().extract_html("<html><body></body></html>") == []

    @pytest.mark.asyncio
    async def test_extract_snapshot(self):
        snapshot = PageSnapshot(location=LISTING_URL, html=LISTING_HTML)
        records = await CapesRecordExtractor().extract(snapshot)
        assert len(records) == 2


class TestParseMetadataLine:
    """Test metadata line splitting."""

    def test_year_and_venue(self):
        assert parse_metadata_line("2019 - Springer | Plant and Soil") == ("2019", "Plant and Soil")

    def test_trailing_segments_ignored(self):
        assert parse_metadata_line("2019 - Springer | Plant and Soil - 44(2)") == (
            "2019",
            "Plant and Soil",
        )

    def test_missing_venue(self):
        assert parse_metadata_line("2019 - Springer |") == ("2019", "")

    def test_not_metadata(self):
        assert parse_metadata_line("Springer | Plant and Soil") is None
        assert parse_metadata_line("2019 - Springer") is None


class TestDocumentKinds:
    """Test portal label normalization."""

    @pytest.mark.parametrize(
        "label,expected",
        [
            ("Artigo", "Article"),
            ("Capítulo de livro", "Book Chapter"),
            ("Carta", "Letter"),
            ("Errata", "Erratum"),
            ("Revisão", "Review"),
            ("", "Article"),
            ("Dataset", "Dataset"),
        ],
    )
    def test_labels(self, label, expected):
        assert normalize_document_kind(label) == expected


class TestPaginationSignals:
    """Test reading pagination cues from the page."""

    def test_enabled_next_button(self):
        signals = read_pagination_signals(LISTING_HTML)
        assert signals == PaginationSignals(next_enabled=True, range_text="1 – 20 de 1.234")

    def test_disabled_next_button(self):
        signals = read_pagination_signals(LAST_PAGE_HTML)
        assert signals.next_enabled is False
        assert signals.range_text == "1221–1234 of 1234"

    def test_no_pagination(self):
        assert read_pagination_signals("<p>nothing</p>") == PaginationSignals()

    def test_signals_drive_sequencer(self):
        snapshot = PageSnapshot(
            location=LISTING_URL, html=LAST_PAGE_HTML, signals=read_pagination_signals(LAST_PAGE_HTML)
        )
        sequencer = snapshot.sequencer()
        assert sequencer.has_more_pages() is False
        assert sequencer.estimate_total_records() == 1234


class TestListingUrl:
    """Test listing page recognition."""

    def test_search_url(self):
        assert is_listing_url(LISTING_URL) is True

    def test_busca_path(self):
        assert is_listing_url("https://www.periodicos.capes.gov.br/busca/avancada") is True

    def test_other_capes_page(self):
        assert is_listing_url("https://www.periodicos.capes.gov.br/index.php/sobre.html") is False

    def test_other_domain(self):
        assert is_listing_url("https://scholar.example.org/search?q=soil") is False
        assert is_listing_url("") is False


class TestRegistry:
    """Test the extractor registry."""

    def test_lookup(self):
        assert get_extractor("capes") is CapesRecordExtractor
        assert "capes" in list_extractors()

    def test_unknown(self):
        with pytest.raises(ValueError):
            get_extractor("scopus")
