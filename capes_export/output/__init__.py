"""Citation output: RIS and BibTeX rendering plus file delivery."""

from .bibtex import BIBTEX_TYPE_MAP, citation_key, escape_bibtex, record_to_bibtex, to_bibtex
from .converter import FORMAT_CONVERTERS, convert
from .document_writer import DocumentWriter
from .fields import build_notes, extract_year
from .filenames import generate_filename
from .ris import RIS_TYPE_MAP, record_to_ris, to_ris

__all__ = [
    # RIS
    "to_ris",
    "record_to_ris",
    "RIS_TYPE_MAP",
    # BibTeX
    "to_bibtex",
    "record_to_bibtex",
    "escape_bibtex",
    "citation_key",
    "BIBTEX_TYPE_MAP",
    # Shared fields
    "extract_year",
    "build_notes",
    # Dispatch
    "convert",
    "FORMAT_CONVERTERS",
    # Files
    "generate_filename",
    "DocumentWriter",
]
