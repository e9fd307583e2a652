"""CAPES Research Exporter.

Walks a paginated CAPES periodical search listing, collects bibliographic
records page by page and exports them as RIS or BibTeX.
"""

__version__ = "0.1.0"

APP_NAME = "capes-export"
