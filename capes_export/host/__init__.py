"""Browsing-context hosts the exporter runs inside."""

from .base import PageHost, PageSnapshot
from .http_host import HttpPageHost

__all__ = ["PageHost", "PageSnapshot", "HttpPageHost"]
