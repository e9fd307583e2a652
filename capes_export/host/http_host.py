"""HTTP-backed page host.

Fetches listing pages with httpx, standing in for the browser tab the
exporter would otherwise run inside. Provides:
- Automatic retry with exponential backoff
- Rate limit handling (429) honouring Retry-After
- One fetch per page load (the snapshot is cached until navigation)
"""

import asyncio
import logging
from pathlib import Path
from typing import Callable, Optional

import httpx

from ..core.config import ExporterConfig, get_config
from ..core.page_sequencer import PaginationSignals
from ..output.document_writer import DocumentWriter
from .base import PageHost, PageSnapshot

logger = logging.getLogger(__name__)

# Retry configuration
MAX_RETRIES = 3
RETRY_DELAY = 1.0  # Base delay in seconds
RETRY_BACKOFF = 2.0  # Exponential backoff multiplier
RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}
DEFAULT_RATE_LIMIT_DELAY = 60.0  # Default delay for 429 when no Retry-After header

SignalReader = Callable[[str], PaginationSignals]


class HttpPageHost(PageHost):
    """Page host that loads listing pages over HTTP."""

    def __init__(
        self,
        location: str,
        signal_reader: SignalReader,
        writer: Optional[DocumentWriter] = None,
        client: Optional[httpx.AsyncClient] = None,
        config: Optional[ExporterConfig] = None,
        retry_delay: float = RETRY_DELAY,
    ):
        """Initialize the host.

        Args:
            location: URL of the first listing page.
            signal_reader: Reads pagination cues out of page HTML.
            writer: Destination for downloads. Defaults to the configured output dir.
            client: HTTP client. One is created (and owned) if None.
            config: Exporter configuration. If None, loads from environment.
            retry_delay: Base delay between retries.
        """
        super().__init__(location)
        self._config = config or get_config()
        self._signal_reader = signal_reader
        self._writer = writer or DocumentWriter(self._config.output_dir)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=self._config.http_timeout,
            follow_redirects=True,
            headers={"User-Agent": self._config.user_agent},
        )
        self._retry_delay = retry_delay
        self._snapshot: Optional[PageSnapshot] = None

    async def snapshot(self) -> PageSnapshot:
        """Fetch (once per page load) and render the current page."""
        if self._snapshot is None:
            html = await self._fetch(self.location)
            self._snapshot = PageSnapshot(
                location=self.location,
                html=html,
                signals=self._signal_reader(html),
            )
        return self._snapshot

    def download(self, content: str, filename: str) -> Path:
        return self._writer.write(content, filename)

    def _on_page_unload(self) -> None:
        self._snapshot = None

    async def aclose(self) -> None:
        """Close the HTTP client if this host created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpPageHost":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _get_retry_delay(self, response: httpx.Response, attempt: int) -> float:
        """Calculate delay before retry."""
        if response.status_code == 429:
            # Honor Retry-After header if present
            retry_after = response.headers.get("Retry-After")
            if retry_after:
                try:
                    return float(retry_after)
                except ValueError:
                    pass
            return DEFAULT_RATE_LIMIT_DELAY

        # Exponential backoff for other errors
        return self._retry_delay * (RETRY_BACKOFF**attempt)

    async def _fetch(self, url: str) -> str:
        """GET a page with retry logic.

        Raises:
            httpx.HTTPStatusError: Final response was an error status.
            httpx.RequestError: Every attempt failed at the transport level.
        """
        if self._config.http_debug:
            logger.debug(f"GET {url}")

        last_error: Optional[Exception] = None
        last_response: Optional[httpx.Response] = None

        for attempt in range(MAX_RETRIES):
            try:
                response = await self._client.get(url)
            except httpx.TimeoutException as e:
                last_error = e
                logger.debug(f"Request timeout (attempt {attempt + 1}/{MAX_RETRIES})")
                await asyncio.sleep(self._retry_delay * (RETRY_BACKOFF**attempt))
                continue
            except httpx.RequestError as e:
                last_error = e
                logger.debug(f"Request error: {e} (attempt {attempt + 1}/{MAX_RETRIES})")
                await asyncio.sleep(self._retry_delay * (RETRY_BACKOFF**attempt))
                continue

            if self._config.http_debug:
                logger.debug(f"Response status: {response.status_code}")

            if response.status_code in RETRYABLE_STATUS_CODES:
                last_response = response
                delay = self._get_retry_delay(response, attempt)
                logger.debug(
                    f"Got {response.status_code}, retrying in {delay}s "
                    f"(attempt {attempt + 1}/{MAX_RETRIES})"
                )
                await asyncio.sleep(delay)
                continue

            response.raise_for_status()
            return response.text

        # All retries exhausted
        if last_response is not None:
            last_response.raise_for_status()
        raise last_error or httpx.RequestError(f"Max retries exceeded for {url}")
