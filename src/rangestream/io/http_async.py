"""Asynchronous HTTP ranged reader using httpx."""

import logging
from typing import Optional

import httpx

from ..core.config import get_config
from ..core.util import parse_range_header
from .base import RangeNotSupportedError, RANGE_FALLBACK_MAX

logger = logging.getLogger(__name__)

# Global async client
_client: Optional[httpx.AsyncClient] = None


def _get_client() -> httpx.AsyncClient:
    """Get or create the global httpx AsyncClient."""
    global _client
    if _client is None:
        _client = httpx.AsyncClient(timeout=get_config().http_timeout, follow_redirects=True)
    return _client


class HTTPAsyncRangedReader:
    """Asynchronous HTTP ranged reader. The request template is the URL."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self.bytes_fetched = 0
        self.requests_made = 0
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client if self._client is not None else _get_client()

    async def content_length(self, url: str) -> int:
        """Perform HEAD request and return Content-Length."""
        try:
            response = await self.client.head(url)
        except httpx.RequestError as e:
            raise IOError(f"HEAD request failed: {e}") from e
        self.requests_made += 1

        if response.status_code >= 400:
            raise IOError(f"HEAD request failed with status {response.status_code}")

        content_length_header = response.headers.get('content-length')
        if content_length_header is None:
            raise IOError(f"HEAD response for {url} has no Content-Length")
        if response.headers.get('accept-ranges', '').lower() != 'bytes':
            logger.debug("%s does not advertise byte ranges", url)
        return int(content_length_header)

    async def ranged_read(self, url: str, range_header: str) -> bytes:
        """Fetch the byte range named by `range_header`."""
        try:
            response = await self.client.get(url, headers={'Range': range_header})
        except httpx.RequestError as e:
            raise IOError(f"Range request failed: {e}") from e
        self.requests_made += 1

        if response.status_code == 206:
            data = response.content
        elif response.status_code == 200:
            # Server ignored Range and sent the whole body
            data = response.content
            if len(data) >= RANGE_FALLBACK_MAX:
                raise RangeNotSupportedError("Server doesn't support ranges and file is too large")
            start, end = parse_range_header(range_header)
            data = data[start:end + 1]
        else:
            raise IOError(f"Range request failed with status {response.status_code}")

        self.bytes_fetched += len(data)
        return data

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        # Client is shared, don't close it here
        pass


async def open_http_reader_async(client: Optional[httpx.AsyncClient] = None) -> HTTPAsyncRangedReader:
    """Create an asynchronous HTTP ranged reader."""
    return HTTPAsyncRangedReader(client)


async def close_global_client():
    """Close the global httpx client. Call this at application shutdown."""
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
