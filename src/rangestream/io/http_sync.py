"""Synchronous HTTP ranged reader using requests."""

import logging
from typing import Optional

import requests

from ..core.config import get_config
from ..core.util import parse_range_header
from .base import RangeNotSupportedError, RANGE_FALLBACK_MAX

logger = logging.getLogger(__name__)

# Module-level session for connection pooling
_session = None


def _get_session():
    """Get or create the global requests session."""
    global _session
    if _session is None:
        _session = requests.Session()
    return _session


class HTTPRangedReader:
    """Synchronous HTTP ranged reader. The request template is the URL."""

    def __init__(self, session: Optional[requests.Session] = None, timeout: Optional[float] = None):
        self.bytes_fetched = 0
        self.requests_made = 0
        self.timeout = timeout if timeout is not None else get_config().http_timeout
        self._session = session if session is not None else _get_session()

    def content_length(self, url: str) -> int:
        """Perform HEAD request and return Content-Length."""
        try:
            response = self._session.head(url, timeout=self.timeout, allow_redirects=True)
        except requests.RequestException as e:
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

    def ranged_read(self, url: str, range_header: str) -> bytes:
        """Fetch the byte range named by `range_header`."""
        try:
            response = self._session.get(url, headers={'Range': range_header}, timeout=self.timeout)
        except requests.RequestException as e:
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

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        # Session is shared, don't close it here
        pass


def open_http_reader(session: Optional[requests.Session] = None) -> HTTPRangedReader:
    """Create a synchronous HTTP ranged reader."""
    return HTTPRangedReader(session)
