"""Single range fetches over a ranged reader."""

from __future__ import annotations
import inspect
import logging
from typing import Any

from .model import ByteRange, FetchFailure

logger = logging.getLogger(__name__)


def _checked(byte_range: ByteRange, total_length: int, data) -> bytes:
    expected = byte_range.expected_length(total_length)
    if data is None or len(data) < expected:
        got = "nothing" if data is None else f"{len(data)} bytes"
        raise FetchFailure(byte_range, f"expected {expected} bytes, got {got}")
    if len(data) > expected:
        # object is longer than the declared total_length
        logger.debug("Trimming %d bytes past declared length from %s", len(data) - expected, byte_range.header)
        data = data[:expected]
    return bytes(data)


class ChunkFetcher:
    """Fetches one range per call through `reader.ranged_read`.

    With ``close_reader=True`` the fetcher owns the reader and closes it
    along with the stream.
    """

    def __init__(self, reader, request_template: Any = None, *, close_reader: bool = False):
        self.reader = reader
        self.request_template = request_template
        self.close_reader = close_reader

    def fetch(self, byte_range: ByteRange, total_length: int) -> bytes:
        logger.debug("Requesting %s", byte_range.header)
        try:
            data = self.reader.ranged_read(self.request_template, byte_range.header)
        except Exception as e:
            raise FetchFailure(byte_range, str(e) or type(e).__name__) from e
        return _checked(byte_range, total_length, data)

    def close(self) -> None:
        close = getattr(self.reader, "close", None) if self.close_reader else None
        if close is not None:
            close()


class AsyncChunkFetcher:
    """Async flavour of ChunkFetcher, over an AsyncRangedReader."""

    def __init__(self, reader, request_template: Any = None, *, close_reader: bool = False):
        self.reader = reader
        self.request_template = request_template
        self.close_reader = close_reader

    async def fetch(self, byte_range: ByteRange, total_length: int) -> bytes:
        logger.debug("Requesting %s", byte_range.header)
        try:
            data = await self.reader.ranged_read(self.request_template, byte_range.header)
        except Exception as e:
            raise FetchFailure(byte_range, str(e) or type(e).__name__) from e
        return _checked(byte_range, total_length, data)

    async def aclose(self) -> None:
        close = getattr(self.reader, "close", None) if self.close_reader else None
        if close is not None:
            result = close()
            if inspect.isawaitable(result):
                await result
