"""Local file readers using mmap."""

import asyncio
import io
import mmap
from pathlib import Path
from typing import Any, BinaryIO, Union

from ..core.util import parse_range_header


class LocalRangedReader:
    """Synchronous local file reader using mmap.

    The file is fixed at construction, so the `request` argument of
    ranged_read() is ignored.
    """

    def __init__(self, source: Union[Path, str, BinaryIO]):
        self.bytes_fetched = 0
        self.requests_made = 0
        self._file = None
        self._mmap = None
        self._data = None  # For in-memory sources and empty files
        self._should_close_file = False

        if hasattr(source, 'read'):
            self._file = source
            if isinstance(source, io.BytesIO):
                # For BytesIO, read all data upfront
                self._data = source.getvalue()
        else:
            self._file = open(source, 'rb')
            self._should_close_file = True

    def _ensure_mmap(self):
        """Create mmap on first access."""
        if self._mmap is not None or self._data is not None:
            return
        if self._file is None:
            raise IOError("Reader is closed")
        if not self._file.seekable():
            raise IOError("File is not seekable, cannot use mmap")
        self._file.seek(0, 2)
        if self._file.tell() == 0:
            # mmap refuses empty files
            self._data = b""
            return
        try:
            self._mmap = mmap.mmap(self._file.fileno(), 0, access=mmap.ACCESS_READ)
        except (io.UnsupportedOperation, OSError):
            # Fallback for file objects without a usable fileno()
            self._file.seek(0)
            self._data = self._file.read()

    def _source(self):
        self._ensure_mmap()
        return self._mmap if self._mmap is not None else self._data

    @property
    def size(self) -> int:
        """Return the total size of the source in bytes."""
        return len(self._source())

    def ranged_read(self, request: Any, range_header: str) -> bytes:
        """Return the inclusive byte range named by `range_header`."""
        self.requests_made += 1
        start, end = parse_range_header(range_header)
        source = self._source()

        if start >= len(source):
            raise IOError(f"Range start {start} is beyond end of file ({len(source)} bytes)")

        data = bytes(source[start:end + 1])
        self.bytes_fetched += len(data)
        return data

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        """Close mmap and file if we opened it."""
        if self._mmap is not None:
            self._mmap.close()
            self._mmap = None
        if self._should_close_file and self._file is not None:
            self._file.close()
            self._file = None


class LocalAsyncRangedReader:
    """Asynchronous local file reader - thin wrapper around sync reader."""

    def __init__(self, source: Union[Path, str, BinaryIO]):
        self._sync_reader = LocalRangedReader(source)

    @property
    def size(self) -> int:
        """Return the total size of the source in bytes."""
        return self._sync_reader.size

    @property
    def bytes_fetched(self) -> int:
        return self._sync_reader.bytes_fetched

    @property
    def requests_made(self) -> int:
        return self._sync_reader.requests_made

    async def ranged_read(self, request: Any, range_header: str) -> bytes:
        """Return the inclusive byte range named by `range_header`."""
        return await asyncio.to_thread(self._sync_reader.ranged_read, request, range_header)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the underlying sync reader."""
        await asyncio.to_thread(self._sync_reader.close)


def open_local_reader(source: Union[Path, str, BinaryIO]) -> LocalRangedReader:
    """Create a synchronous local ranged reader."""
    return LocalRangedReader(source)


async def open_local_reader_async(source: Union[Path, str, BinaryIO]) -> LocalAsyncRangedReader:
    """Create an asynchronous local ranged reader."""
    return LocalAsyncRangedReader(source)
