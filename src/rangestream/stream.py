"""Pull-based, seekable byte streams over ranged fetches."""

from __future__ import annotations
import asyncio
import logging
import threading

from .core.config import get_config
from .core.cursor import RangeCursor
from .core.model import ByteRange, FetchFailure, StreamClosedError, StreamState

logger = logging.getLogger(__name__)


class _RangeStreamBase:
    """Cursor, buffer and state shared by the sync and async streams."""

    def __init__(self, fetcher, total_length: int, *, chunk_size: int | None = None, position: int = 0):
        if chunk_size is None:
            chunk_size = get_config().chunk_size
        self._cursor = RangeCursor(total_length, chunk_size, position=position)
        self._fetcher = fetcher
        self._buffer = bytearray()
        self._state = StreamState.IDLE
        self._error: FetchFailure | None = None
        # bumped by every seek so an in-flight result can tell it went stale
        self._generation = 0

    # ------------------------------------------------------------------ #
    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def position(self) -> int:
        return self._cursor.position

    @property
    def total_length(self) -> int:
        return self._cursor.total_length

    @property
    def chunk_size(self) -> int:
        return self._cursor.chunk_size

    @property
    def buffered(self) -> int:
        return len(self._buffer)

    @property
    def error(self) -> FetchFailure | None:
        return self._error

    @property
    def closed(self) -> bool:
        return self._state in (StreamState.FAILED, StreamState.CLOSED)

    # --------------------------- seeking -------------------------------- #
    def set_chunk_size(self, nbytes: int) -> None:
        self._cursor.set_chunk_size(nbytes)

    def seek_forward(self, nbytes: int | None = None) -> int:
        """Drop buffered bytes and move the cursor forward (default: one chunk).

        Seeking past the end leaves the stream to report end-of-data on the
        next pull.
        """
        self._drain()
        self._generation += 1
        return self._cursor.forward(nbytes)

    def seek_back(self, nbytes: int | None = None) -> int:
        """Drop buffered bytes and move the cursor back (default: one chunk), not below 0."""
        self._drain()
        self._generation += 1
        return self._cursor.back(nbytes)

    def _drain(self) -> None:
        if self._buffer:
            logger.debug("Dropping %d buffered bytes", len(self._buffer))
            self._buffer.clear()

    # ------------------------- state machine ---------------------------- #
    def _set_state(self, state: StreamState) -> None:
        if state is not self._state:
            logger.debug("Stream %s -> %s", self._state.value, state.value)
            self._state = state

    def _ensure_open(self) -> None:
        if self._state is StreamState.CLOSED:
            raise StreamClosedError("Stream is closed")
        if self._state is StreamState.FAILED:
            raise StreamClosedError(f"Stream failed earlier: {self._error}")

    def _begin_fetch(self) -> ByteRange | None:
        self._ensure_open()
        if self._state is StreamState.EXHAUSTED:
            return None
        rng = self._cursor.next_range()
        if rng is None:
            self._set_state(StreamState.EXHAUSTED)
            return None
        self._set_state(StreamState.FETCHING)
        return rng

    def _fetch_failed(self, err: FetchFailure) -> None:
        if self._state is StreamState.CLOSED:
            raise StreamClosedError("Stream closed during fetch") from err
        logger.warning("Fetch failed, stream terminated: %s", err)
        self._error = err
        self._buffer.clear()
        self._set_state(StreamState.FAILED)

    def _fetch_abandoned(self, rng: ByteRange, generation: int) -> None:
        """Undo the cursor advance for a fetch that never delivered (e.g. cancelled)."""
        if self._state is not StreamState.FETCHING:
            return
        if generation == self._generation:
            self._cursor.position = rng.start
            logger.debug("Fetch of %s abandoned, cursor back to %d", rng.header, rng.start)
        self._set_state(StreamState.IDLE)

    def _fetch_done(self, rng: ByteRange, generation: int) -> bool:
        """Return True when the fetched bytes may be delivered."""
        if self._state is StreamState.CLOSED:
            raise StreamClosedError("Stream closed during fetch")
        self._set_state(StreamState.IDLE)
        if generation != self._generation:
            logger.debug("Discarding %s, cursor moved while it was in flight", rng.header)
            return False
        return True

    def _take(self, size: int) -> bytes:
        if size < 0 or size >= len(self._buffer):
            data = bytes(self._buffer)
            self._buffer.clear()
        else:
            data = bytes(self._buffer[:size])
            del self._buffer[:size]
        return data

    def _close(self) -> None:
        self._buffer.clear()
        self._set_state(StreamState.CLOSED)

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(state={self._state.value}, position={self.position}, "
                f"total_length={self.total_length}, chunk_size={self.chunk_size})")


class RangeReadStream(_RangeStreamBase):
    """Synchronous stream; the fetcher is a ChunkFetcher."""

    def __init__(self, fetcher, total_length: int, *, chunk_size: int | None = None, position: int = 0):
        super().__init__(fetcher, total_length, chunk_size=chunk_size, position=position)
        self._lock = threading.Lock()

    def _next_chunk(self) -> bytes:
        # caller holds the lock
        while True:
            rng = self._begin_fetch()
            if rng is None:
                return b""
            generation = self._generation
            try:
                data = self._fetcher.fetch(rng, self.total_length)
            except FetchFailure as e:
                self._fetch_failed(e)
                raise
            except BaseException:
                self._fetch_abandoned(rng, generation)
                raise
            if self._fetch_done(rng, generation):
                return data

    def pull(self) -> bytes:
        """Return the next chunk, or b"" once the object is consumed."""
        with self._lock:
            self._ensure_open()
            if self._buffer:
                return self._take(-1)
            return self._next_chunk()

    def read(self, size: int | None = -1) -> bytes:
        """Return up to `size` bytes (everything left when size < 0)."""
        if size is None:
            size = -1
        with self._lock:
            self._ensure_open()
            while size < 0 or len(self._buffer) < size:
                chunk = self._next_chunk()
                if not chunk:
                    break
                self._buffer.extend(chunk)
            return self._take(size)

    def __iter__(self):
        while chunk := self.pull():
            yield chunk

    def close(self) -> None:
        if self._state is not StreamState.CLOSED:
            self._close()
            self._fetcher.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class AsyncRangeReadStream(_RangeStreamBase):
    """Asynchronous stream; the fetcher is an AsyncChunkFetcher."""

    def __init__(self, fetcher, total_length: int, *, chunk_size: int | None = None, position: int = 0):
        super().__init__(fetcher, total_length, chunk_size=chunk_size, position=position)
        self._lock = asyncio.Lock()

    async def _next_chunk(self) -> bytes:
        while True:
            rng = self._begin_fetch()
            if rng is None:
                return b""
            generation = self._generation
            try:
                data = await self._fetcher.fetch(rng, self.total_length)
            except FetchFailure as e:
                self._fetch_failed(e)
                raise
            except BaseException:
                self._fetch_abandoned(rng, generation)
                raise
            if self._fetch_done(rng, generation):
                return data

    async def pull(self) -> bytes:
        """Return the next chunk, or b"" once the object is consumed."""
        async with self._lock:
            self._ensure_open()
            if self._buffer:
                return self._take(-1)
            return await self._next_chunk()

    async def read(self, size: int | None = -1) -> bytes:
        """Return up to `size` bytes (everything left when size < 0)."""
        if size is None:
            size = -1
        async with self._lock:
            self._ensure_open()
            while size < 0 or len(self._buffer) < size:
                chunk = await self._next_chunk()
                if not chunk:
                    break
                self._buffer.extend(chunk)
            return self._take(size)

    def __aiter__(self):
        return self

    async def __anext__(self) -> bytes:
        chunk = await self.pull()
        if not chunk:
            raise StopAsyncIteration
        return chunk

    def close(self) -> None:
        """Mark the stream closed; use aclose() to also release the reader."""
        self._close()

    async def aclose(self) -> None:
        if self._state is not StreamState.CLOSED:
            self._close()
            await self._fetcher.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
