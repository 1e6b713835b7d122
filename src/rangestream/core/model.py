from __future__ import annotations
import enum
from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class ByteRange:
    start: int
    end: int                   # inclusive, may equal total_length

    @property
    def header(self) -> str:
        return f"bytes={self.start}-{self.end}"

    def expected_length(self, total_length: int) -> int:
        """Number of bytes of the object that fall inside this range."""
        last = min(self.end, total_length - 1)
        return max(0, last - self.start + 1)


class StreamState(enum.Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    EXHAUSTED = "exhausted"
    FAILED = "failed"
    CLOSED = "closed"

    @property
    def terminal(self) -> bool:
        return self in (StreamState.EXHAUSTED, StreamState.FAILED, StreamState.CLOSED)


class InvalidConfiguration(ValueError):
    """Raised when a chunk size, length, position or seek amount is out of range."""
    pass


class FetchFailure(RuntimeError):
    """Raised when the ranged read for `byte_range` failed.

    The cursor has already moved past `byte_range` by the time this is raised,
    so a stream that failed cannot pick the range up again. Open a new stream
    with ``position=err.byte_range.start`` to resume.
    """

    def __init__(self, byte_range: ByteRange, message: str):
        super().__init__(f"{byte_range.header}: {message}")
        self.byte_range = byte_range


class StreamClosedError(RuntimeError):
    """Raised when pulling from a stream that failed or was closed."""
    pass
