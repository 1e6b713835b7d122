"""Base protocols and shared types for I/O layer."""

from typing import Any, Protocol, runtime_checkable


class RangeNotSupportedError(RuntimeError):
    """Raised when server ignores Range and the body is >= RANGE_FALLBACK_MAX."""


RANGE_FALLBACK_MAX = 10 * 1024 * 1024  # 10 MB


@runtime_checkable
class RangedReader(Protocol):
    """Protocol for synchronous ranged readers."""

    bytes_fetched: int  # running total
    requests_made: int

    def ranged_read(self, request: Any, range_header: str) -> bytes:
        """Return the bytes named by `range_header` ("bytes=<start>-<end>", inclusive).
        The final range of an object may be shorter. Any failure → raise.
        """
        ...


@runtime_checkable
class AsyncRangedReader(Protocol):
    """Protocol for asynchronous ranged readers."""

    bytes_fetched: int  # running total
    requests_made: int

    async def ranged_read(self, request: Any, range_header: str) -> bytes:
        """Return the bytes named by `range_header` ("bytes=<start>-<end>", inclusive).
        The final range of an object may be shorter. Any failure → raise.
        """
        ...
