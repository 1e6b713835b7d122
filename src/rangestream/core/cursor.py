from __future__ import annotations
import logging

from .model import ByteRange
from .util import check_non_negative, check_positive

logger = logging.getLogger(__name__)


class RangeCursor:
    """Byte offset of the next fetch within an object of known length.

    Ranges are inclusive, so after handing out ``[start, end]`` the cursor
    sits at ``end + 1``.
    """

    def __init__(self, total_length: int, chunk_size: int, *, position: int = 0):
        self.total_length = check_non_negative("total_length", total_length)
        self.chunk_size = check_positive("chunk_size", chunk_size)
        self.position = check_non_negative("position", position)

    @property
    def exhausted(self) -> bool:
        return self.position >= self.total_length

    def next_range(self) -> ByteRange | None:
        """Return the next range to request, or None once the object is consumed.

        The cursor advances as soon as the range is handed out, before anyone
        fetches it. A range whose fetch fails is therefore skipped.
        """
        if self.exhausted:
            return None
        end = min(self.position + self.chunk_size, self.total_length)
        rng = ByteRange(self.position, end)
        self.position = end + 1
        return rng

    def set_chunk_size(self, chunk_size: int) -> None:
        self.chunk_size = check_positive("chunk_size", chunk_size)

    def forward(self, nbytes: int | None = None) -> int:
        nbytes = self.chunk_size if nbytes is None else check_non_negative("seek amount", nbytes)
        if self.position + nbytes <= self.total_length:
            self.position += nbytes
        else:
            # past the end: next_range() goes straight to terminal
            self.position = self.total_length + 1
        logger.debug("Cursor forward %d -> %d", nbytes, self.position)
        return self.position

    def back(self, nbytes: int | None = None) -> int:
        nbytes = self.chunk_size if nbytes is None else check_non_negative("seek amount", nbytes)
        self.position = max(0, self.position - nbytes)
        logger.debug("Cursor back %d -> %d", nbytes, self.position)
        return self.position

    def __repr__(self) -> str:
        return (f"RangeCursor(position={self.position}, total_length={self.total_length}, "
                f"chunk_size={self.chunk_size})")
