from __future__ import annotations
import re
from typing import Any, Dict, Iterator

from .model import ByteRange, InvalidConfiguration

_RANGE_RE = re.compile(r"^bytes=(\d+)-(\d+)$")


def parse_range_header(value: str) -> tuple[int, int]:
    """Return (start, end) from a ``bytes=<start>-<end>`` header value."""
    m = _RANGE_RE.match(value.strip())
    if not m:
        raise ValueError(f"Unsupported range header: {value!r}")
    start, end = int(m.group(1)), int(m.group(2))
    if end < start:
        raise ValueError(f"Range end before start: {value!r}")
    return start, end


def plan_ranges(total_length: int, chunk_size: int, position: int = 0) -> Iterator[ByteRange]:
    """Yield the ranges a stream would request, without fetching anything."""
    from .cursor import RangeCursor

    cursor = RangeCursor(total_length, chunk_size, position=position)
    while (rng := cursor.next_range()) is not None:
        yield rng


def range_asdict(rng: ByteRange, total_length: int) -> Dict[str, Any]:
    """Return a JSON-serialisable dict for one planned range."""
    return {
        "start": rng.start,
        "end": rng.end,
        "header": rng.header,
        "length": rng.expected_length(total_length),
    }


def check_non_negative(name: str, value: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise InvalidConfiguration(f"{name} must be a non-negative integer, got {value!r}")
    return value


def check_positive(name: str, value: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise InvalidConfiguration(f"{name} must be a positive integer, got {value!r}")
    return value
