"""Shared fakes for stream tests."""

import asyncio

import pytest

from rangestream.core.util import parse_range_header


class FakeReader:
    """In-memory ranged reader that records every range header it serves."""

    def __init__(self, data: bytes, fail_on=(), short_on=(), on_read=None):
        self.data = data
        self.headers = []
        self.fail_on = set(fail_on)     # 1-based request numbers that raise
        self.short_on = set(short_on)   # 1-based request numbers that return one byte less
        self.on_read = on_read
        self.bytes_fetched = 0
        self.requests_made = 0

    def ranged_read(self, request, range_header):
        self.requests_made += 1
        self.headers.append(range_header)
        if self.on_read is not None:
            self.on_read(self.requests_made)
        if self.requests_made in self.fail_on:
            raise ConnectionError("boom")
        start, end = parse_range_header(range_header)
        data = self.data[start:end + 1]
        if self.requests_made in self.short_on:
            data = data[:-1]
        self.bytes_fetched += len(data)
        return data


class FakeAsyncReader(FakeReader):
    """Async variant; yields to the loop so pulls can interleave."""

    def __init__(self, data: bytes, delay: float = 0.0, **kw):
        super().__init__(data, **kw)
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0

    async def ranged_read(self, request, range_header):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            return FakeReader.ranged_read(self, request, range_header)
        finally:
            self.in_flight -= 1


@pytest.fixture
def payload():
    return bytes(i % 251 for i in range(1000))


@pytest.fixture
def fake_reader_cls():
    return FakeReader


@pytest.fixture
def fake_async_reader_cls():
    return FakeAsyncReader
