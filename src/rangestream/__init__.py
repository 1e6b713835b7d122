"""rangestream - read large remote objects as seekable streams of byte ranges."""

import logging

from .core.model import (ByteRange, StreamState, FetchFailure, InvalidConfiguration,    # re-export
                         StreamClosedError)
from .core.config import StreamConfig, get_config, DEFAULT_CHUNK_SIZE
from .core.cursor import RangeCursor
from .core.fetcher import ChunkFetcher, AsyncChunkFetcher
from .io import (open_reader, open_reader_async, is_url, HTTPRangedReader, HTTPAsyncRangedReader,
                 S3RangedReader, object_request)
from .stream import RangeReadStream, AsyncRangeReadStream

logging.getLogger(__name__).addHandler(logging.NullHandler())


def open_stream(source, *, chunk_size: int | None = None, total_length: int | None = None,
                position: int = 0, session=None) -> RangeReadStream:
    """Open a synchronous stream over a path, file object or http(s) URL.

    When `total_length` is not given it is taken from the file size or from a
    HEAD request.
    """
    if is_url(source):
        reader = HTTPRangedReader(session)
        if total_length is None:
            total_length = reader.content_length(source)
        fetcher = ChunkFetcher(reader, source)
    else:
        reader = open_reader(source)
        if total_length is None:
            total_length = reader.size
        fetcher = ChunkFetcher(reader, close_reader=True)
    return RangeReadStream(fetcher, total_length, chunk_size=chunk_size, position=position)


async def open_stream_async(source, *, chunk_size: int | None = None, total_length: int | None = None,
                            position: int = 0, client=None) -> AsyncRangeReadStream:
    """Open an asynchronous stream over a path, file object or http(s) URL."""
    if is_url(source):
        reader = HTTPAsyncRangedReader(client)
        if total_length is None:
            total_length = await reader.content_length(source)
        fetcher = AsyncChunkFetcher(reader, source)
    else:
        reader = await open_reader_async(source)
        if total_length is None:
            total_length = reader.size
        fetcher = AsyncChunkFetcher(reader, close_reader=True)
    return AsyncRangeReadStream(fetcher, total_length, chunk_size=chunk_size, position=position)


def open_s3_stream(client, bucket: str, key: str, *, chunk_size: int | None = None,
                   total_length: int | None = None, position: int = 0, **get_object_params) -> RangeReadStream:
    """Open a stream over one S3 object through a caller-built boto3-style client."""
    reader = S3RangedReader(client)
    request = object_request(bucket, key, **get_object_params)
    if total_length is None:
        total_length = reader.content_length(request)
    return RangeReadStream(ChunkFetcher(reader, request), total_length, chunk_size=chunk_size, position=position)


__all__ = [
    "open_stream", "open_stream_async", "open_s3_stream",
    "RangeReadStream", "AsyncRangeReadStream", "RangeCursor", "ChunkFetcher", "AsyncChunkFetcher",
    "ByteRange", "StreamState", "StreamConfig", "get_config", "DEFAULT_CHUNK_SIZE",
    "FetchFailure", "InvalidConfiguration", "StreamClosedError",
]
