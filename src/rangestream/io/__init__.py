"""I/O layer for rangestream - ranged reads against files, HTTP and S3."""

# Re-export these for import convenience
from .base import RangedReader, AsyncRangedReader, RangeNotSupportedError
from .local import LocalRangedReader, LocalAsyncRangedReader, open_local_reader, open_local_reader_async
from .http_sync import HTTPRangedReader, open_http_reader
from .http_async import HTTPAsyncRangedReader, open_http_reader_async
from .s3 import S3RangedReader, object_request


def is_url(source) -> bool:
    return isinstance(source, str) and source.startswith(('http://', 'https://'))


def open_reader(source):
    """Factory function to create the appropriate RangedReader for a source."""
    if hasattr(source, 'read'):  # BinaryIO
        return open_local_reader(source)

    if is_url(source):
        return open_http_reader()
    return open_local_reader(source)


async def open_reader_async(source):
    """Factory function to create the appropriate AsyncRangedReader for a source."""
    if hasattr(source, 'read'):  # BinaryIO
        return await open_local_reader_async(source)

    if is_url(source):
        return await open_http_reader_async()
    return await open_local_reader_async(source)
