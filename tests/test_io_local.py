"""Tests for local file I/O."""

import pytest
import tempfile
from pathlib import Path
import io

from rangestream.io.base import RangedReader, AsyncRangedReader
from rangestream.io.local import LocalRangedReader, LocalAsyncRangedReader, open_local_reader, open_local_reader_async


class TestLocalRangedReader:
    """Test synchronous local ranged reader."""

    def test_basic_ranges(self):
        """Test inclusive range reads."""
        test_data = b"0123456789"

        with tempfile.NamedTemporaryFile() as f:
            f.write(test_data)
            f.flush()

            reader = LocalRangedReader(f.name)

            assert reader.ranged_read(None, "bytes=0-4") == b"01234"
            assert reader.ranged_read(None, "bytes=5-9") == b"56789"
            assert reader.ranged_read(None, "bytes=2-4") == b"234"

            # Check accounting
            assert reader.bytes_fetched == 13  # 5 + 5 + 3
            assert reader.requests_made == 3
            assert reader.size == 10

            reader.close()

    def test_final_range_is_clipped(self):
        """Range ending at or past EOF returns what exists."""
        bio = io.BytesIO(b"0123456789")
        reader = LocalRangedReader(bio)

        assert reader.ranged_read(None, "bytes=8-10") == b"89"
        assert reader.ranged_read(None, "bytes=0-100") == b"0123456789"

    def test_start_beyond_eof(self):
        """Range starting at EOF is an error."""
        reader = LocalRangedReader(io.BytesIO(b"0123456789"))

        with pytest.raises(IOError):
            reader.ranged_read(None, "bytes=10-20")

    def test_bad_header(self):
        reader = LocalRangedReader(io.BytesIO(b"0123456789"))

        with pytest.raises(ValueError):
            reader.ranged_read(None, "bytes=4-")

    def test_path_source(self):
        """Test using Path as source."""
        test_data = b"0123456789"

        with tempfile.NamedTemporaryFile(delete=False) as f:
            f.write(test_data)
            f.flush()
            temp_path = Path(f.name)

        try:
            with LocalRangedReader(temp_path) as reader:
                assert reader.ranged_read(None, "bytes=0-4") == b"01234"
                assert reader.bytes_fetched == 5
        finally:
            temp_path.unlink()

    def test_empty_file(self):
        """Empty files have size 0 instead of failing to mmap."""
        with tempfile.NamedTemporaryFile() as f:
            reader = LocalRangedReader(f.name)
            assert reader.size == 0
            with pytest.raises(IOError):
                reader.ranged_read(None, "bytes=0-0")
            reader.close()

    def test_protocol(self):
        reader = open_local_reader(io.BytesIO(b"abc"))
        assert isinstance(reader, RangedReader)


class TestLocalAsyncRangedReader:
    """Test asynchronous local ranged reader."""

    @pytest.mark.asyncio
    async def test_basic_ranges(self):
        """Test basic async range reads."""
        test_data = b"0123456789"

        with tempfile.NamedTemporaryFile() as f:
            f.write(test_data)
            f.flush()

            async with LocalAsyncRangedReader(f.name) as reader:
                assert await reader.ranged_read(None, "bytes=0-4") == b"01234"
                assert await reader.ranged_read(None, "bytes=5-9") == b"56789"

                assert reader.bytes_fetched == 10
                assert reader.requests_made == 2
                assert reader.size == 10

    @pytest.mark.asyncio
    async def test_factory_function(self):
        """Test async factory function."""
        reader = await open_local_reader_async(io.BytesIO(b"0123456789"))
        assert isinstance(reader, LocalAsyncRangedReader)
        assert isinstance(reader, AsyncRangedReader)
        assert await reader.ranged_read(None, "bytes=3-5") == b"345"
        await reader.close()
