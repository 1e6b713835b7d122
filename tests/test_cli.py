"""Tests for the CLI implementation."""

import json

import pytest
from typer.testing import CliRunner

from rangestream.cli import app


class TestCLI:
    """Test the CLI functionality."""

    @pytest.fixture
    def runner(self):
        """CLI test runner."""
        return CliRunner()

    @pytest.fixture
    def data_file(self, tmp_path):
        path = tmp_path / "object.bin"
        path.write_bytes(b"0123456789")
        return path

    def test_stream_to_stdout(self, runner, data_file):
        result = runner.invoke(app, [str(data_file), "--chunk-size", "3"])

        assert result.exit_code == 0
        assert result.stdout_bytes == b"0123456789"

    def test_skip(self, runner, data_file):
        result = runner.invoke(app, [str(data_file), "--chunk-size", "4", "--skip", "3"])

        assert result.exit_code == 0
        assert result.stdout_bytes == b"3456789"

    def test_skip_then_back(self, runner, data_file):
        result = runner.invoke(app, [str(data_file), "--skip", "8", "--back", "2"])

        assert result.exit_code == 0
        assert result.stdout_bytes == b"6789"

    def test_skip_past_end(self, runner, data_file):
        result = runner.invoke(app, [str(data_file), "--skip", "50"])

        assert result.exit_code == 0
        assert result.stdout_bytes == b""

    def test_output_file(self, runner, data_file, tmp_path):
        out = tmp_path / "copy.bin"
        result = runner.invoke(app, [str(data_file), "--chunk-size", "2", "-o", str(out)])

        assert result.exit_code == 0
        assert out.read_bytes() == b"0123456789"

    def test_plan(self, runner, tmp_path):
        path = tmp_path / "big.bin"
        path.write_bytes(b"x" * 1000)
        result = runner.invoke(app, [str(path), "--chunk-size", "400", "--plan"])

        assert result.exit_code == 0
        lines = [json.loads(line) for line in result.stdout.strip().splitlines()]
        assert [line["header"] for line in lines] == ["bytes=0-400", "bytes=401-801", "bytes=802-1000"]
        assert [line["length"] for line in lines] == [401, 401, 198]

    def test_plan_after_back(self, runner, tmp_path):
        path = tmp_path / "big.bin"
        path.write_bytes(b"x" * 1000)
        result = runner.invoke(app, [str(path), "--chunk-size", "400", "--skip", "401", "--back", "200", "--plan"])

        assert result.exit_code == 0
        first = json.loads(result.stdout.splitlines()[0])
        assert (first["start"], first["end"]) == (201, 601)

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(app, [str(tmp_path / "nope.bin")])

        assert result.exit_code == 1

    def test_rejects_zero_chunk_size(self, runner, data_file):
        result = runner.invoke(app, [str(data_file), "--chunk-size", "0"])

        assert result.exit_code != 0

    def test_remote_file(self, runner, httpserver):
        """Stream a URL served without range support (small body is sliced locally)."""
        httpserver.expect_request("/object.bin").respond_with_data(b"0123456789")
        result = runner.invoke(app, [httpserver.url_for("/object.bin"), "--chunk-size", "4"])

        assert result.exit_code == 0
        assert result.stdout_bytes == b"0123456789"

    def test_remote_failure(self, runner, httpserver):
        httpserver.expect_request("/gone").respond_with_data("", status=404)
        result = runner.invoke(app, [httpserver.url_for("/gone"), "--total-length", "10"])

        assert result.exit_code == 1
