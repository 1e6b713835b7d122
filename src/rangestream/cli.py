"""CLI implementation for rangestream."""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import typer

from . import open_stream
from .core.config import get_config
from .core.model import FetchFailure, InvalidConfiguration
from .core.util import plan_ranges, range_asdict

app = typer.Typer(add_completion=False, help="Stream a file or URL in byte ranges.")

logger = logging.getLogger("rangestream.cli")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else get_config().log_level
    logging.basicConfig(level=level, stream=sys.stderr,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@app.command()
def main(
    source: str = typer.Argument(..., help="Local path or http(s) URL"),
    chunk_size: Optional[int] = typer.Option(None, "--chunk-size", min=1, help="Bytes per range request"),
    skip: int = typer.Option(0, "--skip", min=0, help="Seek forward N bytes before reading"),
    back: int = typer.Option(0, "--back", min=0, help="Seek back N bytes after skipping"),
    total_length: Optional[int] = typer.Option(None, "--total-length", min=0,
                                               help="Declared object size (default: stat or HEAD)"),
    plan: bool = typer.Option(False, "--plan", help="Print planned ranges as JSON lines, fetch nothing"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Write to PATH instead of stdout"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Debug logging on stderr"),
):
    """Stream SOURCE to stdout (or --output), one range request at a time."""
    _setup_logging(verbose)

    try:
        stream = open_stream(source, chunk_size=chunk_size, total_length=total_length)
    except (IOError, OSError, InvalidConfiguration) as e:
        typer.echo(f"Cannot open {source}: {e}", err=True)
        raise typer.Exit(code=1)

    with stream:
        if skip:
            stream.seek_forward(skip)
        if back:
            stream.seek_back(back)

        if plan:
            for rng in plan_ranges(stream.total_length, stream.chunk_size, position=stream.position):
                typer.echo(json.dumps(range_asdict(rng, stream.total_length)))
            return

        sink = open(output, "wb") if output else typer.get_binary_stream("stdout")
        written = 0
        try:
            for chunk in stream:
                sink.write(chunk)
                written += len(chunk)
        except FetchFailure as e:
            typer.echo(f"Fetch failed: {e}", err=True)
            raise typer.Exit(code=1)
        finally:
            if output:
                sink.close()
            else:
                sink.flush()

    logger.info("Wrote %d bytes from %s", written, source)


if __name__ == "__main__":
    app()
