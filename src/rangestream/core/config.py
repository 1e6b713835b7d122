"""Environment driven defaults."""

import dataclasses
import logging
import os

from .model import InvalidConfiguration


logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024  # 64 KiB


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise InvalidConfiguration(f"{name} must be an integer, got {raw!r}")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise InvalidConfiguration(f"{name} must be a number, got {raw!r}")


@dataclasses.dataclass
class StreamConfig:
    chunk_size: int = dataclasses.field(
        default_factory=lambda: _env_int("RANGESTREAM_CHUNK_SIZE", DEFAULT_CHUNK_SIZE)
    )
    http_timeout: float = dataclasses.field(
        default_factory=lambda: _env_float("RANGESTREAM_HTTP_TIMEOUT", 30.0)
    )
    log_level: str = dataclasses.field(default_factory=lambda: os.getenv("RANGESTREAM_LOG_LEVEL", "WARNING"))

    def __post_init__(self):
        if self.chunk_size <= 0:
            raise InvalidConfiguration(f"chunk_size must be positive, got {self.chunk_size}")
        if self.http_timeout <= 0:
            raise InvalidConfiguration(f"http_timeout must be positive, got {self.http_timeout}")
        self.log_level = self.log_level.upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise InvalidConfiguration(f"log_level must be a logging level name, got {self.log_level!r}")


_config: StreamConfig | None = None


def get_config() -> StreamConfig:
    global _config
    if _config is None:
        _config = StreamConfig()
        logger.debug("Loaded %s", _config)
    return _config


def reset_config() -> None:
    """Forget the cached config so the next get_config() re-reads the environment."""
    global _config
    _config = None
