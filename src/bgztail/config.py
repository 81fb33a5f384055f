"""Tail run configuration."""
from __future__ import annotations

import enum
from dataclasses import dataclass

from .errors import ConfigurationError

# Poll intervals in seconds
POLL_INTERVAL = 0.1  # data imminent
WAIT_INTERVAL = 1.0  # waiting for the file to appear

DEFAULT_TAIL_LINES = 10

UNLIMITED_WORDS = {"all", "unlimited"}


class Verbosity(enum.IntEnum):
    SILENT = 0
    ERRORS = 1
    VERBOSE = 2


@dataclass(frozen=True)
class TailConfig:
    follow: bool = False
    tail_lines: int | None = DEFAULT_TAIL_LINES  # None = unlimited
    suppress_incomplete_blocks: bool = False
    color: bool = False
    verbosity: Verbosity = Verbosity.ERRORS
    poll_interval: float = POLL_INTERVAL
    wait_interval: float = WAIT_INTERVAL

    def __post_init__(self) -> None:
        if self.tail_lines is not None and self.tail_lines < 0:
            raise ConfigurationError(f"line count must be >= 0, got {self.tail_lines}")
        if self.poll_interval <= 0 or self.wait_interval <= 0:
            raise ConfigurationError("poll intervals must be positive")
        if not isinstance(self.verbosity, Verbosity):
            raise ConfigurationError(f"unknown verbosity {self.verbosity!r}")


def parse_tail_lines(value: str) -> int | None:
    """Parse a ``--lines`` argument: a non-negative integer, ``all`` or ``unlimited``."""
    text = value.strip().lower()
    if text in UNLIMITED_WORDS:
        return None
    try:
        n = int(text)
    except ValueError:
        raise ConfigurationError(f"line count must be an integer or 'all', got {value!r}") from None
    if n < 0:
        raise ConfigurationError(f"line count must be >= 0, got {n}")
    return n
