"""Diagnostics sink.

Library code reports through ``warnings.warn``; this module decides what reaches
stderr, based on the configured verbosity, and colours it with click.
"""
from __future__ import annotations

import warnings
from contextlib import contextmanager
from typing import Iterator

import click

from .config import TailConfig, Verbosity
from .errors import TailNotice, TailWarning

PROG = "bgztail"

COLORS = {"warning": "yellow", "note": "cyan", "FATAL": "red"}


def _visible(config: TailConfig, category: type) -> bool:
    if config.verbosity is Verbosity.SILENT:
        return False
    if issubclass(category, TailNotice):
        return config.verbosity is Verbosity.VERBOSE
    return True


def _echo(config: TailConfig, label: str, message: str) -> None:
    click.secho(f"{PROG}: {label}: {message}", err=True, fg=COLORS[label], color=config.color)


@contextmanager
def report_warnings(config: TailConfig) -> Iterator[None]:
    """Route ``TailWarning`` categories to stderr while the block runs."""
    with warnings.catch_warnings():
        warnings.simplefilter("always", TailWarning)
        default = warnings.showwarning

        def show(message, category, filename, lineno, file=None, line=None):
            if not issubclass(category, TailWarning):
                default(message, category, filename, lineno, file, line)
                return
            if _visible(config, category):
                _echo(config, "note" if issubclass(category, TailNotice) else "warning", str(message))

        warnings.showwarning = show
        yield


def fatal(config: TailConfig, exc: Exception) -> None:
    """Single-line reason for a terminal error."""
    if config.verbosity is not Verbosity.SILENT:
        _echo(config, "FATAL", str(exc))
