"""Logging configuration for the CLI (Rich handler on stderr)."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_VERBOSITY_LEVELS = ("WARNING", "INFO", "DEBUG")


def resolve_level(base_level: str, verbose: int) -> str:
    """Each `-v` lowers the threshold one step from `base_level`."""

    if verbose <= 0:
        return base_level
    try:
        start = _VERBOSITY_LEVELS.index(base_level)
    except ValueError:
        start = 0
    return _VERBOSITY_LEVELS[min(start + verbose, len(_VERBOSITY_LEVELS) - 1)]


def configure_logging(level: str, console: Console) -> None:
    handler = RichHandler(console=console, show_path=False, rich_tracebacks=True)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
