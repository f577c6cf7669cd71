"""
Diagnostic output for the lookup CLI.

Every record is written to stderr prefixed with a severity tag so it can be
told apart from result lines on stdout:

    [INFO] running local query for 'haus'
    [WARN] no remote results for 'haus'
    [FAIL] fetch failed for 'haus': ...

Usage:
    from .log import configure_logging
    configure_logging("INFO", color=True)
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import typer

PACKAGE_LOGGER = "dictlookup"


class TaggedFormatter(logging.Formatter):
    """Formatter that prefixes each message with a short severity tag."""

    TAGS: dict[int, tuple[str, str]] = {
        logging.DEBUG: ("DBUG", typer.colors.BRIGHT_BLACK),
        logging.INFO: ("INFO", typer.colors.CYAN),
        logging.WARNING: ("WARN", typer.colors.YELLOW),
        logging.ERROR: ("FAIL", typer.colors.RED),
        logging.CRITICAL: ("FAIL", typer.colors.BRIGHT_RED),
    }

    def __init__(self, *, color: bool = False) -> None:
        super().__init__(fmt="%(message)s")
        self.color = color

    def tag_for(self, levelno: int) -> str:
        """
        Return the bracketed tag for a log level.

        Levels between the standard ones use the nearest lower standard tag.
        """
        known = [level for level in sorted(self.TAGS) if level <= levelno]
        label, colour = self.TAGS[known[-1]] if known else self.TAGS[logging.DEBUG]
        tag = f"[{label}]"
        if self.color:
            return typer.style(tag, fg=colour, bold=levelno >= logging.WARNING)
        return tag

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        return f"{self.tag_for(record.levelno)} {message}"


def configure_logging(level: str | int = logging.INFO, *, color: bool = False, stream: TextIO | None = None) -> logging.Logger:
    """
    Install a single tagged stderr handler on the package logger.

    Calling this again replaces the handler, so the stream is always the
    current ``sys.stderr`` (or the given ``stream``).

    Args:
        level: Level name or number for the package logger
        color: Whether to colour the severity tags
        stream: Output stream (default: ``sys.stderr`` at call time)

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(TaggedFormatter(color=color))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
