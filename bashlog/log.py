"""Logging configuration using loguru.

Diagnostics go to stderr so they never mix with command output on stdout.
Normal runs show ``LEVEL | message``; at DEBUG and below the timestamp and
call site are added for troubleshooting.
"""

from __future__ import annotations

import sys

from loguru import logger

_SHORT_FORMAT = "<level>{level: <8}</level> | <level>{message}</level>"
_VERBOSE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
_VERBOSE_LEVELS = ("TRACE", "DEBUG")


def setup_logging(level: str = "INFO") -> None:
    """Make loguru's only sink stderr at ``level`` (``BASHLOG_LOG_LEVEL``).

    Called once per command by the CLI entry points.
    """
    level = level.upper()

    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format=_VERBOSE_FORMAT if level in _VERBOSE_LEVELS else _SHORT_FORMAT,
    )
    logger.debug("Logging initialised (level={})", level)
