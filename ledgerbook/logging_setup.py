"""Centralized logging configuration for the ``ledgerbook`` package.

``configure_logging(...)`` attaches a single handler to the package root
logger (``"ledgerbook"``) and is called once by the command line entry point.
``get_logger(name)`` is what library modules use; until the application
configures logging the package logger only carries a ``NullHandler``.

The curses interface owns the terminal, so it logs to a file (``path``)
instead of a stream.
"""
from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import IO

_PKG_LOGGER_NAME = "ledgerbook"
_CONFIGURED = False

DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def _parse_level(level: int | str | None, default: int = logging.INFO) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
        return default
    env_val = os.getenv("LEDGERBOOK_LOG_LEVEL")
    if env_val:
        return _parse_level(env_val, default)
    return default


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = sys.stderr,
    path: Path | None = None,
    default: int = logging.INFO,
) -> None:
    """Configure the package root logger exactly once.

    ``path`` wins over ``stream``. With neither, records are discarded.
    ``default`` applies when neither ``level`` nor ``LEDGERBOOK_LOG_LEVEL``
    names a level.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    numeric = _parse_level(level, default)
    if path is not None:
        handler: logging.Handler = logging.FileHandler(path, encoding="utf-8")
    elif stream is not None:
        handler = logging.StreamHandler(stream)
    else:
        handler = logging.NullHandler()
    handler.setLevel(numeric)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))

    logger.setLevel(numeric)
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def reset_logging() -> None:
    """Drop the configured handlers so ``configure_logging`` can run again."""

    global _CONFIGURED
    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    _CONFIGURED = False


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
