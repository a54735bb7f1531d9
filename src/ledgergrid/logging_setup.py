"""Centralized logging configuration for the ``ledgergrid`` package.

- ``configure_logging(...)`` attaches a single ``StreamHandler`` to the package
  root logger. Entry points (the CLI) call it once at startup.
- ``get_logger(name)`` returns a logger and makes sure the package root has at
  least a ``NullHandler`` so library use stays quiet when unconfigured.

Library modules never attach their own handlers.
"""

import logging
import os
import sys
from typing import IO, Optional

_PKG_LOGGER_NAME = "ledgergrid"
_CONFIGURED = False


def _parse_level(level: int | str | None) -> int:
    if level is None:
        level = os.getenv("LEDGERGRID_LOG_LEVEL")
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: Optional[str] = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Configure the package root logger exactly once.

    Args:
        level: Level as int or name (e.g. "DEBUG"). Falls back to the
            LEDGERGRID_LOG_LEVEL environment variable, then INFO.
        fmt: Optional format string
        stream: Output stream for the handler (defaults to stderr)
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    resolved = _parse_level(level)
    handler = logging.StreamHandler(stream)
    handler.setLevel(resolved)
    handler.setFormatter(
        logging.Formatter(fmt or "%(asctime)s %(name)s %(levelname)s %(message)s")
    )
    logger.addHandler(handler)
    logger.setLevel(resolved)
    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ``ledgergrid`` namespace."""
    root = logging.getLogger(_PKG_LOGGER_NAME)
    if not root.handlers:
        root.addHandler(logging.NullHandler())
    return logging.getLogger(name)
