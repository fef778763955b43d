"""Logging configuration for the ``statement_ocr`` package.

Library modules only call ``logging.getLogger(__name__)``. Entrypoints call
``configure_logging`` once to attach a handler to the package root logger.
"""

import logging
import sys
from typing import IO

_PKG_LOGGER_NAME = "statement_ocr"
_DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
_CONFIGURED = False

logging.getLogger(_PKG_LOGGER_NAME).addHandler(logging.NullHandler())


def _parse_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    level = level.strip().upper()
    if level.isdigit():
        return int(level)
    numeric = getattr(logging, level, None)
    if isinstance(numeric, int):
        return numeric
    return logging.INFO


def configure_logging(level: int | str = "INFO", *, fmt: str | None = None, stream: IO[str] = sys.stderr) -> None:
    """Attach a single stream handler to the package logger (idempotent)."""
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(_parse_level(level))
    logger.propagate = False

    _CONFIGURED = True
