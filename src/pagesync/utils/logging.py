from __future__ import annotations

import logging
import sys
from typing import IO, Optional

ROOT_LOGGER_NAME = "pagesync"
CONSOLE_HANDLER_NAME = "pagesync-console"
CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the package logger, or a child of it for module *name*."""

    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def enable_console_logging(
    level: int = logging.INFO,
    *,
    stream: Optional[IO[str]] = None,
) -> logging.Handler:
    """Route the ``pagesync`` logger tree to *stream* (stdout by default).

    Repeated calls adjust the level of the handler installed first instead
    of stacking a second one.
    """

    logger = get_logger()
    for handler in logger.handlers:
        if handler.get_name() == CONSOLE_HANDLER_NAME:
            handler.setLevel(level)
            logger.setLevel(level)
            return handler

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.set_name(CONSOLE_HANDLER_NAME)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    return handler
