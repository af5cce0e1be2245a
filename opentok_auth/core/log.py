"""Logging setup for applications embedding the library."""
from __future__ import annotations

import logging

from .config import get_settings

PACKAGE_LOGGER = "opentok_auth"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """Attach a stream handler to the package logger.

    Falls back to ``OPENTOK_LOG_LEVEL`` when no level is given. Calling it
    twice does not stack handlers.
    """

    if level is None:
        level = get_settings().log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    if not any(getattr(handler, "_opentok_auth", False) for handler in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._opentok_auth = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
