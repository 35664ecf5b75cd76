"""Logging setup for the portal.

Modules log through ``logging.getLogger(__name__)``; this only decides where
the ``hris_portal`` tree ends up.
"""

from __future__ import annotations

import logging
import sys

from ..core.constants import DEFAULT_LOG_LEVEL

ROOT_LOGGER_NAME = "hris_portal"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | int = DEFAULT_LOG_LEVEL) -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)

    if not any(getattr(h, "_hris_portal", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._hris_portal = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    return logger
