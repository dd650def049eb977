"""Central logging configuration for buildergen."""

from __future__ import annotations

import logging
from logging import Logger

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: int | str = logging.INFO) -> Logger:
    """Configure root handlers and return the ``buildergen`` logger.

    ``level`` may be a number or a level name such as ``"DEBUG"``; unknown
    names fall back to ``INFO``.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        level = resolved if isinstance(resolved, int) else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logger = logging.getLogger("buildergen")
    logger.setLevel(level)
    return logger
