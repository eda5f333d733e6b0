"""Logging helpers shared by all modules of the package."""

from __future__ import annotations

import logging
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the ``letterhead`` namespace."""
    if not name:
        return logging.getLogger("letterhead")
    if name == "letterhead" or name.startswith("letterhead."):
        return logging.getLogger(name)
    return logging.getLogger(f"letterhead.{name}")


def configure_logging(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """Install a stream handler on the package logger if none is present.

    Doxygen:
    - @param level: Logging level as int or name (e.g. "DEBUG").
    - @return: The configured package logger.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger = logging.getLogger("letterhead")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger
