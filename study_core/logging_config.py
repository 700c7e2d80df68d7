"""
Logging setup shared by the scheduling modules.

The level defaults to WARNING so that embedding applications only see
rejected inputs; set STUDY_CORE_LOG_LEVEL=DEBUG to trace every review.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """Create or reuse a module-level logger with a single stream handler."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
    if level is None:
        level_name = os.getenv("STUDY_CORE_LOG_LEVEL", "WARNING").upper()
        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            level = logging.WARNING
    logger.setLevel(level)
    return logger


__all__ = ["get_logger"]
