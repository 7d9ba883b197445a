# smartvideo/common/logging.py
from __future__ import annotations

import logging
from typing import Optional


def get_logger(name: str = "smartvideo", level: Optional[int | str] = None) -> logging.Logger:
    """
    Return a logger that plays nice with Uvicorn if running under it.
    If no handlers are set, we add a basicConfig once.
    Level defaults to settings.log_level.
    """
    if level is None:
        from smartvideo.common.settings import get_settings  # local import: settings may log
        level = get_settings().log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(name)
    if not logging.getLogger().handlers and not logger.handlers:
        logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger.setLevel(level)
    return logger
