from __future__ import annotations

import logging
import os
from typing import Optional

LOG_LEVEL_ENV = "SOTASAVE_LOG_LEVEL"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def resolve_log_level(default_level: int = logging.INFO) -> int:
    """Return the level named by SOTASAVE_LOG_LEVEL, or ``default_level``."""
    level_name = os.getenv(LOG_LEVEL_ENV)
    if not level_name:
        return default_level
    level = getattr(logging, level_name.upper(), None)
    if not isinstance(level, int):
        return default_level
    return level


def configure_logging(default_level: int = logging.INFO, logger_name: Optional[str] = None) -> None:
    """Configure logging for an application embedding the save editor.

    With ``logger_name`` only that logger's level is adjusted (handlers are
    left to the host application); otherwise the root logger is configured
    with the default format.
    """
    level = resolve_log_level(default_level)
    if logger_name:
        logging.getLogger(logger_name).setLevel(level)
        return
    logging.basicConfig(level=level, format=LOG_FORMAT)
