"""Logging helpers for the CLI and the Streamlit page."""
from __future__ import annotations

import logging
from typing import Optional

from nav_dashboard.config import SETTINGS

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_LOGGER_CONFIGURED = False


def configure_logging(debug: bool = False, *, level: Optional[int] = None) -> None:
    """Install a single stream handler on the ``nav_dashboard`` logger."""
    global _LOGGER_CONFIGURED
    if _LOGGER_CONFIGURED:
        return

    resolved_level = level or (logging.DEBUG if debug else getattr(logging, SETTINGS.log_level, logging.INFO))
    logger = logging.getLogger("nav_dashboard")
    logger.setLevel(resolved_level)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    _LOGGER_CONFIGURED = True
