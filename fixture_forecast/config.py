"""
Configuration values for the fixture forecast engine.
Environment-driven tunables live here; model constants live in constants.py.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from .constants import (
    API_TIMEOUT_FOOTBALL_DATA,
    DEFAULT_SEARCH_DEBOUNCE_MS,
    MAX_RETRIES,
)


API_TIMEOUT = float(os.getenv("API_TIMEOUT", API_TIMEOUT_FOOTBALL_DATA))
"""Default timeout (seconds) for outbound API calls."""

API_MAX_RETRIES = int(os.getenv("API_MAX_RETRIES", MAX_RETRIES))
"""Maximum retry attempts for outbound API calls."""

API_BACKOFF_FACTOR = float(os.getenv("API_BACKOFF_FACTOR", 0.5))
"""Exponential backoff factor between retries."""

SEARCH_DEBOUNCE_SECONDS = int(os.getenv("SEARCH_DEBOUNCE_MS", DEFAULT_SEARCH_DEBOUNCE_MS)) / 1000.0
"""Quiescence window before a search re-render runs."""


def setup_logger(name: str) -> logging.Logger:
    """Create or retrieve a configured logger for the application."""

    logger = logging.getLogger(name)

    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_str, logging.INFO)
    logger.setLevel(log_level)

    if logging.getLogger().handlers:
        logger.propagate = True
        return logger

    if not logger.handlers:
        log_file = os.getenv(
            "LOG_FILE",
            os.path.join(os.path.dirname(os.path.dirname(__file__)), "fixture_forecast.log"),
        )
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
        handler = RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024, backupCount=3)
        formatter = logging.Formatter('%(asctime)s [%(levelname)s] %(name)s: %(message)s')
        handler.setFormatter(formatter)
        handler.setLevel(log_level)
        logger.addHandler(handler)
        logger.propagate = False

    return logger
