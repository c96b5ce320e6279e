"""Logging configuration for the application."""

import logging
import sys

from src.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging() -> logging.Logger:
    """Attach a stdout handler to the application's root logger.

    Safe to call more than once; the handler is only added the first time.
    """
    settings = get_settings()
    level = logging.DEBUG if settings.is_development else settings.log_level.upper()

    logger = logging.getLogger("src")
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)

    return logger
