"""Centralized logging configuration."""

import logging
import sys

from app.config import settings


# Third-party loggers that are noisy at INFO
QUIET_LOGGERS = {
    "googleapiclient.discovery_cache": logging.ERROR,
    "passlib.handlers.bcrypt": logging.ERROR,
    "pymongo": logging.WARNING,
}


def setup_logging(name: str = "clinic_management") -> logging.Logger:
    """Configure and return the application logger, at LOG_LEVEL, writing to stdout."""
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    # Prevent duplicate handlers on reload
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        logger.addHandler(handler)

    for noisy, noisy_level in QUIET_LOGGERS.items():
        logging.getLogger(noisy).setLevel(max(noisy_level, level))

    logger.debug(f"Logging configured with level: {logging.getLevelName(level)}")
    return logger


logger = setup_logging()
