"""Logging setup: a single stderr handler for the `src` logger hierarchy, level taken from the environment."""

import logging
import os
import sys

LOGGER_NAME = "src"
LOG_LEVEL_ENV = "CONNECT4_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_log_level() -> int:
    """Unknown level names fall back to the default instead of failing at startup."""
    level_name = os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        return logging.getLevelName(DEFAULT_LOG_LEVEL)
    return level


def setup_logging() -> logging.Logger:
    """Configure the package logger. Calling it twice replaces the handler rather than duplicating output."""
    level = resolve_log_level()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    return logger
