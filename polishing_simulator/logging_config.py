# polishing_simulator/logging_config.py
"""Logging configuration for the polishing simulator."""

import logging
import sys
from typing import Optional

from . import config


def setup_logging(name: str = "polishing_simulator",
                  level: Optional[str] = None,
                  format_string: Optional[str] = None) -> logging.Logger:
    """
    Set up a console logger for scripts and sessions using the simulator.

    The library modules only create loggers; handlers are attached here on
    request so importing the package never produces output.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string, defaults to config.LOG_FORMAT

    Returns:
        Configured logger instance
    """
    if level is None:
        level = config.LOG_LEVEL
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(name)
    # Clear existing handlers to avoid duplicates on repeated setup
    logger.handlers.clear()
    logger.setLevel(numeric_level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(logging.Formatter(format_string or config.LOG_FORMAT))
    logger.addHandler(console_handler)
    logger.propagate = False

    return logger
