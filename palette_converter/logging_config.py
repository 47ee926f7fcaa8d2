#!/usr/bin/env python3
"""
Logging configuration for the palette converter
Console output carries only the severity tag; the optional log file is verbose
"""

import logging
import os
import sys
from typing import Optional

LOGGER_NAME = "palette_converter"
CONSOLE_FORMAT = "[%(levelname)s] %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

DEBUG_ENV = "PALETTE_CONVERTER_DEBUG"
LOG_FILE_ENV = "PALETTE_CONVERTER_LOG"


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1", "true", "yes")


def _handler(handler: logging.Handler, fmt: str, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt="%H:%M:%S"))
    return handler


def setup_logging(level: str = "INFO",
                  log_file: Optional[str] = None) -> logging.Logger:
    """
    Setup logging configuration for the palette converter.

    PALETTE_CONVERTER_DEBUG=1 forces DEBUG, and PALETTE_CONVERTER_LOG names
    a log file when none is passed in.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file to write logs to (defaults to console only)

    Returns:
        Configured logger instance
    """
    if _env_flag(DEBUG_ENV):
        level = "DEBUG"
    log_file = log_file or os.environ.get(LOG_FILE_ENV) or None
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(_handler(logging.StreamHandler(sys.stdout), CONSOLE_FORMAT, numeric_level))

    if log_file:
        try:
            logger.addHandler(_handler(logging.FileHandler(log_file), FILE_FORMAT, numeric_level))
        except OSError as e:
            logger.warning(f"Could not create log file {log_file}: {e}")

    # Keep converter output off the root logger
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Module name (e.g., 'converter')

    Returns:
        Logger instance
    """
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
