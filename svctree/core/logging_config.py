#!/usr/bin/env python3
"""Centralized logging configuration for the service tree engine."""

import logging
import sys
from pathlib import Path
from typing import Optional

from svctree.tree.tree_constants import LOG_FORMAT, LOG_LEVEL_DEBUG, LOG_LEVEL_DEFAULT, LOGGER_NAME


def setup_logging(
    level: str = LOG_LEVEL_DEFAULT,
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
    debug_mode: bool = False
) -> logging.Logger:
    """
    Set up logging for the svctree package.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for log output
        format_string: Custom log format string
        debug_mode: Enable verbose debug logging (projection frames, commits)

    Returns:
        Configured package logger
    """
    if debug_mode:
        level = LOG_LEVEL_DEBUG

    if format_string is None:
        format_string = LOG_FORMAT

    numeric_level = getattr(logging, level.upper())

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)

    # Repeated calls replace handlers instead of stacking them
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(logging.Formatter(format_string))
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(format_string))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the specified module."""
    if name == LOGGER_NAME or name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
