"""
Logging Configuration Module

Provides centralized logging configuration via LOG_LEVEL environment variable.

Usage:
    from genai_protocol.logging_config import configure_logging
    configure_logging()  # Call once at startup

Environment Variables:
    LOG_LEVEL: Controls console log verbosity (default: INFO)
        - DEBUG: All logs, including every request path and wire frame summary
        - INFO: Normal logs (default)
        - WARNING: Warnings and errors only
        - ERROR: Errors only

Note:
    The library itself never calls configure_logging(); it only emits through
    loguru's ``logger``. Applications opt in at startup.
"""

import os
import sys

from loguru import logger


# Valid log levels (loguru-compatible)
VALID_LOG_LEVELS: set[str] = {"DEBUG", "INFO", "WARNING", "ERROR"}

# Default log level when not specified
DEFAULT_LOG_LEVEL = "INFO"

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - {message}"
)


def get_log_level() -> str:
    """
    Get the configured log level from environment variable.

    Returns:
        str: Log level (DEBUG, INFO, WARNING, or ERROR).
             Falls back to INFO if invalid or not set.
    """
    level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()

    if level not in VALID_LOG_LEVELS:
        return DEFAULT_LOG_LEVEL

    return level


def configure_logging() -> None:
    """
    Configure loguru with LOG_LEVEL from environment variable.

    Replaces loguru's default stderr handler with one compact, colourised
    handler at the configured level.
    """
    level = get_log_level()

    logger.remove()
    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)

    logger.debug(f"Logging configured: console level={level}")
