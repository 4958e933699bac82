"""Logging configuration and utilities."""

from typing import Optional, TextIO
import logging
import sys

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Loggers that are noisy below WARNING unless the client itself runs at DEBUG
QUIET_LOGGERS = ('asyncio',)


def setup_logging(level: str = "INFO", stream: Optional[TextIO] = None) -> None:
    """
    Configure logging for the RCON client.

    Console output (command responses) goes to stdout, so log records
    default to stderr to keep the two apart.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
               Default: INFO
        stream: Stream for log records, stderr when omitted

    Raises:
        ValueError: If the level name is unknown
    """
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f'Invalid log level: {level}')

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(stream or sys.stderr)
        ],
        force=True,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(
            numeric_level if numeric_level <= logging.DEBUG else logging.WARNING
        )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module (typically __name__)."""
    return logging.getLogger(name)
