"""
Logging configuration for feed aggregator.

Uses loguru for console output and optional rotating file logs.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger as _logger

from feed_aggregator.config import get_config

# Value of the "feed" extra outside a feed_context block
NO_FEED = "-"


def setup_logger(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    rotation: Optional[str] = None,
    retention: Optional[str] = None,
    format: Optional[str] = None,
) -> None:
    """Configure the logger with file and console handlers.

    Passing ``log_file`` enables the file handler even when it is disabled
    in configuration.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, etc.)
        log_file: Path to log file
        rotation: Log rotation setting (e.g., "10 MB", "1 day")
        retention: Log retention setting (e.g., "14 days", "1 week")
        format: Log format string
    """
    log_config = get_config().logging

    file_enabled = log_config.file_enabled or log_file is not None

    level = (level or log_config.level).upper()
    log_file = log_file or log_config.file_path
    rotation = rotation or log_config.rotation
    retention = retention or log_config.retention
    format = format or log_config.format

    # Remove default handler
    _logger.remove()
    _logger.configure(extra={"feed": NO_FEED})

    if log_config.console_enabled:
        _logger.add(
            sys.stderr,
            format=format,
            level=level,
            colorize=True,
            backtrace=True,
            diagnose=False,
        )

    if file_enabled:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        _logger.add(
            log_file,
            format=format,
            level=level,
            rotation=rotation,
            retention=retention,
            compression="zip",
            encoding="utf-8",
            enqueue=True,  # fetch workers log from several threads
            backtrace=True,
            diagnose=False,
        )


def feed_context(url: str):
    """Tag every record logged inside the block with the feed URL.

    Context is per thread, so each fetch worker tags only its own records.

    Usage:
        with feed_context(spec.url):
            fetcher.fetch(spec)
    """
    return _logger.contextualize(feed=url)


def get_logger(name: Optional[str] = None):
    """Get a logger instance.

    Args:
        name: Logger name (typically __name__ from calling module)

    Returns:
        Logger instance
    """
    if name:
        return _logger.bind(name=name)
    return _logger


# Re-export logger for direct use
logger = _logger

__all__ = [
    "setup_logger",
    "get_logger",
    "feed_context",
    "logger",
]
