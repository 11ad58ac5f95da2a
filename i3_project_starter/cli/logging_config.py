"""Logging configuration for the i3start CLI.

Provides:
- Configurable log levels (WARNING, INFO with --verbose, DEBUG with --debug)
- Colored level names on terminals
- Timing logs for long-running operations

All modules log below the `i3start` logger (`i3start.starter`,
`i3start.i3_client`, ...), so configuring it here covers the whole package.
"""

import logging
import sys
import time
from contextlib import contextmanager
from typing import Optional


LOGGER_NAME = "i3start"

DEFAULT_FORMAT = "%(levelname)s: %(message)s"
VERBOSE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEBUG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"


class ColoredFormatter(logging.Formatter):
    """Colored log formatter for terminal output."""

    COLORS = {
        "DEBUG": "\033[36m",      # Cyan
        "INFO": "\033[32m",       # Green
        "WARNING": "\033[33m",    # Yellow
        "ERROR": "\033[31m",      # Red
        "CRITICAL": "\033[35m",   # Magenta
    }
    RESET = "\033[0m"

    def format(self, record):
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def setup_logging(verbose: bool = False, debug: bool = False) -> logging.Logger:
    """Configure the `i3start` logger.

    Args:
        verbose: Enable verbose logging (INFO level)
        debug: Enable debug logging (DEBUG level, wins over verbose)

    Returns:
        Configured logger instance

    Examples:
        >>> logger = setup_logging(verbose=True)
        >>> logger.info("Starting project")
        2026-10-18 10:30:45,123 [INFO] i3start: Starting project
    """
    logger = logging.getLogger(LOGGER_NAME)

    # Calling this twice must not duplicate output
    logger.handlers.clear()

    if debug:
        logger.setLevel(logging.DEBUG)
        log_format = DEBUG_FORMAT
    elif verbose:
        logger.setLevel(logging.INFO)
        log_format = VERBOSE_FORMAT
    else:
        logger.setLevel(logging.WARNING)
        log_format = DEFAULT_FORMAT

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logger.level)

    if sys.stderr.isatty():
        formatter = ColoredFormatter(log_format)
    else:
        formatter = logging.Formatter(log_format)

    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


@contextmanager
def log_timing(operation: str, logger: logging.Logger):
    """Context manager for logging operation timing.

    Examples:
        >>> with log_timing("Start project 'web'", logger):
        ...     await starter.start(project)
        INFO: Start project 'web' completed in 815.32ms
    """
    start = time.perf_counter()
    logger.info(f"Starting: {operation}")

    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(f"{operation} completed in {elapsed_ms:.2f}ms")


# Global logger instance
_logger: Optional[logging.Logger] = None


def init_logging(verbose: bool = False, debug: bool = False) -> None:
    """Initialize global logging from the CLI flags."""
    global _logger
    _logger = setup_logging(verbose=verbose, debug=debug)


def get_global_logger() -> logging.Logger:
    """Get global logger instance, configuring defaults on first use."""
    global _logger
    if _logger is None:
        _logger = setup_logging()
    return _logger
