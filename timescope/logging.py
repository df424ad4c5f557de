"""
Centralized logging configuration for TimeScope.

Usage:
    from timescope.logging import setup_logging, get_logger

    # In __main__.py (once at startup)
    setup_logging(level='DEBUG', log_file='/tmp/timescope_debug.log')

    # In any module
    logger = get_logger(__name__)
    logger.debug("Viewport changed")
"""

import logging
import sys
from typing import Optional

DEFAULT_LOG_FILE = '/tmp/timescope_debug.log'

_logging_configured = False


def setup_logging(
    level: str = 'WARNING',
    log_file: Optional[str] = None,
    console: bool = False
) -> None:
    """
    Configure logging for TimeScope.

    Args:
        level: Log level ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
        log_file: Path to log file (only used if level is DEBUG or INFO)
        console: If True, also log to console (stderr)
    """
    global _logging_configured

    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    logger = logging.getLogger('timescope')
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    # Frame-level tracing is only worth a file at DEBUG/INFO
    if numeric_level <= logging.INFO and log_file:
        file_handler = logging.FileHandler(log_file, mode='w')
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    _logging_configured = True
    logger.debug(f"Logging configured: level={level}, log_file={log_file}, console={console}")


def is_configured() -> bool:
    """True once setup_logging() has run."""
    return _logging_configured


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger instance parented under 'timescope'
    """
    if name.startswith('timescope'):
        return logging.getLogger(name)
    return logging.getLogger(f'timescope.{name}')
