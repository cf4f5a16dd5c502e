"""
Logging configuration for Attendance Service.

Console logging tagged with the current run mode (menu, attend, enroll).
"""

import logging
import sys


class ModeContextFilter(logging.Filter):
    """Add run mode context to log records."""

    def __init__(self, mode: str):
        super().__init__()
        self.mode = mode

    def filter(self, record: logging.LogRecord) -> bool:
        record.mode = self.mode
        return True


_mode_filter = ModeContextFilter('menu')


def setup_logging(mode: str = 'menu', debug: bool = False) -> None:
    """
    Configure logging for the service.

    Args:
        mode: Initial run mode shown in every line
        debug: Enable debug level logging
    """
    level = logging.DEBUG if debug else logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(
        '[%(levelname)s] [mode=%(mode)s] %(message)s'
    ))

    _mode_filter.mode = mode
    console_handler.addFilter(_mode_filter)

    root_logger.addHandler(console_handler)


def set_log_mode(mode: str) -> None:
    """Switch the mode shown in subsequent log lines."""
    _mode_filter.mode = mode


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
