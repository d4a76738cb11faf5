"""
Script Sentinel Logging Configuration

Structured logging setup with verbose options for debugging and monitoring.
"""

import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Optional


class LogLevel(Enum):
    """Log level enumeration."""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        try:
            return cls[name.upper()]
        except KeyError:
            return cls.INFO


ROOT_LOGGER_NAME = "script_sentinel"

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
VERBOSE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(funcName)s | %(message)s"
SIMPLE_FORMAT = "%(levelname)s: %(message)s"

_loggers: dict = {}
_initialized: bool = False
_log_file: Optional[Path] = None


def setup_logging(
    level: LogLevel = LogLevel.INFO,
    log_file: Optional[Path] = None,
    verbose: bool = False,
    console_output: bool = True
) -> None:
    """
    Set up logging configuration for the entire application.

    Args:
        level: Minimum log level to capture
        log_file: Optional path to log file
        verbose: If True, use verbose format with line numbers
        console_output: If True, output to console
    """
    global _initialized, _log_file

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level.value)
    root_logger.handlers.clear()

    log_format = VERBOSE_FORMAT if verbose else DEFAULT_FORMAT
    formatter = logging.Formatter(log_format, datefmt="%Y-%m-%d %H:%M:%S")

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level.value)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if log_file:
        _log_file = Path(log_file)
        _log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(_log_file, encoding='utf-8')
        file_handler.setLevel(level.value)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    _initialized = True
    root_logger.debug(f"Logging initialized - Level: {level.name}, Verbose: {verbose}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Name of the module/component

    Returns:
        Configured logger instance
    """
    if not _initialized:
        setup_logging()

    prefix = f"{ROOT_LOGGER_NAME}."
    full_name = name if name.startswith(ROOT_LOGGER_NAME) else prefix + name

    if full_name not in _loggers:
        _loggers[full_name] = logging.getLogger(full_name)

    return _loggers[full_name]

