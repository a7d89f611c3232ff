"""
Centralized Logging Utility

Every module in the package obtains its logger from get_logger(). Loggers are
created under the "residency_reporting" namespace so the cron runner and the
dashboard can change console verbosity for the whole package in one call.

- File handler: DEBUG and above, logs/residency_report.log
- Console handler: LOG_CONSOLE_LEVEL from config (INFO by default)
"""

import logging
from pathlib import Path
from typing import Dict, Union

from residency_reporting.config import LOG_CONSOLE_LEVEL, LOG_FILENAME, LOGS_DIR

PACKAGE_LOGGER_NAME = "residency_reporting"

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_loggers: Dict[str, logging.Logger] = {}

_console_handlers = []


def _package_name(name: str) -> str:
    """Place loggers from scripts or tests under the package namespace too."""
    if name == PACKAGE_LOGGER_NAME or name.startswith(PACKAGE_LOGGER_NAME + "."):
        return name
    return f"{PACKAGE_LOGGER_NAME}.{name}"


def _setup_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)

    logs_path = Path(LOGS_DIR)
    logs_path.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    file_handler = logging.FileHandler(logs_path / LOG_FILENAME, mode="a", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(LOG_CONSOLE_LEVEL)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
    _console_handlers.append(console_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get or create a logger for the given module name.

    Args:
        name: Logger name (typically __name__ from calling module)

    Returns:
        Configured Logger instance

    Example:
        from residency_reporting.logger import get_logger
        logger = get_logger(__name__)
        logger.info("Module initialized")
    """
    name = _package_name(name)
    if name not in _loggers:
        _loggers[name] = _setup_logger(name)

    return _loggers[name]


def set_console_level(level: Union[int, str]) -> None:
    """
    Change the console level of every package logger, current and future.

    The file handler keeps recording DEBUG.

    Raises:
        ValueError: If level is not a known logging level name
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved

    global LOG_CONSOLE_LEVEL
    LOG_CONSOLE_LEVEL = level
    for handler in _console_handlers:
        handler.setLevel(level)
