"""Centralized logging configuration."""

import logging
import sys
from pathlib import Path
from typing import Optional

from config.defaults import LOG_FORMAT, LOG_FILE_FORMAT, LOG_DATE_FORMAT, LOGGER_NAME


class ColoredFormatter(logging.Formatter):
    """Colored log formatter for terminal output."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def setup_logger(
    name: str = LOGGER_NAME,
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    colored: bool = True,
) -> logging.Logger:
    """Configure and return a logger instance.

    Args:
        name: Logger name. Pass "" to configure the root logger so every
            module-level ``logging.getLogger(__name__)`` inherits the handlers.
        level: Logging level
        log_file: Optional file path for file logging
        colored: Whether to use colored output for console

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    formatter_cls = ColoredFormatter if colored else logging.Formatter
    console_handler.setFormatter(formatter_cls(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(LOG_FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger
