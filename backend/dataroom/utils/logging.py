"""Unified logging configuration for the DataRoom backend.

Provides consistent logging with console output and optional rotating
file output under the workspace logs directory.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

from dataroom.settings import settings

LOG_FORMAT = "[%(asctime)s.%(msecs)03d][%(levelname)s][%(filename)s:%(lineno)d]: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER_NAME = "dataroom"


def _ensure_app_logger_configured() -> None:
    """Ensure the dataroom parent logger has a formatted console handler."""
    app_logger = logging.getLogger(ROOT_LOGGER_NAME)

    has_formatted_handler = any(
        isinstance(h, logging.StreamHandler)
        and h.formatter
        and "%(asctime)s" in (getattr(h.formatter, "_fmt", None) or "")
        for h in app_logger.handlers
    )
    if has_formatted_handler:
        return

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    app_logger.addHandler(console_handler)

    app_logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)


def setup_logging(log_name: str = "dataroom") -> logging.Logger:
    """
    Setup logging with console and rotating file output.

    Log file path pattern: {logs_root}/{log_name}.log

    Args:
        log_name: The name of the log file (without .log extension)

    Returns:
        Configured logger instance
    """
    _ensure_app_logger_configured()

    logger_name = f"{ROOT_LOGGER_NAME}.{log_name}" if log_name != ROOT_LOGGER_NAME else log_name
    logger = logging.getLogger(logger_name)

    log_dir = _get_logs_root()
    if log_dir:
        log_file_path = os.path.join(log_dir, f"{log_name}.log")

        app_logger = logging.getLogger(ROOT_LOGGER_NAME)
        if not any(
            isinstance(h, RotatingFileHandler) and h.baseFilename == os.path.abspath(log_file_path)
            for h in app_logger.handlers
        ):
            file_handler = RotatingFileHandler(
                log_file_path,
                maxBytes=settings.log_max_bytes,
                backupCount=settings.log_backup_count,
                encoding="utf-8",
            )
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
            app_logger.addHandler(file_handler)
            app_logger.info(f"Log file handler added: {log_file_path}")

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Logger name, typically __name__ of the calling module

    Returns:
        Logger in the dataroom.* namespace
    """
    _ensure_app_logger_configured()

    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    return logging.getLogger(name)


def _get_logs_root() -> Path | None:
    """Return the logs directory, or None if it cannot be created."""
    logs_root = settings.get_logs_root()
    try:
        logs_root.mkdir(parents=True, exist_ok=True)
    except (OSError, PermissionError):
        return None
    return logs_root


_ensure_app_logger_configured()
