"""
KITS — Shared Logging Configuration

Centralized logging setup for all KITS modules.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from .settings import LOG_LEVEL, get_logs_dir


# =============================================================================
# Log Format
# =============================================================================
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


# =============================================================================
# Logger Factory
# =============================================================================
def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get a configured logger for a module.

    Args:
        name: Logger name (typically __name__ of the module)
        level: Optional log level override

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    log_level = getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO)
    logger.setLevel(log_level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(console_handler)

    return logger


def configure_file_logging(
    logger: logging.Logger,
    filename: str,
    max_bytes: int = 10_000_000,  # 10MB
    backup_count: int = 5,
) -> RotatingFileHandler:
    """
    Add rotating file logging to a logger.

    Args:
        logger: Logger to configure
        filename: Name of the log file (created under LOG_DIR)
        max_bytes: Maximum file size before rotation
        backup_count: Number of backup files to keep

    Returns:
        The attached handler, so callers can detach it again
    """
    file_handler = RotatingFileHandler(
        get_logs_dir() / filename,
        maxBytes=max_bytes,
        backupCount=backup_count,
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(file_handler)
    return file_handler


# =============================================================================
# Module Loggers
# =============================================================================
TIMEOUT_LOGGER = "kits.execution.timeout"
RETRY_LOGGER = "kits.execution.retry"
PROGRESS_LOGGER = "kits.progress"
UTILS_LOGGER = "kits.utils"
