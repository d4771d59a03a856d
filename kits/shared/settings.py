"""
KITS — Shared Settings

Central configuration for the executors and helpers.
Load from environment variables with sensible defaults.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigurationError

load_dotenv()


def _env_int(name: str, default: str, minimum: Optional[int] = None) -> int:
    raw = os.environ.get(name, default)
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e
    if minimum is not None and value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}")
    return value


def _env_float(name: str, default: str, minimum: Optional[float] = None) -> float:
    raw = os.environ.get(name, default)
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e
    if minimum is not None and value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}")
    return value


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() == "true"


# =============================================================================
# Project Identity
# =============================================================================
PROJECT_NAME: str = "KITS"
VERSION: str = "1.16.2"


# =============================================================================
# Retries
# =============================================================================
# Total attempts, first call included.
RETRY_MAX_ATTEMPTS: int = _env_int("KITS_RETRY_MAX_ATTEMPTS", "3", minimum=1)
RETRY_DELAY_SECONDS: float = _env_float("KITS_RETRY_DELAY_SECONDS", "0", minimum=0)
RETRY_BACKOFF: float = _env_float("KITS_RETRY_BACKOFF", "1.0", minimum=1)


# =============================================================================
# Timeouts
# =============================================================================
# Floor for the caller-side wait, so a zero timeout still gives work a chance.
TIMEOUT_MIN_WAIT_MS: int = _env_int("KITS_TIMEOUT_MIN_WAIT_MS", "1", minimum=0)


# =============================================================================
# Progress Reporting
# =============================================================================
PRINT_PROGRESS: bool = _env_bool("KITS_PRINT_PROGRESS", "true")
PROGRESS_ITERS_PER_ROW: int = _env_int("KITS_PROGRESS_ITERS_PER_ROW", "1000", minimum=1)
PROGRESS_NUM_COLUMNS: int = _env_int("KITS_PROGRESS_NUM_COLUMNS", "60", minimum=1)


# =============================================================================
# Logging
# =============================================================================
LOG_LEVEL: str = os.environ.get("KITS_LOG_LEVEL", "INFO")
LOG_DIR: str = os.environ.get("KITS_LOG_DIR", "logs")


# =============================================================================
# Paths
# =============================================================================
TEMP_DIR: str = os.environ.get("KITS_TEMP_DIR", tempfile.gettempdir())


def get_logs_dir() -> Path:
    """Get the logs directory, creating it if necessary."""
    logs_dir = Path(LOG_DIR)
    logs_dir.mkdir(parents=True, exist_ok=True)
    return logs_dir


def get_temp_dir() -> Path:
    """Get the scratch directory used for temporary files."""
    temp_dir = Path(TEMP_DIR)
    temp_dir.mkdir(parents=True, exist_ok=True)
    return temp_dir
