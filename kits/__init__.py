"""
KITS — Core Utilities

A small collection of utilities:
- kits.execution: timeout and retry wrappers for a unit of work
- kits.progress: console progress reporting
- kits.shared: settings, logging, errors, parsing and network helpers
- kits.testing: assertion helpers for pytest (needs the ``test`` extra)

Usage:
    from kits import run_with_timeout, run_with_retries

    rows = run_with_timeout(5_000, lambda: run_with_retries(load_rows))
"""

__version__ = "1.16.2"

from kits.shared.settings import PROJECT_NAME, VERSION

from kits.shared.logging import get_logger

from kits.shared.errors import (
    CardinalityError,
    ConfigurationError,
    EvaluationTimeoutError,
    InvalidIPAddressError,
    KitsError,
    WorkCancelledError,
)

from kits.execution import (
    CancellationToken,
    RetryPolicy,
    current_cancellation_token,
    retrying_fn,
    run_with_retries,
    run_with_timeout,
    with_retries,
    with_timeout,
)

__all__ = [
    # Version
    "__version__",
    # Settings
    "PROJECT_NAME",
    "VERSION",
    # Logging
    "get_logger",
    # Errors
    "CardinalityError",
    "ConfigurationError",
    "EvaluationTimeoutError",
    "InvalidIPAddressError",
    "KitsError",
    "WorkCancelledError",
    # Execution
    "CancellationToken",
    "RetryPolicy",
    "current_cancellation_token",
    "retrying_fn",
    "run_with_retries",
    "run_with_timeout",
    "with_retries",
    "with_timeout",
]
