"""
KITS Execution — Timeout and retry wrappers for a unit of work.

Provides:
- run_with_timeout / with_timeout: bounded wait on a separate thread
- run_with_retries / with_retries / retrying_fn: fixed-count retries
- CancellationToken: cooperative cancellation for timed-out work

Usage:
    from kits.execution import run_with_retries, run_with_timeout

    # Outer timeout spans every retry attempt
    result = run_with_timeout(
        2_000,
        lambda: run_with_retries(fetch, max_attempts=3),
    )
"""

from kits.shared.errors import EvaluationTimeoutError, WorkCancelledError

from .retry import (
    RetryPolicy,
    async_retry,
    retry,
    retrying_fn,
    run_with_retries,
    with_retries,
)
from .timeout import (
    CancellationToken,
    current_cancellation_token,
    run_with_timeout,
    run_with_timeout_async,
    with_timeout,
)

__all__ = [
    "CancellationToken",
    "EvaluationTimeoutError",
    "RetryPolicy",
    "WorkCancelledError",
    "async_retry",
    "current_cancellation_token",
    "retry",
    "retrying_fn",
    "run_with_retries",
    "run_with_timeout",
    "run_with_timeout_async",
    "with_retries",
    "with_timeout",
]
