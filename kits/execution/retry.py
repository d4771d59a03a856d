"""
Retry Execution — Re-run a failing unit of work a fixed number of times.

Every exception is treated the same way: the work is simply called again
until it succeeds or the attempt budget is spent, at which point the last
exception propagates unchanged. Attempts never overlap. By default there
is no pause between them; a RetryPolicy with a delay adds one.

Usage:
    from kits.execution import run_with_retries, with_retries

    value = run_with_retries(fetch_quote, max_attempts=5)

    @with_retries()
    def flaky():
        ...
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Awaitable, Callable, Optional, TypeVar

from kits.shared.logging import RETRY_LOGGER, get_logger
from kits.shared.settings import (
    RETRY_BACKOFF,
    RETRY_DELAY_SECONDS,
    RETRY_MAX_ATTEMPTS,
)

logger = get_logger(RETRY_LOGGER)

T = TypeVar("T")


# ============================================================================
# Policy
# ============================================================================


@dataclass(frozen=True)
class RetryPolicy:
    """
    How many times to try, and how long to pause in between.

    Attributes:
        max_attempts: Total attempts including the first one (>= 1)
        delay_seconds: Pause before the second attempt (0 = retry immediately)
        backoff: Multiplier applied to the pause after every further failure
    """
    max_attempts: int = field(default=RETRY_MAX_ATTEMPTS)
    delay_seconds: float = field(default=RETRY_DELAY_SECONDS)
    backoff: float = field(default=RETRY_BACKOFF)

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.delay_seconds < 0:
            raise ValueError(f"delay_seconds must be >= 0, got {self.delay_seconds}")
        if self.backoff < 1:
            raise ValueError(f"backoff must be >= 1, got {self.backoff}")

    @property
    def retries(self) -> int:
        """Attempts allowed after the first one."""
        return self.max_attempts - 1

    def delay_for(self, attempt: int) -> float:
        """Pause to take after failed attempt number ``attempt`` (1-based)."""
        return self.delay_seconds * (self.backoff ** (attempt - 1))


def _policy(max_attempts: Optional[int], policy: Optional[RetryPolicy]) -> RetryPolicy:
    if policy is not None:
        return policy
    if max_attempts is None:
        return RetryPolicy()
    # Explicit attempt counts keep the zero-delay behaviour.
    return RetryPolicy(max_attempts=max_attempts, delay_seconds=0.0)


# ============================================================================
# Retry Execution
# ============================================================================


def run_with_retries(
    work: Callable[[], T],
    max_attempts: Optional[int] = None,
    policy: Optional[RetryPolicy] = None,
) -> T:
    """
    Call ``work`` until it succeeds, at most ``max_attempts`` times.

    Args:
        work: Zero-argument callable
        max_attempts: Total attempts (defaults to RETRY_MAX_ATTEMPTS)
        policy: Full policy, overrides ``max_attempts`` when given

    Returns:
        The value of the first successful call

    Raises:
        Exception: The exception from the final attempt, unwrapped
    """
    policy = _policy(max_attempts, policy)

    attempt = 1
    while True:
        try:
            return work()
        except Exception as e:
            if attempt >= policy.max_attempts:
                logger.debug(f"Giving up after {attempt} attempt(s): {e!r}")
                raise
            delay = policy.delay_for(attempt)
            logger.debug(
                f"Attempt {attempt}/{policy.max_attempts} failed: {e!r}; "
                f"retrying in {delay:.2f}s"
            )
        if delay:
            time.sleep(delay)
        attempt += 1


def retrying_fn(work: Callable[[], T], retries: int = RETRY_MAX_ATTEMPTS - 1) -> Callable[..., T]:
    """
    Wrap ``work`` so that calling the result retries it on failure.

    The returned callable takes an optional ``retry_count`` that overrides
    the number of extra attempts for that call only.

    Usage:
        fetch = retrying_fn(lambda: client.get(url))
        fetch()      # up to 3 calls
        fetch(0)     # a single call
    """
    if retries < 0:
        raise ValueError(f"retries must be >= 0, got {retries}")

    @wraps(work)
    def wrapper(retry_count: Optional[int] = None) -> T:
        count = retries if retry_count is None else retry_count
        return run_with_retries(work, max_attempts=count + 1)

    return wrapper


def with_retries(
    max_attempts: Optional[int] = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator that runs the decorated callable through run_with_retries.

    Usage:
        @with_retries(max_attempts=3)
        def read_config(path):
            ...
    """
    return retry(_policy(max_attempts, None))


def retry(policy: Optional[RetryPolicy] = None):
    """
    Decorator to retry sync functions on failure according to ``policy``.

    Args:
        policy: Retry policy (defaults from settings when None)
    """
    policy = policy or RetryPolicy()

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        def wrapper(*args, **kwargs):
            return run_with_retries(lambda: func(*args, **kwargs), policy=policy)
        return wrapper
    return decorator


# ============================================================================
# Async Variant
# ============================================================================


def async_retry(max_attempts: int = RETRY_MAX_ATTEMPTS, delay: float = RETRY_DELAY_SECONDS):
    """
    Decorator to retry async functions on failure.

    Args:
        max_attempts: Total attempts including the first one
        delay: Base delay between attempts in seconds, grown linearly
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
        @wraps(func)
        async def wrapper(*args, **kwargs):
            for attempt in range(1, max_attempts + 1):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    if attempt == max_attempts:
                        raise
                    logger.debug(f"Attempt {attempt}/{max_attempts} failed: {e!r}")
                if delay:
                    await asyncio.sleep(delay * attempt)
        return wrapper
    return decorator


__all__ = [
    "RetryPolicy",
    "async_retry",
    "retry",
    "retrying_fn",
    "run_with_retries",
    "with_retries",
]
