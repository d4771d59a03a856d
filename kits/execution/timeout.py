"""
Timeout Execution — Run a unit of work with a bounded wait.

The work runs on its own daemon thread while the caller blocks on a
future for at most ``timeout_ms``. On expiry the caller gets
``EvaluationTimeoutError`` and the work's cancellation token is set.

Cancellation is cooperative. Python cannot stop a running thread, so work
that never checks its token (or sits in a blocking call) keeps running in
the background after the caller has moved on. Its side effects still
happen. The abandoned future is attached to the error for callers that
need to know when it finally settles.

Usage:
    from kits.execution import run_with_timeout, current_cancellation_token

    def crawl():
        token = current_cancellation_token()
        for page in pages:
            token.raise_if_cancelled()
            fetch(page)

    run_with_timeout(5_000, crawl)
"""

from __future__ import annotations

import asyncio
import contextvars
import threading
from concurrent.futures import Future, TimeoutError as FutureTimeoutError
from functools import partial, wraps
from typing import Awaitable, Callable, TypeVar

from kits.shared.errors import EvaluationTimeoutError, WorkCancelledError
from kits.shared.logging import TIMEOUT_LOGGER, get_logger
from kits.shared.settings import TIMEOUT_MIN_WAIT_MS

logger = get_logger(TIMEOUT_LOGGER)

T = TypeVar("T")


# ============================================================================
# Cooperative Cancellation
# ============================================================================


class CancellationToken:
    """
    A stop request that running work polls for.

    Setting the token never interrupts anything by itself; the work has to
    look at it via ``cancelled``, ``raise_if_cancelled()`` or ``wait()``.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        """Raise WorkCancelledError if cancellation was requested."""
        if self._event.is_set():
            raise WorkCancelledError()

    def wait(self, seconds: float) -> bool:
        """
        Sleep for up to ``seconds``, waking early on cancellation.

        Returns:
            True if the token was cancelled, False if the full time elapsed
        """
        return self._event.wait(seconds)


class _NeverCancelledToken(CancellationToken):
    """Handed out when work runs outside run_with_timeout; cancel() is a no-op."""

    def cancel(self) -> None:
        pass


_NEVER_CANCELLED = _NeverCancelledToken()

_current_token: contextvars.ContextVar[CancellationToken] = contextvars.ContextVar(
    "kits_cancellation_token", default=_NEVER_CANCELLED
)


def current_cancellation_token() -> CancellationToken:
    """Return the cancellation token of the enclosing run_with_timeout call."""
    return _current_token.get()


# ============================================================================
# Timeout Execution
# ============================================================================


def _wait_seconds(timeout_ms: int) -> float:
    return max(timeout_ms, TIMEOUT_MIN_WAIT_MS) / 1000.0


def _run_work(
    future: Future,
    token: CancellationToken,
    work: Callable[[], T],
) -> None:
    if not future.set_running_or_notify_cancel():
        return
    _current_token.set(token)
    try:
        result = work()
    except BaseException as e:
        future.set_exception(e)
    else:
        future.set_result(result)


def run_with_timeout(timeout_ms: int, work: Callable[[], T]) -> T:
    """
    Evaluate ``work`` on a separate thread, waiting at most ``timeout_ms``.

    A timeout of 0 still starts the work and waits TIMEOUT_MIN_WAIT_MS
    before giving up.

    Args:
        timeout_ms: Wait bound in milliseconds (must be >= 0)
        work: Zero-argument callable

    Returns:
        Whatever ``work`` returns

    Raises:
        EvaluationTimeoutError: If the wait bound elapsed first
        Exception: Anything ``work`` raised, re-raised unchanged
    """
    if timeout_ms < 0:
        raise ValueError(f"timeout_ms must be >= 0, got {timeout_ms}")

    token = CancellationToken()
    future: Future = Future()
    # Each thread gets a copy of the caller's context (contextvars included).
    ctx = contextvars.copy_context()

    worker = threading.Thread(
        target=ctx.run,
        args=(_run_work, future, token, work),
        name=f"kits-timeout-{id(future):x}",
        daemon=True,
    )
    worker.start()

    try:
        return future.result(timeout=_wait_seconds(timeout_ms))
    except FutureTimeoutError:
        # concurrent.futures.TimeoutError is TimeoutError on 3.11+, so a
        # TimeoutError raised by the work itself lands here too.
        if future.done():
            return future.result()
        token.cancel()
        future.cancel()
        logger.debug(
            f"Work on {worker.name} exceeded {timeout_ms}ms; "
            f"cancellation requested, thread may keep running"
        )
        raise EvaluationTimeoutError(timeout_ms, future) from None


def with_timeout(timeout_ms: int) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator form of run_with_timeout.

    Usage:
        @with_timeout(500)
        def lookup(host):
            ...
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            return run_with_timeout(timeout_ms, partial(func, *args, **kwargs))
        return wrapper
    return decorator


# ============================================================================
# Async Variant
# ============================================================================


def _consume_outcome(task: asyncio.Future) -> None:
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.debug(f"Abandoned coroutine finished with {error!r}")


async def run_with_timeout_async(
    timeout_ms: int,
    work: Callable[[], Awaitable[T]],
) -> T:
    """
    Await ``work()`` for at most ``timeout_ms``.

    Unlike the threaded version, the task is really cancelled on expiry
    (CancelledError is delivered at its next await).

    Raises:
        EvaluationTimeoutError: If the timeout was exceeded
    """
    if timeout_ms < 0:
        raise ValueError(f"timeout_ms must be >= 0, got {timeout_ms}")

    task = asyncio.ensure_future(work())
    try:
        done, _ = await asyncio.wait({task}, timeout=_wait_seconds(timeout_ms))
    except asyncio.CancelledError:
        task.cancel()
        raise

    if task not in done:
        # Retrieve whatever the task ends with so asyncio never reports it as lost.
        task.add_done_callback(_consume_outcome)
        task.cancel()
        logger.debug(f"Coroutine exceeded {timeout_ms}ms and was cancelled")
        raise EvaluationTimeoutError(timeout_ms, task)
    return task.result()


__all__ = [
    "CancellationToken",
    "current_cancellation_token",
    "run_with_timeout",
    "run_with_timeout_async",
    "with_timeout",
]
