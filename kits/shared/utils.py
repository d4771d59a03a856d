"""
KITS — Shared Utilities

Home of unsorted helper functions used across all KITS modules.
"""

import ast
import itertools
import random
import re
import sys
import threading
import time
import traceback
import uuid
from contextlib import contextmanager
from pathlib import Path
from pprint import pformat
from typing import Any, Callable, Iterable, Iterator, Optional, Sequence, TypeVar

from kits.execution.timeout import current_cancellation_token
from kits.shared.errors import CardinalityError
from kits.shared.logging import UTILS_LOGGER, get_logger
from kits.shared.settings import get_temp_dir

logger = get_logger(UTILS_LOGGER)

T = TypeVar("T")


# =============================================================================
# Number Parsing
# =============================================================================
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_DOUBLE_RE = re.compile(
    r"([+-]?(?:NaN|Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?))[fFdD]?"
)

SHORT_RANGE = (-(2 ** 15), 2 ** 15 - 1)
INT_RANGE = (-(2 ** 31), 2 ** 31 - 1)
LONG_RANGE = (-(2 ** 63), 2 ** 63 - 1)


def _parse_bounded_int(s: Any, bounds: tuple) -> Optional[int]:
    if not isinstance(s, str) or not _INTEGER_RE.fullmatch(s):
        return None
    value = int(s)
    low, high = bounds
    if not low <= value <= high:
        return None
    return value


def parse_int(s: Any) -> Optional[int]:
    """Parse a 32-bit integer from string `s`, or None."""
    return _parse_bounded_int(s, INT_RANGE)


def parse_long(s: Any) -> Optional[int]:
    """Parse a 64-bit integer from string `s`, or None."""
    return _parse_bounded_int(s, LONG_RANGE)


def parse_short(s: Any) -> Optional[int]:
    """Parse a 16-bit integer from string `s`, or None."""
    return _parse_bounded_int(s, SHORT_RANGE)


def parse_double(s: Any) -> Optional[float]:
    """
    Parse a floating point number from string `s`, or None.

    Accepts decimal literals with an optional exponent and an optional
    trailing f/F/d/D, plus "NaN" and "Infinity". Surrounding whitespace is
    ignored; "inf", "1_000" and hex literals are rejected.
    """
    if not isinstance(s, str):
        return None
    match = _DOUBLE_RE.fullmatch(s.strip())
    if not match:
        return None
    return float(match.group(1))


# Python floats are doubles; there is no narrower type to parse into.
parse_float = parse_double


def parse_number(s: Any, default: Any = None) -> Any:
    """
    Parse a number from string `s`.

    Numbers are returned as-is, empty input gives `default`, and anything
    that is not a numeric literal gives None.
    """
    if isinstance(s, (int, float)) and not isinstance(s, bool):
        return s
    if not s:
        return default
    if not isinstance(s, str):
        return None
    try:
        value = ast.literal_eval(s.strip())
    except (ValueError, SyntaxError, TypeError, MemoryError, RecursionError):
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    return None


def str_to_boolean(s: Optional[str]) -> bool:
    """
    Boolean value for the specified string:

        "true"   => True
        "false"  => False (any case)
        "foobar" => True
        None, "" => False
    """
    if not s:
        return False
    return s.lower() != "false"


# =============================================================================
# Predicates
# =============================================================================
def is_boolean(x: Any) -> bool:
    return isinstance(x, bool)


def _is_integer(x: Any) -> bool:
    return isinstance(x, int) and not isinstance(x, bool)


def is_pos_integer(x: Any) -> bool:
    """Return True if `x` is a positive integer value."""
    return _is_integer(x) and x > 0


def is_zero_or_pos_integer(x: Any) -> bool:
    """Return True if `x` is zero or a positive integer value."""
    return _is_integer(x) and x >= 0


def is_timestamp(n: Any) -> bool:
    """Return True if `n` fits a non-negative 64-bit epoch timestamp."""
    return _is_integer(n) and 0 <= n <= LONG_RANGE[1]


def any_match(pred: Callable[[Any], Any], coll: Iterable[Any]) -> bool:
    return any(pred(x) for x in coll)


# =============================================================================
# Time Utilities
# =============================================================================
def time_ns() -> int:
    """Current value of the most precise available timer, in nanoseconds."""
    return time.perf_counter_ns()


def time_us() -> int:
    """Same timer as time_ns, in microseconds."""
    return time_ns() // 1000


def time_ms() -> int:
    """Milliseconds since the epoch."""
    return int(time.time() * 1000)


def value_and_elapsed_time(thunk: Callable[[], T]) -> tuple:
    """Return `(value, elapsed_us)` for evaluating `thunk`."""
    start = time_us()
    value = thunk()
    return value, time_us() - start


def safe_sleep(millis: float) -> bool:
    """
    Sleep for `millis` milliseconds.

    Inside run_with_timeout the sleep ends early once the surrounding call
    has timed out.

    Returns:
        True if woken by cancellation, False otherwise
    """
    return current_cancellation_token().wait(millis / 1000.0)


# =============================================================================
# Function Wrappers
# =============================================================================
def ignore_exceptions(fn: Callable[..., T], *args, **kwargs) -> Optional[T]:
    """Call `fn`, returning None if it raises."""
    try:
        return fn(*args, **kwargs)
    except Exception:
        return None


def wrap_trapping_errors(fn: Callable[..., T], default: Any = None) -> Callable[..., Any]:
    """Wrap `fn` so any exception it raises returns `default` instead."""
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except Exception:
            return default
    return wrapper


class PeriodicCall:
    """
    Call wrapper that only forwards every `period`-th invocation.

    Usage:
        log_every_100 = PeriodicCall(logger.info, 100)
        for row in rows:
            log_every_100("still going")
    """

    def __init__(self, fn: Callable[..., Any], period: int):
        if period < 1:
            raise ValueError(f"period must be >= 1, got {period}")
        self.fn = fn
        self.period = period
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self, *args, **kwargs) -> Any:
        with self._lock:
            self.calls += 1
            due = self.calls % self.period == 0
        if due:
            return self.fn(*args, **kwargs)
        return None


def wrap_periodic(fn: Callable[..., Any], period: int) -> PeriodicCall:
    """Wrap `fn` so it runs once every `period` calls."""
    return PeriodicCall(fn, period)


# =============================================================================
# Collection Utilities
# =============================================================================
def segregate(pred: Callable[[T], Any], items: Iterable[T]) -> tuple:
    """Return `([matching], [rest])`, walking `items` once."""
    matching, rest = [], []
    for item in items:
        (matching if pred(item) else rest).append(item)
    return matching, rest


def seq_to_map(pairs: Optional[Iterable[Sequence]]) -> Optional[dict]:
    """Turn `[(k1, v1), (k2, v2)]` into a dict; None for empty input."""
    result = {pair[0]: pair[1] for pair in pairs or ()}
    return result or None


def rmerge(*maps: Any) -> Any:
    """Recursively merge dicts; for non-dict values the last one wins."""
    if not maps:
        return None
    if not all(isinstance(m, dict) for m in maps):
        return maps[-1]
    result: dict = {}
    for m in maps:
        for key, value in m.items():
            result[key] = rmerge(result[key], value) if key in result else value
    return result


def zip_columns(rows: Sequence[Sequence[Any]]) -> list:
    """[[a, 1], [b, 2], [c, 3]] => [[a, b, c], [1, 2, 3]]"""
    if not rows:
        return []
    return [list(column) for column in zip(*rows)]


def max_by(key: Callable[[T], Any], xs: Iterable[T]) -> Optional[T]:
    """Item with the largest key; the last one on ties, None when empty."""
    ordered = sorted(xs, key=key)
    return ordered[-1] if ordered else None


def min_by(key: Callable[[T], Any], xs: Iterable[T]) -> Optional[T]:
    """Item with the smallest key; the first one on ties, None when empty."""
    ordered = sorted(xs, key=key)
    return ordered[0] if ordered else None


def nested_sort(x: Any) -> Any:
    """Sort lists and dict keys at every level where items are orderable."""
    if isinstance(x, (list, tuple)):
        items = [nested_sort(i) for i in x]
        try:
            return sorted(items)
        except TypeError:
            return items
    if isinstance(x, dict):
        values = {k: nested_sort(v) for k, v in x.items()}
        try:
            return {k: values[k] for k in sorted(values)}
        except TypeError:
            return values
    return x


def single_element_only(coll: Iterable[T]) -> T:
    """Return the sole element of `coll`, raising CardinalityError otherwise."""
    head = list(itertools.islice(coll, 2))
    if len(head) > 1:
        raise CardinalityError("at least 2")
    if not head:
        raise CardinalityError("0")
    return head[0]


def indexed(items: Iterable[T]) -> Iterator[tuple]:
    """indexed("abcd") => (0, "a"), (1, "b"), (2, "c"), (3, "d")"""
    return enumerate(items)


def ensure_sequential(x: Any) -> Any:
    if isinstance(x, (list, tuple)):
        return x
    return [x]


def butlast(v: Sequence[T]) -> list:
    """All but the last item of `v`, as a list."""
    if len(v) < 2:
        return []
    return list(v[:-1])


def transform_fakejson_params(params: dict) -> dict:
    """
    Expand form-style keys into nested dicts.

        {"user[name]": "ann", "user[tag]": ""} => {"user": {"name": "ann", "tag": None}}
    """
    result: dict = {}
    for key, value in params.items():
        path = [part for part in re.split(r"[\[\]]", key) if part]
        if not path:
            continue
        node = result
        for part in path[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = node[part] = {}
            node = child
        node[path[-1]] = value or None
    return result


# =============================================================================
# Naming
# =============================================================================
def uuid_str() -> str:
    """Return a random UUID string."""
    return str(uuid.uuid4())


class IncrementalNamer:
    """
    Generates `prefix-0`, `prefix-1`, ... on each call.

    The counter lives on the instance, so two namers never share state.
    """

    def __init__(self, prefix: str):
        self.prefix = prefix
        self._counter = itertools.count()
        self._lock = threading.Lock()

    def __call__(self) -> str:
        with self._lock:
            n = next(self._counter)
        return f"{self.prefix}-{n}"


# =============================================================================
# Formatting / Output
# =============================================================================
def cents_to_dollar_str(cents: float) -> str:
    return f"{cents / 100.0:.2f}"


def stacktrace_lines(exc: BaseException) -> list:
    """Traceback of `exc` as a list of newline-terminated strings."""
    return traceback.format_tb(exc.__traceback__)


def tap(*args: Any) -> Any:
    """Log the args and return the last one."""
    logger.info(" ".join(a if isinstance(a, str) else pformat(a) for a in args))
    return args[-1] if args else None


def fprint(*args: Any) -> None:
    """Same as print without a newline, flushing stdout."""
    print(*args, end="", flush=True)


def fprintln(*args: Any) -> None:
    """Same as print, flushing stdout."""
    print(*args, flush=True)


def print_error(*args: Any) -> None:
    print(*args, file=sys.stderr)


# =============================================================================
# Files / Misc
# =============================================================================
def mkdir_p(path: str) -> bool:
    """Create `path` and any missing parents. Returns True if it was created."""
    target = Path(path)
    existed = target.exists()
    target.mkdir(parents=True, exist_ok=True)
    return not existed


@contextmanager
def with_temp_file() -> Iterator[Path]:
    """Yield a fresh temp file path and delete the file on exit."""
    path = get_temp_dir() / uuid_str()
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)


def rand_int_between(low: int, high: int) -> int:
    """Random integer between low (inclusive) and high (exclusive)."""
    return low + int(random.random() * (high - low))
