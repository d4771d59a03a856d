"""
Progress Reporting — Dots and row counts for long-running loops.

A ProgressReporter owns the iteration counter and hands each update to a
formatter. The default formatter prints a dot every few iterations and a
counted row every ``iters_per_row`` iterations:

    ............................................................    1,000 rows
    ............................................................    2,000 rows
       2,345 rows

Usage:
    with progress_reporting(iters_per_row=500) as progress:
        for record in records:
            handle(record)
            progress.report()
"""

from __future__ import annotations

import sys
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, TextIO

from kits.shared.logging import PROGRESS_LOGGER, get_logger
from kits.shared.settings import (
    PRINT_PROGRESS,
    PROGRESS_ITERS_PER_ROW,
    PROGRESS_NUM_COLUMNS,
)

logger = get_logger(PROGRESS_LOGGER)

DEFAULT_ROW_FMT = "{count:8,d} rows{suffix}"

# (iteration, final) -> None
ReportFn = Callable[[int, bool], None]


class DefaultProgressFormatter:
    """
    Prints progress to a text stream.

    Args:
        iters_per_row: Iterations per printed row
        num_columns: Dots per row
        row_handler: Optional ``i -> str`` appended to each row
        row_fmt: Row format with ``count`` and ``suffix`` fields
        no_summary: Skip the final summary row
        stream: Output stream (stdout by default)
    """

    def __init__(
        self,
        iters_per_row: Optional[int] = None,
        num_columns: Optional[int] = None,
        row_handler: Optional[Callable[[int], str]] = None,
        row_fmt: str = DEFAULT_ROW_FMT,
        no_summary: bool = False,
        stream: Optional[TextIO] = None,
    ):
        self.iters_per_row = iters_per_row or PROGRESS_ITERS_PER_ROW
        self.num_columns = num_columns or PROGRESS_NUM_COLUMNS
        # At least one iteration per dot, even when rows are narrower than columns.
        self.iters_per_dot = max(1, self.iters_per_row // self.num_columns)
        self.row_handler = row_handler
        self.row_fmt = row_fmt
        self.no_summary = no_summary
        self.stream = stream

    def _out(self) -> TextIO:
        return self.stream if self.stream is not None else sys.stdout

    def _row(self, i: int) -> str:
        suffix = f" {self.row_handler(i)}" if self.row_handler else ""
        return self.row_fmt.format(count=i, suffix=suffix)

    def _write(self, text: str) -> None:
        out = self._out()
        out.write(text)
        out.flush()

    def __call__(self, i: int, final: bool) -> None:
        if final:
            if not self.no_summary:
                self._write(self._row(i) + "\n")
        elif i % self.iters_per_row == 0:
            self._write(self._row(i) + "\n")
        elif i % self.iters_per_dot == 0:
            self._write(".")


class ProgressReporter:
    """
    Iteration counter plus the function that renders it.

    Args:
        reporter: Custom ``(i, final)`` callback; a DefaultProgressFormatter
            built from ``formatter_opts`` is used when omitted
        enabled: Turn reporting on/off (defaults to PRINT_PROGRESS)
    """

    def __init__(
        self,
        reporter: Optional[ReportFn] = None,
        enabled: Optional[bool] = None,
        **formatter_opts,
    ):
        self.reporter = reporter or DefaultProgressFormatter(**formatter_opts)
        self.enabled = PRINT_PROGRESS if enabled is None else enabled
        self._count = 0
        self._lock = threading.Lock()

    @property
    def count(self) -> int:
        return self._count

    def report(self) -> None:
        """Record one more iteration and notify the reporter."""
        if not self.enabled:
            return
        with self._lock:
            self._count += 1
            i = self._count
        self.reporter(i, False)

    def finish(self) -> None:
        """Notify the reporter that iteration is over."""
        if not self.enabled:
            return
        logger.debug(f"Progress finished after {self._count} iteration(s)")
        self.reporter(self._count, True)


@contextmanager
def progress_reporting(
    reporter: Optional[ReportFn] = None,
    enabled: Optional[bool] = None,
    **formatter_opts,
) -> Iterator[ProgressReporter]:
    """
    Yield a ProgressReporter and emit the summary once the block completes.

    The summary is skipped if the block raises.
    """
    progress = ProgressReporter(reporter=reporter, enabled=enabled, **formatter_opts)
    yield progress
    progress.finish()
