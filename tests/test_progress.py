"""Tests for KITS progress reporting."""

from __future__ import annotations

import io

import pytest

from kits.progress import DefaultProgressFormatter, ProgressReporter, progress_reporting


def test_formatter_prints_dots_and_rows() -> None:
    out = io.StringIO()
    formatter = DefaultProgressFormatter(iters_per_row=10, num_columns=5, stream=out)
    for i in range(1, 11):
        formatter(i, False)

    assert out.getvalue() == "...." + f"{10:8,d} rows\n"


def test_formatter_summary_and_row_handler() -> None:
    out = io.StringIO()
    formatter = DefaultProgressFormatter(
        iters_per_row=1000,
        num_columns=10,
        row_handler=lambda i: f"({i * 2} bytes)",
        stream=out,
    )
    formatter(1234, True)
    assert out.getvalue() == "   1,234 rows (2468 bytes)\n"


def test_formatter_no_summary() -> None:
    out = io.StringIO()
    DefaultProgressFormatter(no_summary=True, stream=out)(5, True)
    assert out.getvalue() == ""


def test_formatter_narrow_rows_do_not_divide_by_zero() -> None:
    out = io.StringIO()
    formatter = DefaultProgressFormatter(iters_per_row=3, num_columns=60, stream=out)
    for i in range(1, 4):
        formatter(i, False)
    assert out.getvalue() == ".." + f"{3:8,d} rows\n"


def test_reporter_counts_and_notifies() -> None:
    events = []
    reporter = ProgressReporter(reporter=lambda i, final: events.append((i, final)), enabled=True)
    for _ in range(3):
        reporter.report()
    reporter.finish()

    assert reporter.count == 3
    assert events == [(1, False), (2, False), (3, False), (3, True)]


def test_disabled_reporter_is_silent() -> None:
    events = []
    reporter = ProgressReporter(reporter=lambda i, final: events.append(i), enabled=False)
    reporter.report()
    reporter.finish()
    assert events == []
    assert reporter.count == 0


def test_progress_reporting_context_manager() -> None:
    out = io.StringIO()
    with progress_reporting(enabled=True, iters_per_row=4, num_columns=2, stream=out) as progress:
        for _ in range(5):
            progress.report()

    assert progress.count == 5
    assert out.getvalue() == "." + f"{4:8,d} rows\n" + f"{5:8,d} rows\n"


def test_progress_reporting_skips_summary_on_error() -> None:
    events = []
    with pytest.raises(RuntimeError):
        with progress_reporting(reporter=lambda i, final: events.append(final), enabled=True) as progress:
            progress.report()
            raise RuntimeError("stop")
    assert events == [False]
