"""
KITS Testing — assertion helpers for pytest suites.

Requires the ``test`` extra (pytest).
"""

from .assertions import (
    assert_tables_equal,
    check_spec_pairs,
    data_diff,
    equal_or_print_diff,
    not_raises,
    open_port,
)

__all__ = [
    "assert_tables_equal",
    "check_spec_pairs",
    "data_diff",
    "equal_or_print_diff",
    "not_raises",
    "open_port",
]
