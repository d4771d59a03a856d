"""Tests for KITS pytest assertion helpers."""

from __future__ import annotations

import socket

import pytest

from kits.testing import (
    assert_tables_equal,
    check_spec_pairs,
    data_diff,
    equal_or_print_diff,
    not_raises,
    open_port,
)


def test_data_diff_equal_values() -> None:
    assert data_diff({"a": [1, 2]}, {"a": [1, 2]}) is None


def test_data_diff_dicts() -> None:
    assert data_diff({"a": 1, "b": 2, "c": 3}, {"a": 1, "b": 5, "d": 4}) == {
        "only_in_expected": {"b": 2, "c": 3},
        "only_in_actual": {"b": 5, "d": 4},
    }


def test_data_diff_sequences() -> None:
    assert data_diff([1, 2, 3], [1, 9]) == {
        "only_in_expected": [None, 2, 3],
        "only_in_actual": [None, 9, None],
    }


def test_data_diff_scalars() -> None:
    assert data_diff("x", 1) == {"only_in_expected": "x", "only_in_actual": 1}


def test_equal_or_print_diff(capsys) -> None:
    assert equal_or_print_diff([1], [1]) is True
    assert equal_or_print_diff({"k": 1}, {"k": 2}) is False
    assert "only_in_actual" in capsys.readouterr().out


def test_assert_tables_equal_passes() -> None:
    assert_tables_equal([["a", 1], ["b", 2]], [["a", 1], ["b", 2]])


def test_assert_tables_equal_names_the_cell() -> None:
    with pytest.raises(AssertionError, match="Row index: 1, Column index: 0"):
        assert_tables_equal([["a", 1], ["b", 2]], [["a", 1], ["x", 2]])


def test_assert_tables_equal_checks_row_count() -> None:
    with pytest.raises(AssertionError, match="Row count"):
        assert_tables_equal([["a"]], [["a"], ["b"]])


def test_not_raises_passes_through() -> None:
    with not_raises(ValueError):
        int("5")


def test_not_raises_fails_the_test() -> None:
    with pytest.raises(pytest.fail.Exception, match="Did not expect ValueError"):
        with not_raises(ValueError):
            int("five")


def test_not_raises_ignores_other_exceptions() -> None:
    with pytest.raises(KeyError):
        with not_raises(ValueError):
            raise KeyError("k")


def test_open_port_is_bindable() -> None:
    port = open_port()
    assert 60000 <= port < 65535
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("", port))


def test_check_spec_pairs() -> None:
    pairs = [(2, 1), (4, 2), (7, 3)]
    failures = check_spec_pairs(pairs, lambda n: n * 2)

    assert len(failures) == 1
    assert failures[0]["index"] == 2
    assert failures[0]["for"] == "7 3"
    assert failures[0]["error"] == {"only_in_expected": 7, "only_in_actual": 6}
