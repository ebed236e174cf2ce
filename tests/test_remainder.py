"""Tests for leftover-text handling."""

from __future__ import annotations

from receiptag.receipt.remainder import RemainderBuffer, normalize_remainder


def test_normalize_trims_and_drops_blank_lines() -> None:
    assert normalize_remainder("  a  \n\n \t\n b\n") == "a\nb"


def test_normalize_is_idempotent() -> None:
    once = normalize_remainder(" x \n\n y \n  z")
    assert normalize_remainder(once) == once


def test_normalize_empty() -> None:
    assert normalize_remainder("") == ""


def test_remove_first_only_first_occurrence() -> None:
    buffer = RemainderBuffer("10.00 and 10.00")

    assert buffer.remove_first("10.00") == 0
    assert buffer.text == " and 10.00"


def test_remove_first_absent_or_empty_value_is_noop() -> None:
    buffer = RemainderBuffer("abc")

    assert buffer.remove_first("xyz") is None
    assert buffer.remove_first("") is None
    assert buffer.text == "abc"
    assert buffer.excisions == []


def test_overlapping_values_consume_in_order() -> None:
    buffer = RemainderBuffer("Ref 12345\n")

    assert buffer.remove_first("12345") == 4
    # Already consumed by the first removal
    assert buffer.remove_first("2345") is None
    assert buffer.normalized() == "Ref"
    assert [e.value for e in buffer.excisions] == ["12345"]
