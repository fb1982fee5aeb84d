"""
Tests for the error types and validation helpers.
"""

from lostworlds.core.error_handling import (
    CombatEngineError,
    FormulaNotFoundError,
    InvalidSelectionError,
    ensure_int_in_range,
    ensure_non_negative_int,
)


def test_error_hierarchy():
    assert issubclass(FormulaNotFoundError, CombatEngineError)
    assert issubclass(FormulaNotFoundError, LookupError)
    assert issubclass(InvalidSelectionError, ValueError)


def test_ensure_non_negative_int_corrects():
    assert ensure_non_negative_int(4, "dice") == 4
    assert ensure_non_negative_int(-3, "dice") == 0
    assert ensure_non_negative_int(2.7, "dice") == 2
    assert ensure_non_negative_int("x", "dice", default=1) == 1


def test_ensure_int_in_range_clamps():
    assert ensure_int_in_range(5, "level", 0, 10) == 5
    assert ensure_int_in_range(12, "level", 0, 10) == 10
    assert ensure_int_in_range(-1, "level", 0, 10) == 0
    assert ensure_int_in_range(None, "level", 0, 10, default=3) == 3
