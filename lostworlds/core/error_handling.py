"""
Error types and validation helpers for the combat engine.

Callers log errors with their context through catchery before raising them,
so the terminal front end and the log tell the same story. The validation
helpers correct recoverable input and warn instead of raising.
"""

from typing import Any, Optional

from catchery import log_warning


class CombatEngineError(Exception):
    """Base class for every error raised by the combat engine."""


class FormulaNotFoundError(CombatEngineError, LookupError):
    """Raised when no combat formula matches an attack type and role."""


class InvalidSelectionError(CombatEngineError, ValueError):
    """Raised when a roll is requested without a valid selection."""


class CharacterRecordError(CombatEngineError, ValueError):
    """Raised when a character record cannot be adapted to a snapshot."""


# ==============================================================================
# VALIDATION HELPERS
# ==============================================================================


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def ensure_non_negative_int(
    value: Any, param_name: str, default: int = 0, context: Optional[dict[str, Any]] = None
) -> int:
    """
    Coerces a dice count (or similar) to a non-negative integer.

    Negative numbers become 0, floats are truncated and anything that is not
    a number becomes ``default``. Every correction is logged as a warning.

    Args:
        value (Any): The value to coerce.
        param_name (str): What the value is, for the log.
        default (int): Replacement for non-numeric values.
        context (Optional[dict[str, Any]]): Extra fields for the log entry.

    Returns:
        int: The corrected value.

    """
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value

    corrected = max(0, int(value)) if _is_number(value) else default
    log_warning(
        f"{param_name} must be a non-negative integer, got: {value!r}, using {corrected}",
        {**(context or {}), "param_name": param_name, "value": value, "corrected_to": corrected},
    )
    return corrected


def ensure_int_in_range(
    value: Any,
    param_name: str,
    min_val: int,
    max_val: Optional[int] = None,
    default: Optional[int] = None,
    context: Optional[dict[str, Any]] = None,
) -> int:
    """
    Clamps a value into ``[min_val, max_val]``, logging a warning if it had to.

    Args:
        value (Any): The value to clamp.
        param_name (str): What the value is, for the log.
        min_val (int): Inclusive lower bound.
        max_val (Optional[int]): Inclusive upper bound, None for unbounded.
        default (Optional[int]): Replacement for non-numeric values;
            ``min_val`` when omitted.
        context (Optional[dict[str, Any]]): Extra fields for the log entry.

    Returns:
        int: The value, clamped.

    """
    in_range = (
        isinstance(value, int)
        and not isinstance(value, bool)
        and value >= min_val
        and (max_val is None or value <= max_val)
    )
    if in_range:
        return value

    if _is_number(value):
        corrected = max(min_val, int(value))
        if max_val is not None:
            corrected = min(max_val, corrected)
    else:
        corrected = min_val if default is None else default

    bounds = f">= {min_val}" if max_val is None else f"between {min_val} and {max_val}"
    log_warning(
        f"{param_name} must be an integer {bounds}, got: {value!r}, using {corrected}",
        {
            **(context or {}),
            "param_name": param_name,
            "value": value,
            "min_val": min_val,
            "max_val": max_val,
            "corrected_to": corrected,
        },
    )
    return corrected
