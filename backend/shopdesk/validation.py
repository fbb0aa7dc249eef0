# Overview: Input validation helpers shared by services and routes.

from __future__ import annotations

from typing import Any


# Maximum amount: 999,999,999,999 đồng
# Larger values are typing mistakes, not real shop transactions
MAX_AMOUNT = 999_999_999_999


class ValidationError(ValueError):
    """400-level input problem."""


def require_text(value: Any, field: str, *, label: str | None = None) -> str:
    """
    Return a stripped, non-empty string or raise ValidationError.

    label is the human-facing name used in the message (defaults to field).
    """
    if value is None or not str(value).strip():
        raise ValidationError(f"{label or field} is required")
    return str(value).strip()


def optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def coerce_int(value: Any, field: str, *, minimum: int | None = 0, maximum: int = MAX_AMOUNT) -> int:
    """
    Strict integer coercion for quantities and amounts.

    Accepts ints and plain digit strings. Rejects bools, floats with a
    fractional part, decimals in strings and scientific notation.
    """
    if value is None:
        raise ValidationError(f"{field} is required")

    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")

    if isinstance(value, int):
        result = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"{field} must be an integer, not a decimal")
        result = int(value)
    elif isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValidationError(f"{field} must be an integer")
        if "e" in stripped.lower():
            raise ValidationError(f"{field} must be a plain integer (scientific notation not allowed)")
        if "." in stripped:
            raise ValidationError(f"{field} must be an integer (no decimals)")
        try:
            result = int(stripped)
        except ValueError:
            raise ValidationError(f"{field} must be an integer")
    else:
        raise ValidationError(f"{field} must be an integer")

    if minimum is not None and result < minimum:
        raise ValidationError(f"{field} must be at least {minimum}")
    if result > maximum:
        raise ValidationError(f"{field} exceeds maximum allowed value")
    return result


def coerce_number(value: Any, field: str, *, minimum: float = 0) -> float:
    """Lenient numeric coercion for tax rates and parsed document values."""
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    try:
        result = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number")
    if result < minimum:
        raise ValidationError(f"{field} must be at least {minimum}")
    return result


def require_choice(value: Any, field: str, choices) -> str:
    if value not in choices:
        raise ValidationError(
            f"Invalid {field} '{value}'. Must be one of: {', '.join(sorted(choices))}"
        )
    return value
