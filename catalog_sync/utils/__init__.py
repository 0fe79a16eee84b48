"""Shared utility helpers used across connectors and services."""

from decimal import Decimal, InvalidOperation


def safe_decimal(v) -> Decimal | None:
    """Safely convert a value to Decimal, returning None on failure."""
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, Decimal):
        return v
    try:
        # str() first so floats keep their shortest repr (0.1 -> "0.1")
        d = Decimal(str(v).strip())
    except (InvalidOperation, ValueError, TypeError):
        return None
    return d if d.is_finite() else None


def canonical_amount(v) -> str | None:
    """Render an amount as its shortest plain decimal string.

    Trailing zeros are dropped and exponents never appear, so
    "100.00", 100 and Decimal("1E+2") all become "100". Returns None
    for missing or unparseable input.
    """
    d = safe_decimal(v)
    if d is None:
        return None
    if d == 0:
        return "0"
    return format(d.normalize(), "f")
