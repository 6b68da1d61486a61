"""
Decimal helpers for the response boundary: 2-dp rounding, percentage-of-base
and ratio strings. Aggregates stay Decimal until they pass through here.
"""
from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal

TWO_PLACES = Decimal("0.01")
HUNDRED = Decimal(100)
ZERO = Decimal(0)


def to_decimal(value) -> Decimal | None:
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def quantize(value) -> Decimal | None:
    d = to_decimal(value)
    if d is None:
        return None
    return d.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def format_decimal(value) -> str:
    """'12.35' style string; None renders as '0.00'."""
    q = quantize(value)
    return str(q if q is not None else ZERO.quantize(TWO_PLACES))


def to_number(value) -> float | None:
    """2-dp JSON number, or None."""
    q = quantize(value)
    return float(q) if q is not None else None


def percentage(part, base) -> str:
    base_d = to_decimal(base) or ZERO
    if base_d <= 0:
        return format_decimal(ZERO)
    return format_decimal((to_decimal(part) or ZERO) / base_d * HUNDRED)


def ratio_string(numerator, denominator) -> str:
    denom = to_decimal(denominator) or ZERO
    if denom <= 0:
        return format_decimal(ZERO)
    return format_decimal((to_decimal(numerator) or ZERO) / denom)


def derive_percentages(base, components: Mapping[str, object]) -> dict[str, str]:
    """
    Each component as a percentage of base, 2-dp strings.
    base <= 0 (or missing) yields "0.00" for every component.
    """
    return {name: percentage(value, base) for name, value in components.items()}
