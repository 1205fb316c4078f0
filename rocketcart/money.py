"""
Money Utilities - Safe Decimal operations for product prices.

Avoids float precision issues by using Decimal throughout.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

# Default precision for money operations (2 decimal places)
MONEY_PRECISION = Decimal("0.01")

# Upper bound for a unit price
MAX_PRICE = Decimal("1000000000")

Number = Union[str, int, float, Decimal]


def to_decimal(value: Union[Number, None]) -> Decimal:
    """
    Convert any value to Decimal safely.

    Args:
        value: Value to convert (str, int, float, Decimal, or None)

    Returns:
        Decimal representation of the value, or Decimal("0") if None/invalid
    """
    if value is None:
        return Decimal("0")

    if isinstance(value, Decimal):
        return value

    try:
        # Convert via string to avoid float precision issues
        if isinstance(value, float):
            return Decimal(str(value))
        return Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")


def round_money(value: Number) -> Decimal:
    """Round monetary value to cents."""
    return to_decimal(value).quantize(MONEY_PRECISION, rounding=ROUND_HALF_UP)


def multiply(value: Number, factor: Number) -> Decimal:
    """Safe multiplication of monetary value by a factor."""
    return to_decimal(value) * to_decimal(factor)


def add(a: Number, b: Number) -> Decimal:
    """Safe addition of monetary values."""
    return to_decimal(a) + to_decimal(b)


def format_money(value: Number, currency: str = "BRL") -> str:
    """
    Format a price the way the storefront shows it.

    BRL uses comma decimals and dot thousands ("R$ 1.234,50"),
    everything else the English convention ("$1,234.50").
    """
    formatted = f"{round_money(value):,.2f}"
    if currency == "BRL":
        formatted = formatted.replace(",", "_").replace(".", ",").replace("_", ".")
        return f"R$ {formatted}"
    if currency == "USD":
        return f"${formatted}"
    return f"{formatted} {currency}"


def to_float(value: Number) -> float:
    """Convert to float for JSON payloads. Use only at boundaries."""
    return float(to_decimal(value))
