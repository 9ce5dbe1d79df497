"""
Money Utilities - Safe Decimal operations for monetary values.

Avoids float precision issues by using Decimal throughout.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

Numeric = Union[str, int, float, Decimal]

# Default precision for money operations (2 decimal places)
MONEY_PRECISION = Decimal("0.01")

CURRENCY_SYMBOL = "$"


def to_decimal(value: Union[Numeric, None]) -> Decimal:
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
        if isinstance(value, float):
            # Go through str to keep 0.1 as 0.1
            return Decimal(str(value))
        return Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")


def round_money(value: Numeric) -> Decimal:
    """Round monetary value to cents."""
    return to_decimal(value).quantize(MONEY_PRECISION, rounding=ROUND_HALF_UP)


def parse_price(value: Union[Numeric, None]) -> Decimal:
    """
    Strict conversion for prices read from the catalog.

    Raises ValueError for missing, unparseable, non-finite or negative
    values instead of falling back to zero.
    """
    if value is None or isinstance(value, bool):
        raise ValueError(f"invalid price: {value!r}")
    try:
        price = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        raise ValueError(f"invalid price: {value!r}") from None
    if not price.is_finite() or price < 0:
        raise ValueError(f"invalid price: {value!r}")
    return price


def format_money(value: Numeric) -> str:
    """Format a USD amount, e.g. "$1,234.50"."""
    return f"{CURRENCY_SYMBOL}{round_money(value):,.2f}"


def add(a: Numeric, b: Numeric) -> Decimal:
    """Safe addition of monetary values."""
    return to_decimal(a) + to_decimal(b)


def multiply(value: Numeric, factor: Numeric) -> Decimal:
    """Safe multiplication of monetary value by a factor."""
    return to_decimal(value) * to_decimal(factor)
