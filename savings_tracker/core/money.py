"""Money helpers. Amounts are Decimal currency units, never integer cents."""

from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

Numeric = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_money(value: Numeric) -> Decimal:
    """
    Convert a number to Decimal without binary float artifacts.

    Raises:
        ValueError: If the value is not a finite number
    """
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"Not a monetary amount: {value!r}")
    if not amount.is_finite():
        raise ValueError(f"Not a monetary amount: {value!r}")
    return amount


def ceil_amount(value: Decimal) -> Decimal:
    """Round up to a whole currency unit."""
    return value.to_integral_value(rounding=ROUND_CEILING)


def format_currency(amount: Numeric, symbol: str = "$") -> str:
    """
    Format an amount for display: symbol, thousands separator, 2 decimals.

    >>> format_currency(Decimal("1234.5"))
    '$1,234.50'
    """
    value = to_money(amount).quantize(CENT, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"
