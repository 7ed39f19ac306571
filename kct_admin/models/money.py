"""
Money helpers.
Prices are dollars at the edges (forms, CSV files) and integer cents in the database.
"""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

Number = Union[int, float, str, Decimal]

_CURRENCY_CHARS = re.compile(r"[$,\s]")


def parse_money(value: Number) -> Decimal:
    """
    Parse a dollar amount such as ``12.5``, ``"12.50"`` or ``"$1,299.00"``.

    Raises:
        ValueError: if the value is empty or not a number
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    if isinstance(value, Decimal):
        amount = value
    else:
        text = _CURRENCY_CHARS.sub("", str(value))
        if not text:
            raise ValueError("Amount is empty")
        try:
            amount = Decimal(text)
        except InvalidOperation:
            raise ValueError(f"Invalid amount: {value!r}")
    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return amount


def dollars_to_cents(value: Number) -> int:
    """Convert dollars to integer cents, rounding half up."""
    amount = parse_money(value)
    if amount < 0:
        raise ValueError(f"Amount cannot be negative: {value!r}")
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def cents_to_dollars(cents: int) -> Decimal:
    return (Decimal(int(cents or 0)) / 100).quantize(Decimal("0.01"))


def format_cents(cents: int) -> str:
    """Format cents as a plain two-decimal dollar string, e.g. ``"12.34"``."""
    return f"{cents_to_dollars(cents):.2f}"


def round_cents(value: Decimal) -> int:
    """Round a fractional cent amount to an int, half up."""
    return int(Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
