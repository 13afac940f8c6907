"""
Monetary arithmetic helpers.

All amounts are Decimal and settle to the currency minor unit with
round-half-up.
"""

from decimal import ROUND_HALF_UP, Decimal

from compensation.constants import MONEY_QUANT


def to_decimal(value: Decimal | int | float | str | None) -> Decimal:
    """
    Convert a numeric value to Decimal.

    Floats go through ``str`` so 0.1 stays 0.1. None becomes zero.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(amount: Decimal) -> Decimal:
    """
    Round amount to the currency minor unit (half-up).

    Example:
        >>> round_money(Decimal("10.005"))
        Decimal('10.01')
    """
    return to_decimal(amount).quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


def percent_of(amount: Decimal, rate_percent: Decimal) -> Decimal:
    """
    Calculate a percentage of an amount, rounded to the minor unit.

    Formula: amount * rate_percent / 100

    Example:
        >>> percent_of(Decimal("1000"), Decimal("3"))
        Decimal('30.00')
    """
    if amount <= 0 or rate_percent <= 0:
        return Decimal("0.00")
    return round_money(to_decimal(amount) * to_decimal(rate_percent) / 100)
