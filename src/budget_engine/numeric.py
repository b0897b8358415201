"""
Budget Engine Numeric Helpers

Decimal conversion and exponentiation shared by the calculation modules.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Union

Numeric = Union[int, float, str, Decimal]

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")


def to_decimal(value: Numeric) -> Decimal:
    """
    Convert a numeric value to Decimal.

    Floats go through their shortest string form so that 0.1 becomes
    Decimal("0.1") and not its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def decimal_power(base: Decimal, exponent: int) -> Decimal:
    """
    Raise a Decimal to an integer power by repeated multiplication.

    base^n = base * base * ... * base (n times)
    base^-n = 1 / base^n

    Args:
        base: Decimal base
        exponent: Integer exponent (may be negative)

    Returns:
        base raised to exponent, 1 for exponent 0
    """
    result = ONE
    for _ in range(abs(exponent)):
        result *= base
    if exponent < 0:
        return ONE / result
    return result


def float_power(base: Decimal, exponent: float) -> Decimal:
    """
    Raise a Decimal to a possibly fractional power.

    Computed in binary floating point and converted back, so only used
    where the exponent cannot be assumed integral (compounding periods,
    annuity factors).
    """
    return to_decimal(float(base) ** float(exponent))
