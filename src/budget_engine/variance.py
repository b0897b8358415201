"""
Budget Engine Variance Calculations

Budget against actual comparison: variance, utilization, burn rate and
status classification.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Optional

from budget_engine.models import VarianceStatus
from budget_engine.numeric import HUNDRED, ZERO, Numeric, to_decimal


def variance(actual: Numeric, budgeted: Numeric) -> Decimal:
    """
    Compute absolute variance.

    Variance = Actual - Budgeted
    Positive = overspent
    """
    return to_decimal(actual) - to_decimal(budgeted)


def variance_percentage(actual: Numeric, budgeted: Numeric) -> Optional[Decimal]:
    """
    Compute variance as a percentage of budget.

    Variance% = (Actual - Budgeted) / Budgeted * 100

    Returns:
        Percentage, or None when nothing was budgeted
    """
    budgeted = to_decimal(budgeted)
    if budgeted == ZERO:
        return None
    return (to_decimal(actual) - budgeted) / budgeted * HUNDRED


def variance_status(actual: Numeric, budgeted: Numeric, tolerance: Numeric) -> VarianceStatus:
    """
    Classify the variance against a tolerance band.

    |Variance| <= tolerance  -> ON_TARGET (boundary inclusive)
    Variance > 0             -> OVER
    otherwise                -> UNDER
    """
    diff = variance(actual, budgeted)
    if abs(diff) <= to_decimal(tolerance):
        return VarianceStatus.ON_TARGET
    if diff > ZERO:
        return VarianceStatus.OVER
    return VarianceStatus.UNDER


def utilization_rate(spent: Numeric, budgeted: Numeric) -> Optional[Decimal]:
    """
    Compute the share of the budget already spent.

    Utilization = Spent / Budgeted * 100

    Returns:
        Percentage, or None when nothing was budgeted
    """
    budgeted = to_decimal(budgeted)
    if budgeted == ZERO:
        return None
    return to_decimal(spent) / budgeted * HUNDRED


def remaining_budget(budgeted: Numeric, spent: Numeric) -> Decimal:
    """Remaining = Budgeted - Spent (negative once overspent)."""
    return to_decimal(budgeted) - to_decimal(spent)


def burn_rate(total_spent: Numeric, periods_elapsed: int) -> Decimal:
    """
    Compute average spending per elapsed period.

    BurnRate = TotalSpent / PeriodsElapsed

    Unlike the ratio functions above this returns 0, not None, when no
    period has elapsed. Callers rely on that zero.
    """
    if periods_elapsed == 0:
        return ZERO
    return to_decimal(total_spent) / Decimal(periods_elapsed)
