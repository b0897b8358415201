"""
Budget Engine Project Estimation

PERT three-point estimates, confidence intervals, Earned Value
Management and contingency reserves.
"""
from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from typing import Optional

from budget_engine.models import EVMMetrics
from budget_engine.numeric import HUNDRED, ZERO, Numeric, to_decimal

PERT_WEIGHT = Decimal("4")
PERT_DIVISOR = Decimal("6")

# Two-sided z-scores for the supported confidence levels
Z_SCORES: dict[float, Decimal] = {
    0.68: Decimal("1.0"),
    0.95: Decimal("1.96"),
    0.99: Decimal("2.58"),
}
DEFAULT_Z_SCORE = Decimal("1.96")


def three_point_estimate(optimistic: Numeric, most_likely: Numeric, pessimistic: Numeric) -> Decimal:
    """
    Compute the PERT weighted mean.

    E = (O + 4M + P) / 6
    """
    return (
        to_decimal(optimistic)
        + PERT_WEIGHT * to_decimal(most_likely)
        + to_decimal(pessimistic)
    ) / PERT_DIVISOR


def three_point_standard_deviation(optimistic: Numeric, pessimistic: Numeric) -> Decimal:
    """SD = (P - O) / 6"""
    return (to_decimal(pessimistic) - to_decimal(optimistic)) / PERT_DIVISOR


def confidence_interval(
    estimate: Numeric,
    standard_deviation: Numeric,
    confidence_level: float = 0.95,
) -> tuple[Decimal, Decimal]:
    """
    Compute a normal-approximation interval around an estimate.

    Interval = E ± z * SD

    z comes from a fixed table (68% -> 1.0, 95% -> 1.96, 99% -> 2.58);
    any other level falls back to 1.96.

    Returns:
        (lower, upper)
    """
    z_score = Z_SCORES.get(float(confidence_level), DEFAULT_Z_SCORE)
    estimate = to_decimal(estimate)
    margin = z_score * to_decimal(standard_deviation)
    return estimate - margin, estimate + margin


def evm_metrics(
    planned_value: Numeric,
    earned_value: Numeric,
    actual_cost: Numeric,
    budget_at_completion: Numeric,
) -> EVMMetrics:
    """
    Compute Earned Value Management metrics.

    SV  = EV - PV
    CV  = EV - AC
    SPI = EV / PV        (None if PV = 0)
    CPI = EV / AC        (None if AC = 0)
    EAC = BAC / CPI      (None if CPI is None or 0)
    ETC = EAC - AC       (None if EAC is None)

    Returns:
        EVMMetrics
    """
    pv = to_decimal(planned_value)
    ev = to_decimal(earned_value)
    ac = to_decimal(actual_cost)
    bac = to_decimal(budget_at_completion)

    spi = None if pv == ZERO else ev / pv
    cpi = None if ac == ZERO else ev / ac

    eac: Optional[Decimal] = None
    if cpi is not None and cpi != ZERO:
        eac = bac / cpi

    etc = None if eac is None else eac - ac

    return EVMMetrics(
        planned_value=pv,
        earned_value=ev,
        actual_cost=ac,
        schedule_variance=ev - pv,
        cost_variance=ev - ac,
        schedule_performance_index=spi,
        cost_performance_index=cpi,
        estimate_at_completion=eac,
        estimate_to_complete=etc,
    )


def contingency_reserve(base_estimate: Numeric, risk_percentage: Numeric) -> Decimal:
    """Reserve = Base * Risk% / 100"""
    return to_decimal(base_estimate) * (to_decimal(risk_percentage) / HUNDRED)


def bottom_up_estimate(task_costs: Sequence[Numeric], contingency_percent: Numeric) -> Decimal:
    """
    Roll task costs up into a project estimate.

    Total = sum(TaskCosts) + Reserve(sum(TaskCosts), contingency%)
    """
    base_total = sum((to_decimal(c) for c in task_costs), ZERO)
    return base_total + contingency_reserve(base_total, contingency_percent)
