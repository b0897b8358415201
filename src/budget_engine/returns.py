"""
Budget Engine Return Calculations

ROI, ROA, ROE, IRR, NPV, payback period and profitability index.
"""
from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from decimal import Decimal
from typing import Optional

from budget_engine.cashflows import cumulative_cash_flow
from budget_engine.numeric import HUNDRED, ONE, ZERO, Numeric, decimal_power, to_decimal

logger = logging.getLogger(__name__)

DEFAULT_IRR_MAX_ITERATIONS = 100
DEFAULT_IRR_TOLERANCE = 1e-6
IRR_INITIAL_GUESS = 0.10


def roi(gain: Numeric, cost: Numeric) -> Optional[Decimal]:
    """
    Compute return on investment.

    ROI = (Gain - Cost) / Cost * 100

    Returns:
        Percentage, or None for zero cost
    """
    cost = to_decimal(cost)
    if cost == ZERO:
        return None
    return (to_decimal(gain) - cost) / cost * HUNDRED


def roa(net_income: Numeric, total_assets: Numeric) -> Optional[Decimal]:
    """ROA = NetIncome / TotalAssets * 100, None for zero assets."""
    total_assets = to_decimal(total_assets)
    if total_assets == ZERO:
        return None
    return to_decimal(net_income) / total_assets * HUNDRED


def roe(net_income: Numeric, shareholder_equity: Numeric) -> Optional[Decimal]:
    """ROE = NetIncome / Equity * 100, None for zero equity."""
    shareholder_equity = to_decimal(shareholder_equity)
    if shareholder_equity == ZERO:
        return None
    return to_decimal(net_income) / shareholder_equity * HUNDRED


def irr(
    cash_flows: Sequence[Numeric],
    max_iterations: int = DEFAULT_IRR_MAX_ITERATIONS,
    tolerance: float = DEFAULT_IRR_TOLERANCE,
) -> Optional[Decimal]:
    """
    Compute internal rate of return by Newton-Raphson.

    Solves NPV(r) = sum(CF_i / (1 + r)^i) = 0 starting from r = 10%.

    dNPV/dr = sum(-i * CF_i / (1 + r)^(i+1))
    r_(k+1) = r_k - NPV(r_k) / dNPV(r_k)

    The iteration runs in binary floating point; only the converged rate is
    converted back to Decimal.

    Args:
        cash_flows: Cash flows from period 0
        max_iterations: Maximum Newton steps
        tolerance: Convergence threshold on |NPV|

    Returns:
        IRR as a percentage, or None if the derivative vanishes, the
        iteration leaves the real line, or max_iterations is exhausted
    """
    flows = [float(to_decimal(cf)) for cf in cash_flows]
    rate = IRR_INITIAL_GUESS

    for _ in range(max_iterations):
        growth = 1.0 + rate
        if growth == 0.0:
            logger.debug("IRR iterate reached -100%%; no solution")
            return None

        try:
            npv_value = sum(cf / growth ** i for i, cf in enumerate(flows))
            derivative = sum(-i * cf / growth ** (i + 1) for i, cf in enumerate(flows))
        except (OverflowError, ZeroDivisionError):
            logger.debug("IRR discount factor out of float range at rate %r", rate)
            return None

        if not (math.isfinite(npv_value) and math.isfinite(derivative)):
            logger.debug("IRR diverged at rate %r", rate)
            return None
        if abs(npv_value) < tolerance:
            return to_decimal(rate * 100.0)
        if derivative == 0.0:
            logger.debug("IRR derivative vanished at rate %r", rate)
            return None

        rate = rate - npv_value / derivative

    logger.debug("IRR did not converge within %d iterations", max_iterations)
    return None


def npv(discount_rate: Numeric, cash_flows: Sequence[Numeric]) -> Decimal:
    """
    Compute net present value.

    NPV = sum(CF_i / (1 + r)^i), i = 0, 1, ...

    The period-0 flow is undiscounted. Discount factors use exact integer
    powers so the result stays in Decimal throughout.
    """
    growth = ONE + to_decimal(discount_rate)
    return sum(
        (to_decimal(cf) / decimal_power(growth, i) for i, cf in enumerate(cash_flows)),
        ZERO,
    )


def payback_period(initial_investment: Numeric, cash_flows: Sequence[Numeric]) -> Optional[int]:
    """
    Find the first period whose cumulative cash flow recovers the investment.

    Returns:
        1-based period number, or None if the investment is never recovered
    """
    target = to_decimal(initial_investment)
    for period, cumulative in enumerate(cumulative_cash_flow(cash_flows), start=1):
        if cumulative >= target:
            return period
    return None


def profitability_index(
    present_value_of_future_flows: Numeric,
    initial_investment: Numeric,
) -> Optional[Decimal]:
    """
    Compute the profitability index.

    PI = PV(Future Cash Flows) / InitialInvestment

    Returns:
        Ratio, or None for zero investment
    """
    initial_investment = to_decimal(initial_investment)
    if initial_investment == ZERO:
        return None
    return to_decimal(present_value_of_future_flows) / initial_investment
