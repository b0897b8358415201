"""
Budget Engine Savings and Investment Growth

Savings goals, investment projections and compounding at a chosen
frequency. Rates are annual percentages.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from budget_engine.interest import compound_interest
from budget_engine.models import InvestmentProjection, SavingsGoal
from budget_engine.numeric import HUNDRED, ZERO, Numeric, to_decimal

logger = logging.getLogger(__name__)

MAX_GOAL_MONTHS = 1200
MONTHS_PER_YEAR = 12


def savings_goal(
    target_amount: Numeric,
    current_savings: Numeric,
    monthly_contribution: Numeric,
    annual_rate: Numeric,
) -> Optional[SavingsGoal]:
    """
    Months of contributions needed to reach a target.

    Each month the balance earns interest, then the contribution is added.

    Returns:
        SavingsGoal, or None for a non-positive contribution or a target
        more than 1200 months away
    """
    target_amount = to_decimal(target_amount)
    current_savings = to_decimal(current_savings)
    monthly_contribution = to_decimal(monthly_contribution)
    annual_rate = to_decimal(annual_rate)
    if monthly_contribution <= ZERO:
        return None

    monthly_rate = annual_rate / Decimal(MONTHS_PER_YEAR) / HUNDRED
    balance = current_savings
    months = 0
    while balance < target_amount:
        if months >= MAX_GOAL_MONTHS:
            logger.debug("Savings target %s not reached within %d months", target_amount, MAX_GOAL_MONTHS)
            return None
        balance = balance + balance * monthly_rate + monthly_contribution
        months += 1

    total_contributions = monthly_contribution * Decimal(months)
    return SavingsGoal(
        target_amount=target_amount,
        current_savings=current_savings,
        monthly_contribution=monthly_contribution,
        annual_return_rate=annual_rate,
        months_to_goal=months,
        total_contributions=total_contributions,
        total_interest_earned=balance - current_savings - total_contributions,
    )


def investment_projection(
    initial_investment: Numeric,
    monthly_contribution: Numeric,
    annual_rate: Numeric,
    years: int,
) -> InvestmentProjection:
    """
    Project an investment with monthly contributions.

    Each month: Balance = Balance * (1 + i) + Contribution,  i = rate / 12 / 100

    total_contributions counts the monthly contributions only; total_gains
    is what the balance earned on top of the initial investment and them.
    """
    initial_investment = to_decimal(initial_investment)
    monthly_contribution = to_decimal(monthly_contribution)
    annual_rate = to_decimal(annual_rate)
    monthly_rate = annual_rate / Decimal(MONTHS_PER_YEAR) / HUNDRED
    months = years * MONTHS_PER_YEAR

    balance = initial_investment
    for _ in range(months):
        balance = balance + balance * monthly_rate + monthly_contribution

    total_contributions = monthly_contribution * Decimal(max(months, 0))
    return InvestmentProjection(
        initial_investment=initial_investment,
        monthly_contribution=monthly_contribution,
        annual_return_rate=annual_rate,
        years=years,
        future_value=balance,
        total_contributions=total_contributions,
        total_gains=balance - initial_investment - total_contributions,
    )


def compound_interest_by_frequency(
    principal: Numeric,
    annual_rate: Numeric,
    years: Numeric,
    compoundings_per_year: int,
) -> Decimal:
    """A = P * (1 + r/100/n)^(n*t), with the rate as an annual percentage."""
    return compound_interest(principal, to_decimal(annual_rate) / HUNDRED, compoundings_per_year, years)


def required_monthly_savings(
    target_amount: Numeric,
    current_savings: Numeric,
    annual_rate: Numeric,
    years: int,
) -> Optional[Decimal]:
    """
    Monthly contribution that reaches a target in the given horizon.

    PMT = (Target - Current(1 + i)^n) * i / ((1 + i)^n - 1)

    Returns:
        Contribution, 0 when current savings already grow past the target,
        or None for a non-positive horizon
    """
    months = years * MONTHS_PER_YEAR
    if months <= 0:
        return None

    target = float(to_decimal(target_amount))
    current = float(to_decimal(current_savings))
    rate = float(to_decimal(annual_rate)) / MONTHS_PER_YEAR / 100.0

    if rate == 0.0:
        shortfall = target - current
    else:
        shortfall = target - current * (1.0 + rate) ** months
    if shortfall <= 0.0:
        return ZERO

    if rate == 0.0:
        return to_decimal(shortfall / months)
    growth = (1.0 + rate) ** months
    return to_decimal(shortfall * rate / (growth - 1.0))
