"""
Budget Engine Debt Management

Debt-to-income, weighted average rate and avalanche/snowball payoff
strategies. Interest rates are annual percentages.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from decimal import Decimal
from typing import Optional

from budget_engine.models import DebtItem, DebtPayoff
from budget_engine.numeric import HUNDRED, ZERO, Numeric, to_decimal

logger = logging.getLogger(__name__)

MAX_PAYOFF_MONTHS = 1200
MONTHS_PER_YEAR = Decimal("12")


def debt_to_income_ratio(monthly_debt_payments: Numeric, monthly_income: Numeric) -> Optional[Decimal]:
    """
    DTI = MonthlyDebtPayments / MonthlyIncome * 100

    Returns:
        Percentage, or None for non-positive income
    """
    monthly_income = to_decimal(monthly_income)
    if monthly_income <= ZERO:
        return None
    return to_decimal(monthly_debt_payments) / monthly_income * HUNDRED


def weighted_average_rate(debts: Sequence[DebtItem]) -> Decimal:
    """
    Balance-weighted average interest rate.

    Rate = sum(Balance_i * Rate_i) / sum(Balance_i), 0 for zero total balance.
    """
    total_balance = sum((d.balance for d in debts), ZERO)
    if total_balance == ZERO:
        return ZERO
    return sum((d.balance * d.interest_rate for d in debts), ZERO) / total_balance


def _pay_off(debt: DebtItem, extra_payment: Decimal) -> DebtPayoff:
    monthly_rate = debt.interest_rate / MONTHS_PER_YEAR / HUNDRED
    payment = debt.minimum_payment + extra_payment
    balance = debt.balance
    interest_paid = ZERO
    months = 0

    while balance > ZERO:
        if months >= MAX_PAYOFF_MONTHS:
            logger.debug("Debt %r not repaid within %d months", debt.name, MAX_PAYOFF_MONTHS)
            return DebtPayoff(name=debt.name, months_to_payoff=None, interest_paid=interest_paid)

        interest = balance * monthly_rate
        principal = min(payment - interest, balance)
        if principal <= ZERO:
            logger.debug("Payment on debt %r does not cover its interest", debt.name)
            return DebtPayoff(name=debt.name, months_to_payoff=None, interest_paid=interest_paid)

        balance -= principal
        interest_paid += interest
        months += 1

    return DebtPayoff(name=debt.name, months_to_payoff=months, interest_paid=interest_paid)


def debt_avalanche(debts: Sequence[DebtItem], extra_payment: Numeric) -> list[DebtPayoff]:
    """
    Pay off debts highest interest rate first.

    Each debt is simulated on its own with minimum_payment + extra_payment
    per month.

    Returns:
        DebtPayoff per debt, ordered by descending rate
    """
    extra_payment = to_decimal(extra_payment)
    ordered = sorted(debts, key=lambda d: d.interest_rate, reverse=True)
    return [_pay_off(debt, extra_payment) for debt in ordered]


def debt_snowball(debts: Sequence[DebtItem], extra_payment: Numeric) -> list[DebtPayoff]:
    """
    Pay off debts smallest balance first.

    Returns:
        DebtPayoff per debt, ordered by ascending balance
    """
    extra_payment = to_decimal(extra_payment)
    ordered = sorted(debts, key=lambda d: d.balance)
    return [_pay_off(debt, extra_payment) for debt in ordered]
