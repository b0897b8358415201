"""
Budget Engine Interest and Amortization

Compound/simple interest, time value of money, loan payments and
amortization schedules. Rates are fractions (0.12 = 12%); loans pay monthly.
"""
from __future__ import annotations

from decimal import Decimal

from budget_engine.models import AmortizationEntry
from budget_engine.numeric import ONE, ZERO, Numeric, float_power, to_decimal

MONTHS_PER_YEAR = Decimal("12")


def compound_interest(
    principal: Numeric,
    annual_rate: Numeric,
    times_compounded: int,
    years: Numeric,
) -> Decimal:
    """
    Compute the compounded amount.

    A = P * (1 + r/n)^(n*t)

    n*t need not be integral (e.g. 2.5 years), so the power is fractional.

    Returns:
        Accumulated amount (principal plus interest)
    """
    rate = ONE + to_decimal(annual_rate) / Decimal(times_compounded)
    periods = float(times_compounded) * float(to_decimal(years))
    return to_decimal(principal) * float_power(rate, periods)


def simple_interest(principal: Numeric, rate: Numeric, time: Numeric) -> Decimal:
    """I = P * r * t"""
    return to_decimal(principal) * to_decimal(rate) * to_decimal(time)


def future_value(present_value: Numeric, interest_rate: Numeric, periods: int) -> Decimal:
    """FV = PV * (1 + r)^n"""
    return to_decimal(present_value) * float_power(ONE + to_decimal(interest_rate), periods)


def present_value(future_value: Numeric, interest_rate: Numeric, periods: int) -> Decimal:
    """PV = FV / (1 + r)^n"""
    return to_decimal(future_value) / float_power(ONE + to_decimal(interest_rate), periods)


def loan_payment(principal: Numeric, annual_rate: Numeric, number_of_payments: int) -> Decimal:
    """
    Compute the level monthly payment of an amortizing loan.

    PMT = P * i * (1 + i)^n / ((1 + i)^n - 1),  i = annual_rate / 12

    With a zero rate the principal is repaid in equal parts:
    PMT = P / n

    Returns:
        Monthly payment
    """
    principal = to_decimal(principal)
    annual_rate = to_decimal(annual_rate)
    if annual_rate == ZERO:
        return principal / Decimal(number_of_payments)

    monthly_rate = annual_rate / MONTHS_PER_YEAR
    factor = float_power(ONE + monthly_rate, number_of_payments)
    return principal * (monthly_rate * factor) / (factor - ONE)


def remaining_balance(
    principal: Numeric,
    annual_rate: Numeric,
    total_payments: int,
    payments_made: int,
) -> Decimal:
    """
    Compute the outstanding balance after some payments.

    Balance = PMT * ((1 + i)^k - 1) / (i * (1 + i)^k),  k = payments remaining

    i.e. the present value of the payments still due. With a zero rate:
    Balance = P - PMT * payments_made
    """
    payment = loan_payment(principal, annual_rate, total_payments)
    monthly_rate = to_decimal(annual_rate) / MONTHS_PER_YEAR
    payments_remaining = total_payments - payments_made

    if monthly_rate == ZERO:
        return to_decimal(principal) - payment * Decimal(payments_made)

    factor = float_power(ONE + monthly_rate, payments_remaining)
    return payment * (factor - ONE) / (monthly_rate * factor)


def total_interest(principal: Numeric, annual_rate: Numeric, number_of_payments: int) -> Decimal:
    """TotalInterest = PMT * n - P"""
    payment = loan_payment(principal, annual_rate, number_of_payments)
    return payment * Decimal(number_of_payments) - to_decimal(principal)


def amortization_schedule(
    principal: Numeric,
    annual_rate: Numeric,
    number_of_payments: int,
) -> list[AmortizationEntry]:
    """
    Build the full amortization schedule.

    For each period t = 1..n:
        Interest_t  = Balance_(t-1) * i
        Principal_t = PMT - Interest_t
        Balance_t   = Balance_(t-1) - Principal_t

    Reported balances are floored at zero; the running balance carries
    forward unfloored.

    Returns:
        List of AmortizationEntry in period order
    """
    payment = loan_payment(principal, annual_rate, number_of_payments)
    monthly_rate = to_decimal(annual_rate) / MONTHS_PER_YEAR
    balance = to_decimal(principal)

    schedule = []
    for period in range(1, number_of_payments + 1):
        interest = balance * monthly_rate
        principal_portion = payment - interest
        balance = balance - principal_portion
        schedule.append(AmortizationEntry(
            period=period,
            payment=payment,
            principal=principal_portion,
            interest=interest,
            balance=max(ZERO, balance),
        ))

    return schedule
