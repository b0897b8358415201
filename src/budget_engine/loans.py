"""
Budget Engine Loan Calculations

Mortgage schedules and summaries, auto loans, student loans and refinance
comparison. Rates in this module are annual percentages (4.5 = 4.5%).
"""
from __future__ import annotations

import math
from datetime import date
from decimal import Decimal
from typing import Optional

from dateutil.relativedelta import relativedelta

from budget_engine.models import (
    CarLoanDetails,
    ForgivenessOutcome,
    LeaseBuyComparison,
    MortgagePayment,
    MortgageSummary,
    PayoffAcceleration,
    PaymentFrequency,
    RefinanceComparison,
    RepaymentPlan,
    StudentLoanSummary,
)
from budget_engine.numeric import HUNDRED, ONE, ZERO, Numeric, to_decimal

MONTHS_PER_YEAR = 12

# Annual poverty guideline by household size; each extra member adds the step
POVERTY_GUIDELINES = {
    1: Decimal("15060"),
    2: Decimal("20440"),
    3: Decimal("25820"),
    4: Decimal("31200"),
}
POVERTY_GUIDELINE_STEP = Decimal("5380")
DISCRETIONARY_INCOME_MULTIPLIER = Decimal("1.5")

# Approximate months covered by one payment at each frequency
_PAYMENTS_PER_MONTH = {
    PaymentFrequency.MONTHLY: 1,
    PaymentFrequency.BIWEEKLY: 2,
    PaymentFrequency.WEEKLY: 4,
}


def _annuity_payment(principal: Decimal, periodic_rate: Decimal, periods: int) -> Decimal:
    """
    Level payment for an amortizing loan.

    PMT = P * r * (1 + r)^n / ((1 + r)^n - 1)
    PMT = P / n when r = 0
    """
    if periodic_rate == ZERO:
        return principal / Decimal(periods)
    rate = float(periodic_rate)
    growth = (1.0 + rate) ** periods
    return to_decimal(float(principal) * (rate * growth) / (growth - 1.0))


# ============================================================================
# MORTGAGES
# ============================================================================

def mortgage_payment(
    principal: Numeric,
    annual_rate: Numeric,
    years: int,
    frequency: PaymentFrequency = PaymentFrequency.MONTHLY,
) -> Decimal:
    """
    Compute the regular mortgage payment.

    Returns:
        Payment per period, or 0 for a non-positive principal or term, or a
        negative rate
    """
    principal = to_decimal(principal)
    annual_rate = to_decimal(annual_rate)
    if principal <= ZERO or annual_rate < ZERO or years <= 0:
        return ZERO

    periods_per_year = frequency.periods_per_year
    periodic_rate = annual_rate / Decimal(periods_per_year) / HUNDRED
    return _annuity_payment(principal, periodic_rate, years * periods_per_year)


def _amortize(
    principal: Decimal,
    periodic_rate: Decimal,
    scheduled_payments: int,
    total_payment: Decimal,
) -> list[MortgagePayment]:
    balance = principal
    cumulative_interest = ZERO
    cumulative_principal = ZERO
    schedule = []

    payment_number = 1
    while balance > ZERO and payment_number <= scheduled_payments:
        interest_portion = balance * periodic_rate
        if payment_number == scheduled_payments:
            principal_portion = balance
        else:
            principal_portion = min(total_payment - interest_portion, balance)

        balance -= principal_portion
        cumulative_interest += interest_portion
        cumulative_principal += principal_portion

        schedule.append(MortgagePayment(
            payment_number=payment_number,
            payment_amount=principal_portion + interest_portion,
            principal_portion=principal_portion,
            interest_portion=interest_portion,
            remaining_balance=balance,
            cumulative_interest=cumulative_interest,
            cumulative_principal=cumulative_principal,
        ))
        payment_number += 1

    return schedule


def mortgage_schedule(
    principal: Numeric,
    annual_rate: Numeric,
    years: int,
    frequency: PaymentFrequency = PaymentFrequency.MONTHLY,
    extra_payment: Numeric = 0,
) -> list[MortgagePayment]:
    """
    Build the mortgage payment schedule, optionally with extra payments.

    Each period pays interest on the open balance and applies the rest of
    (regular + extra) payment to principal, never more than the balance.
    The schedule stops once the balance is repaid, and at the latest after
    the scheduled number of payments, whose final payment clears whatever
    balance remains.

    Returns:
        List of MortgagePayment in payment order
    """
    regular_payment = mortgage_payment(principal, annual_rate, years, frequency)
    periods_per_year = frequency.periods_per_year
    return _amortize(
        to_decimal(principal),
        to_decimal(annual_rate) / Decimal(periods_per_year) / HUNDRED,
        years * periods_per_year,
        regular_payment + to_decimal(extra_payment),
    )


def _summarize(
    principal: Decimal,
    annual_rate: Decimal,
    term_months: int,
    frequency: PaymentFrequency,
    regular_payment: Decimal,
    schedule: list[MortgagePayment],
    payoff_date: Optional[date] = None,
) -> MortgageSummary:
    return MortgageSummary(
        loan_amount=principal,
        interest_rate=annual_rate,
        term_years=term_months // MONTHS_PER_YEAR,
        term_months=term_months,
        payment_frequency=frequency,
        regular_payment=regular_payment,
        total_payments=len(schedule),
        total_interest=sum((p.interest_portion for p in schedule), ZERO),
        total_paid=sum((p.payment_amount for p in schedule), ZERO),
        payoff_date=payoff_date,
    )


def mortgage_summary(
    principal: Numeric,
    annual_rate: Numeric,
    years: int,
    frequency: PaymentFrequency = PaymentFrequency.MONTHLY,
    extra_payment: Numeric = 0,
    start_date: Optional[date] = None,
) -> MortgageSummary:
    """
    Summarize a mortgage from its full schedule.

    The payoff date is start_date plus the schedule length converted to
    months (biweekly counts two payments a month, weekly four).
    """
    schedule = mortgage_schedule(principal, annual_rate, years, frequency, extra_payment)

    payoff_date = None
    if start_date is not None:
        months = len(schedule) // _PAYMENTS_PER_MONTH[frequency]
        payoff_date = start_date + relativedelta(months=months)

    return _summarize(
        to_decimal(principal),
        to_decimal(annual_rate),
        years * MONTHS_PER_YEAR,
        frequency,
        mortgage_payment(principal, annual_rate, years, frequency),
        schedule,
        payoff_date,
    )


def remaining_loan_summary(balance: Numeric, annual_rate: Numeric, remaining_months: int) -> MortgageSummary:
    """
    Summarize an existing monthly loan over the exact months it has left.

    Degenerate inputs (non-positive balance or term, negative rate) give a
    zero payment and an empty schedule, like mortgage_payment.
    """
    balance = to_decimal(balance)
    annual_rate = to_decimal(annual_rate)
    if balance <= ZERO or annual_rate < ZERO or remaining_months <= 0:
        return _summarize(balance, annual_rate, max(remaining_months, 0), PaymentFrequency.MONTHLY, ZERO, [])

    monthly_rate = annual_rate / Decimal(MONTHS_PER_YEAR) / HUNDRED
    payment = _annuity_payment(balance, monthly_rate, remaining_months)
    schedule = _amortize(balance, monthly_rate, remaining_months, payment)
    return _summarize(balance, annual_rate, remaining_months, PaymentFrequency.MONTHLY, payment, schedule)


def payoff_acceleration(
    principal: Numeric,
    annual_rate: Numeric,
    years: int,
    frequency: PaymentFrequency,
    extra_payment: Numeric,
) -> PayoffAcceleration:
    """
    Compare a mortgage with and without an extra periodic payment.

    Returns:
        Payments saved, interest saved and the interest of the regular schedule
    """
    regular = mortgage_schedule(principal, annual_rate, years, frequency)
    accelerated = mortgage_schedule(principal, annual_rate, years, frequency, extra_payment)

    regular_interest = sum((p.interest_portion for p in regular), ZERO)
    accelerated_interest = sum((p.interest_portion for p in accelerated), ZERO)

    return PayoffAcceleration(
        payments_saved=len(regular) - len(accelerated),
        interest_saved=regular_interest - accelerated_interest,
        regular_interest=regular_interest,
    )


# ============================================================================
# AUTO LOANS
# ============================================================================

def car_loan(
    vehicle_price: Numeric,
    down_payment: Numeric,
    trade_in_value: Numeric,
    sales_tax_rate: Numeric,
    fees: Numeric,
    annual_rate: Numeric,
    term_months: int,
) -> CarLoanDetails:
    """
    Compute an auto loan including sales tax and fees.

    LoanAmount = Price + Price * Tax% + Fees - DownPayment - TradeIn
    TotalCost  = DownPayment + TradeIn + MonthlyPayment * Term
    """
    vehicle_price = to_decimal(vehicle_price)
    down_payment = to_decimal(down_payment)
    trade_in_value = to_decimal(trade_in_value)
    fees = to_decimal(fees)
    annual_rate = to_decimal(annual_rate)

    sales_tax = vehicle_price * (to_decimal(sales_tax_rate) / HUNDRED)
    loan_amount = vehicle_price + sales_tax + fees - down_payment - trade_in_value

    monthly_rate = annual_rate / Decimal(MONTHS_PER_YEAR) / HUNDRED
    monthly_payment = _annuity_payment(loan_amount, monthly_rate, term_months)
    total_paid = monthly_payment * Decimal(term_months)

    return CarLoanDetails(
        vehicle_price=vehicle_price,
        down_payment=down_payment,
        trade_in_value=trade_in_value,
        loan_amount=loan_amount,
        interest_rate=annual_rate,
        term_months=term_months,
        monthly_payment=monthly_payment,
        total_interest=total_paid - loan_amount,
        total_cost=down_payment + trade_in_value + total_paid,
        sales_tax=sales_tax,
        fees=fees,
    )


def lease_vs_buy(
    vehicle_price: Numeric,
    lease_monthly_payment: Numeric,
    lease_term_months: int,
    buy_monthly_payment: Numeric,
    buy_term_months: int,
    residual_value: Numeric,
) -> LeaseBuyComparison:
    """
    Compare leasing with buying.

    LeaseCost = LeasePayment * LeaseTerm
    BuyCost   = BuyPayment * BuyTerm
    Equity    = Price - BuyCost + Residual
    """
    total_lease_cost = to_decimal(lease_monthly_payment) * Decimal(lease_term_months)
    total_buy_cost = to_decimal(buy_monthly_payment) * Decimal(buy_term_months)
    return LeaseBuyComparison(
        total_lease_cost=total_lease_cost,
        total_buy_cost=total_buy_cost,
        equity_gained=to_decimal(vehicle_price) - total_buy_cost + to_decimal(residual_value),
    )


# ============================================================================
# STUDENT LOANS
# ============================================================================

def student_loan_payment(principal: Numeric, annual_rate: Numeric, term_years: int) -> Decimal:
    """Monthly payment under the standard repayment plan."""
    monthly_rate = to_decimal(annual_rate) / Decimal(MONTHS_PER_YEAR) / HUNDRED
    return _annuity_payment(to_decimal(principal), monthly_rate, term_years * MONTHS_PER_YEAR)


def income_based_payment(
    annual_income: Numeric,
    family_size: int,
    discretionary_income_percent: Numeric,
) -> Decimal:
    """
    Monthly payment under a simplified income-based plan.

    Discretionary = max(0, Income - 1.5 * PovertyGuideline(family_size))
    Payment = Discretionary * pct / 100 / 12
    """
    guideline = POVERTY_GUIDELINES.get(
        family_size,
        POVERTY_GUIDELINES[4] + Decimal(family_size - 4) * POVERTY_GUIDELINE_STEP,
    )
    discretionary = max(ZERO, to_decimal(annual_income) - guideline * DISCRETIONARY_INCOME_MULTIPLIER)
    return discretionary * to_decimal(discretionary_income_percent) / HUNDRED / Decimal(MONTHS_PER_YEAR)


def student_loan_with_deferment(
    principal: Numeric,
    annual_rate: Numeric,
    grace_period_months: int,
    deferment_months: int,
    term_years: int,
) -> StudentLoanSummary:
    """
    Capitalize grace-period and deferment interest, then amortize.

    GraceInterest     = P * i * grace
    DefermentInterest = (P + GraceInterest) * i * deferment
    NewPrincipal      = P + GraceInterest + DefermentInterest
    """
    principal = to_decimal(principal)
    annual_rate = to_decimal(annual_rate)
    monthly_rate = annual_rate / Decimal(MONTHS_PER_YEAR) / HUNDRED

    grace_interest = principal * monthly_rate * Decimal(grace_period_months)
    deferment_interest = (principal + grace_interest) * monthly_rate * Decimal(deferment_months)
    capitalized = grace_interest + deferment_interest
    new_principal = principal + capitalized

    monthly_payment = student_loan_payment(new_principal, annual_rate, term_years)
    number_of_payments = term_years * MONTHS_PER_YEAR
    total_paid = monthly_payment * Decimal(number_of_payments)

    return StudentLoanSummary(
        loan_balance=new_principal,
        interest_rate=annual_rate,
        plan=RepaymentPlan.STANDARD,
        monthly_payment=monthly_payment,
        total_payments=number_of_payments,
        total_interest=total_paid - new_principal + capitalized,
        total_paid=total_paid,
        interest_capitalization=capitalized,
    )


def loan_forgiveness(
    principal: Numeric,
    annual_rate: Numeric,
    monthly_payment: Numeric,
    forgiveness_months: int,
) -> ForgivenessOutcome:
    """
    Simulate payments until a forgiveness program ends or the loan is repaid.

    Returns:
        Balance forgiven at the end, total paid and total interest
    """
    monthly_rate = to_decimal(annual_rate) / Decimal(MONTHS_PER_YEAR) / HUNDRED
    payment = to_decimal(monthly_payment)
    balance = to_decimal(principal)
    total_paid = ZERO
    total_interest = ZERO

    for _ in range(forgiveness_months):
        if balance <= ZERO:
            break
        interest = balance * monthly_rate
        balance = max(ZERO, balance - (payment - interest))
        total_paid += payment
        total_interest += interest

    return ForgivenessOutcome(
        remaining_balance=balance,
        total_paid=total_paid,
        total_interest=total_interest,
    )


# ============================================================================
# REFINANCING
# ============================================================================

def compare_refinance(
    current_balance: Numeric,
    current_rate: Numeric,
    current_remaining_months: int,
    new_rate: Numeric,
    new_term_years: int,
    closing_costs: Numeric,
) -> RefinanceComparison:
    """
    Compare keeping the current mortgage against refinancing it.

    BreakEvenMonths = ceil(ClosingCosts / MonthlySavings), None when the new
    loan does not lower the monthly payment.
    Worthwhile when net savings are positive and break-even falls inside
    the new term.
    """
    closing_costs = to_decimal(closing_costs)
    current = remaining_loan_summary(current_balance, current_rate, current_remaining_months)
    refinanced = mortgage_summary(current_balance, new_rate, new_term_years)

    monthly_savings = current.regular_payment - refinanced.regular_payment
    interest_savings = current.total_interest - refinanced.total_interest
    net_savings = interest_savings - closing_costs

    break_even_months = None
    if monthly_savings > ZERO:
        break_even_months = math.ceil(closing_costs / monthly_savings)

    is_worthwhile = (
        net_savings > ZERO
        and break_even_months is not None
        and break_even_months < new_term_years * MONTHS_PER_YEAR
    )

    return RefinanceComparison(
        current_loan=current,
        new_loan=refinanced,
        closing_costs=closing_costs,
        break_even_months=break_even_months,
        monthly_payment_savings=monthly_savings,
        total_interest_savings=interest_savings,
        net_savings=net_savings,
        is_worthwhile=is_worthwhile,
    )


def effective_rate(
    loan_amount: Numeric,
    nominal_rate: Numeric,
    fees: Numeric,
    term_years: int,
) -> Decimal:
    """
    Approximate the effective rate with upfront fees spread over the term.

    Effective = Nominal + (Fees / Loan * 100) / TermYears

    The nominal rate is returned unchanged when fees consume the whole loan.
    """
    loan_amount = to_decimal(loan_amount)
    nominal_rate = to_decimal(nominal_rate)
    fees = to_decimal(fees)
    if loan_amount - fees <= ZERO:
        return nominal_rate

    fee_percentage = fees / loan_amount * HUNDRED
    return nominal_rate + fee_percentage / Decimal(term_years)
