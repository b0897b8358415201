"""
Unit Tests for Loan Calculations

Mortgages, auto loans, student loans and refinancing. Rates here are
annual percentages.
"""
from datetime import date
from decimal import Decimal

import pytest

from budget_engine.loans import (
    car_loan,
    compare_refinance,
    effective_rate,
    income_based_payment,
    lease_vs_buy,
    loan_forgiveness,
    mortgage_payment,
    mortgage_schedule,
    mortgage_summary,
    payoff_acceleration,
    remaining_loan_summary,
    student_loan_payment,
    student_loan_with_deferment,
)
from budget_engine.models import PaymentFrequency, RepaymentPlan


CURRENCY_TOLERANCE = 1e-2


def annuity(principal: float, periodic_rate: float, periods: int) -> float:
    growth = (1 + periodic_rate) ** periods
    return principal * periodic_rate * growth / (growth - 1)


# ============================================================================
# Mortgage tests
# ============================================================================

class TestMortgage:
    @pytest.mark.parametrize("frequency, periods", [
        (PaymentFrequency.MONTHLY, 12),
        (PaymentFrequency.BIWEEKLY, 26),
        (PaymentFrequency.WEEKLY, 52),
    ])
    def test_periods_per_year(self, frequency, periods):
        assert frequency.periods_per_year == periods

    def test_monthly_payment(self):
        """30-year 200k at 6% pays 1199.10 a month."""
        assert float(mortgage_payment(200000, 6, 30)) == pytest.approx(1199.10, abs=CURRENCY_TOLERANCE)

    def test_zero_rate_payment(self):
        assert mortgage_payment(120000, 0, 10) == 1000

    @pytest.mark.parametrize("principal, rate, years", [(0, 5, 30), (-1, 5, 30), (1000, -1, 30), (1000, 5, 0)])
    def test_degenerate_inputs_pay_nothing(self, principal, rate, years):
        assert mortgage_payment(principal, rate, years) == 0

    def test_biweekly_payment(self):
        expected = annuity(100000, 0.05 / 26, 780)
        payment = mortgage_payment(100000, 5, 30, PaymentFrequency.BIWEEKLY)
        assert float(payment) == pytest.approx(expected, abs=CURRENCY_TOLERANCE)

    def test_schedule_runs_full_term(self):
        schedule = mortgage_schedule(100000, 5, 30)

        assert len(schedule) == 360
        assert schedule[-1].remaining_balance == 0
        assert float(schedule[0].interest_portion) == pytest.approx(416.67, abs=CURRENCY_TOLERANCE)
        assert float(schedule[0].principal_portion) == pytest.approx(120.15, abs=CURRENCY_TOLERANCE)

    def test_schedule_cumulative_totals(self):
        schedule = mortgage_schedule(100000, 5, 30)
        last = schedule[-1]

        assert float(last.cumulative_principal) == pytest.approx(100000, abs=1e-6)
        assert last.cumulative_interest == sum(p.interest_portion for p in schedule)
        assert all(p.remaining_balance >= 0 for p in schedule)

    def test_extra_payment_shortens_schedule(self):
        schedule = mortgage_schedule(100000, 5, 30, extra_payment=500)

        assert len(schedule) < 360
        assert schedule[-1].remaining_balance == 0

    def test_zero_principal_has_no_schedule(self):
        assert mortgage_schedule(0, 5, 30) == []

    def test_summary_payoff_date_monthly(self):
        summary = mortgage_summary(100000, 5, 30, start_date=date(2024, 1, 1))

        assert summary.total_payments == 360
        assert summary.term_months == 360
        assert summary.payoff_date == date(2054, 1, 1)
        assert float(summary.total_paid - summary.total_interest) == pytest.approx(100000, abs=1e-6)

    def test_summary_payoff_date_biweekly(self):
        """780 biweekly payments count as 390 months."""
        summary = mortgage_summary(100000, 5, 30, PaymentFrequency.BIWEEKLY, start_date=date(2024, 1, 1))

        assert summary.total_payments == 780
        assert summary.payoff_date == date(2056, 7, 1)

    def test_summary_without_start_date(self):
        assert mortgage_summary(100000, 5, 30).payoff_date is None

    def test_payoff_acceleration(self):
        result = payoff_acceleration(200000, 6, 30, PaymentFrequency.MONTHLY, 200)

        assert result.payments_saved > 0
        assert result.interest_saved > 0
        assert result.interest_saved < result.regular_interest

    def test_payoff_acceleration_without_extra(self):
        result = payoff_acceleration(200000, 6, 30, PaymentFrequency.MONTHLY, 0)

        assert result.payments_saved == 0
        assert result.interest_saved == 0


# ============================================================================
# Auto loan tests
# ============================================================================

class TestCarLoan:
    def test_loan_amount_includes_tax_and_fees(self):
        loan = car_loan(30000, 5000, 2000, 8, 500, 6, 60)

        assert loan.sales_tax == 2400
        assert loan.loan_amount == 25900
        assert float(loan.monthly_payment) == pytest.approx(annuity(25900, 0.005, 60), abs=CURRENCY_TOLERANCE)

    def test_totals(self):
        loan = car_loan(30000, 5000, 2000, 8, 500, 6, 60)
        total_paid = loan.monthly_payment * 60

        assert loan.total_interest == total_paid - loan.loan_amount
        assert loan.total_cost == 7000 + total_paid

    def test_zero_rate(self):
        loan = car_loan(12000, 0, 0, 0, 0, 0, 48)

        assert loan.monthly_payment == 250
        assert loan.total_interest == 0

    def test_lease_vs_buy(self):
        result = lease_vs_buy(30000, 350, 36, 550, 60, 15000)

        assert result.total_lease_cost == 12600
        assert result.total_buy_cost == 33000
        assert result.equity_gained == 12000


# ============================================================================
# Student loan tests
# ============================================================================

class TestStudentLoan:
    def test_standard_payment(self):
        payment = student_loan_payment(30000, 5, 10)
        assert float(payment) == pytest.approx(annuity(30000, 0.05 / 12, 120), abs=CURRENCY_TOLERANCE)

    def test_income_based_payment(self):
        """Single-person household: 50000 - 1.5 * 15060 discretionary."""
        payment = income_based_payment(50000, 1, 10)
        assert float(payment) == pytest.approx(228.4167, abs=1e-4)

    def test_income_based_large_family(self):
        """Households over four add 5380 per member to the guideline."""
        guideline = 31200 + 2 * 5380
        payment = income_based_payment(100000, 6, 10)
        assert float(payment) == pytest.approx((100000 - 1.5 * guideline) * 0.10 / 12, abs=1e-6)

    def test_income_below_threshold_pays_nothing(self):
        assert income_based_payment(20000, 1, 10) == 0

    def test_deferment_capitalizes_interest(self):
        summary = student_loan_with_deferment(20000, 6, 6, 12, 10)

        assert summary.interest_capitalization == 1836
        assert summary.loan_balance == 21836
        assert summary.plan == RepaymentPlan.STANDARD
        assert summary.total_payments == 120
        assert summary.total_interest == summary.total_paid - summary.loan_balance + 1836

    def test_forgiveness_interest_only_payments(self):
        """A payment equal to the interest never reduces the balance."""
        outcome = loan_forgiveness(100000, 6, 500, 120)

        assert outcome.remaining_balance == 100000
        assert outcome.total_paid == 60000
        assert outcome.total_interest == 60000

    def test_forgiveness_after_repayment(self):
        outcome = loan_forgiveness(1000, 0, 500, 120)

        assert outcome.remaining_balance == 0
        assert outcome.total_paid == 1000
        assert outcome.total_interest == 0


# ============================================================================
# Refinance tests
# ============================================================================

class TestRefinance:
    def test_lower_rate_is_worthwhile(self):
        result = compare_refinance(300000, 7, 360, 4.5, 30, 4000)

        assert float(result.monthly_payment_savings) == pytest.approx(1995.91 - 1520.06, abs=CURRENCY_TOLERANCE)
        assert result.break_even_months == 9
        assert result.net_savings == result.total_interest_savings - 4000
        assert result.is_worthwhile

    def test_higher_rate_never_breaks_even(self):
        result = compare_refinance(200000, 4, 360, 6, 30, 3000)

        assert result.monthly_payment_savings < 0
        assert result.break_even_months is None
        assert not result.is_worthwhile

    def test_current_loan_runs_exact_remaining_months(self):
        """306 months left is not rounded down to 25 years."""
        current = compare_refinance(200000, 6, 306, 4, 25, 3000).current_loan

        assert current.term_months == 306
        assert current.total_payments == 306
        assert float(current.regular_payment) == pytest.approx(annuity(200000, 0.005, 306), abs=CURRENCY_TOLERANCE)
        assert current.regular_payment < mortgage_payment(200000, 6, 25)

    def test_current_loan_under_a_year(self):
        result = compare_refinance(10000, 6, 6, 4, 1, 100)
        current = result.current_loan

        assert current.total_payments == 6
        assert float(current.regular_payment) == pytest.approx(annuity(10000, 0.005, 6), abs=CURRENCY_TOLERANCE)
        assert float(current.total_interest) == pytest.approx(6 * annuity(10000, 0.005, 6) - 10000, abs=CURRENCY_TOLERANCE)
        assert result.break_even_months == 1
        assert result.total_interest_savings < 0
        assert not result.is_worthwhile

    def test_remaining_summary_matches_whole_year_mortgage(self):
        remaining = remaining_loan_summary(100000, 5, 360)
        summary = mortgage_summary(100000, 5, 30)

        assert remaining.regular_payment == summary.regular_payment
        assert remaining.total_interest == summary.total_interest
        assert remaining.term_years == 30

    @pytest.mark.parametrize("balance, rate, months", [(0, 5, 12), (1000, -1, 12), (1000, 5, 0)])
    def test_remaining_summary_degenerate_inputs(self, balance, rate, months):
        summary = remaining_loan_summary(balance, rate, months)

        assert summary.regular_payment == 0
        assert summary.total_payments == 0
        assert summary.total_interest == 0

    def test_effective_rate(self):
        assert effective_rate(200000, 5, 4000, 30) == Decimal("5") + Decimal("2") / Decimal("30")

    def test_effective_rate_fees_exceed_loan(self):
        assert effective_rate(1000, 5, 1000, 30) == 5
