"""
Unit Tests for Debt Payoff and Savings Planning
"""
from decimal import Decimal

import pytest

from budget_engine.debt import (
    debt_avalanche,
    debt_snowball,
    debt_to_income_ratio,
    weighted_average_rate,
)
from budget_engine.interest import compound_interest
from budget_engine.models import DebtItem
from budget_engine.savings import (
    compound_interest_by_frequency,
    investment_projection,
    required_monthly_savings,
    savings_goal,
)


@pytest.fixture
def debts() -> list[DebtItem]:
    """Three debts with rate order differing from balance order."""
    return [
        DebtItem(name="Car", balance=Decimal("8000"), interest_rate=Decimal("6"), minimum_payment=Decimal("250")),
        DebtItem(name="Card", balance=Decimal("3000"), interest_rate=Decimal("22"), minimum_payment=Decimal("90")),
        DebtItem(name="Store", balance=Decimal("500"), interest_rate=Decimal("15"), minimum_payment=Decimal("25")),
    ]


# ============================================================================
# Debt tests
# ============================================================================

class TestDebtRatios:
    def test_debt_to_income(self):
        assert debt_to_income_ratio(1500, 6000) == 25

    def test_debt_to_income_without_income(self):
        assert debt_to_income_ratio(1500, 0) is None
        assert debt_to_income_ratio(1500, -100) is None

    def test_weighted_average_rate(self):
        debts = [
            DebtItem(name="A", balance=Decimal("1000"), interest_rate=Decimal("10"), minimum_payment=Decimal("50")),
            DebtItem(name="B", balance=Decimal("3000"), interest_rate=Decimal("20"), minimum_payment=Decimal("50")),
        ]
        assert weighted_average_rate(debts) == Decimal("17.5")

    def test_weighted_average_rate_no_balance(self):
        assert weighted_average_rate([]) == 0


class TestPayoffStrategies:
    def test_avalanche_orders_by_rate(self, debts):
        result = debt_avalanche(debts, 100)
        assert [p.name for p in result] == ["Card", "Store", "Car"]

    def test_snowball_orders_by_balance(self, debts):
        result = debt_snowball(debts, 100)
        assert [p.name for p in result] == ["Store", "Card", "Car"]

    def test_strategies_agree_per_debt(self, debts):
        """Each debt is simulated alone, so only the order differs."""
        avalanche = {p.name: p for p in debt_avalanche(debts, 100)}
        snowball = {p.name: p for p in debt_snowball(debts, 100)}
        assert avalanche == snowball

    def test_zero_interest_debt(self):
        debt = DebtItem(name="Loan", balance=Decimal("1000"), interest_rate=Decimal("0"), minimum_payment=Decimal("100"))
        result = debt_avalanche([debt], 0)

        assert result[0].months_to_payoff == 10
        assert result[0].interest_paid == 0

    def test_extra_payment_speeds_payoff(self):
        debt = DebtItem(name="Loan", balance=Decimal("1000"), interest_rate=Decimal("0"), minimum_payment=Decimal("100"))
        assert debt_snowball([debt], 150)[0].months_to_payoff == 4

    def test_payment_below_interest_never_repays(self):
        """24% on 10000 accrues 200 a month, more than the payment."""
        debt = DebtItem(name="Card", balance=Decimal("10000"), interest_rate=Decimal("24"), minimum_payment=Decimal("100"))
        result = debt_avalanche([debt], 0)

        assert result[0].months_to_payoff is None

    def test_interest_accrues(self):
        debt = DebtItem(name="Card", balance=Decimal("1200"), interest_rate=Decimal("12"), minimum_payment=Decimal("100"))
        result = debt_avalanche([debt], 0)

        assert result[0].months_to_payoff == 13
        assert result[0].interest_paid > 0


# ============================================================================
# Savings tests
# ============================================================================

class TestSavingsGoal:
    def test_without_interest(self):
        goal = savings_goal(10000, 0, 1000, 0)

        assert goal.months_to_goal == 10
        assert goal.total_contributions == 10000
        assert goal.total_interest_earned == 0

    def test_interest_shortens_goal(self):
        goal = savings_goal(10000, 0, 1000, 12)

        assert goal.months_to_goal == 10
        assert goal.total_interest_earned > 0

    def test_already_reached(self):
        goal = savings_goal(1000, 5000, 100, 5)

        assert goal.months_to_goal == 0
        assert goal.total_contributions == 0

    def test_no_contribution(self):
        assert savings_goal(10000, 0, 0, 5) is None

    def test_unreachable_within_cap(self):
        assert savings_goal(1000000, 0, 1, 0) is None

    def test_cap_allows_exactly_1200_months(self):
        assert savings_goal(1200, 0, 1, 0).months_to_goal == 1200

    def test_cap_rejects_1201_months(self):
        assert savings_goal(1201, 0, 1, 0) is None


class TestInvestmentGrowth:
    def test_projection_without_return(self):
        projection = investment_projection(1000, 100, 0, 1)

        assert projection.future_value == 2200
        assert projection.total_contributions == 1200
        assert projection.total_gains == 0

    def test_projection_compounds_monthly(self):
        projection = investment_projection(1000, 0, 12, 1)

        assert float(projection.future_value) == pytest.approx(1000 * 1.01 ** 12, abs=1e-6)
        assert float(projection.total_gains) == pytest.approx(1000 * 1.01 ** 12 - 1000, abs=1e-6)

    def test_compound_interest_by_frequency(self):
        assert float(compound_interest_by_frequency(1000, 5, 1, 1)) == pytest.approx(1050.0)
        assert float(compound_interest_by_frequency(1000, 12, 1, 12)) == pytest.approx(1000 * 1.01 ** 12)

    def test_compound_interest_by_frequency_takes_percent(self):
        """Same amount as compound_interest with the rate as a fraction."""
        by_frequency = compound_interest_by_frequency(2500, 4.5, 2.5, 4)
        assert by_frequency == compound_interest(2500, Decimal("0.045"), 4, 2.5)

    def test_required_monthly_savings_no_return(self):
        assert required_monthly_savings(12000, 0, 0, 1) == 1000

    def test_required_monthly_savings_reaches_target(self):
        contribution = required_monthly_savings(10000, 1000, 6, 5)
        projection = investment_projection(1000, contribution, 6, 5)

        assert float(projection.future_value) == pytest.approx(10000, abs=1e-4)

    def test_required_monthly_savings_already_funded(self):
        assert required_monthly_savings(1000, 2000, 5, 1) == 0

    def test_required_monthly_savings_no_horizon(self):
        assert required_monthly_savings(1000, 0, 5, 0) is None
