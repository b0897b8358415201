"""
Unit Tests for Budget Engine Formulas

Tests for individual calculation functions.
"""
from decimal import Decimal

import pytest

from budget_engine.numeric import decimal_power, float_power, to_decimal
from budget_engine.variance import (
    burn_rate,
    remaining_budget,
    utilization_rate,
    variance,
    variance_percentage,
    variance_status,
)
from budget_engine.forecasting import (
    exponential_smoothing,
    identify_trend,
    linear_forecast,
    moving_average_forecast,
    smoothed_series,
)
from budget_engine.cashflows import (
    cash_flow_coverage_ratio,
    cumulative_cash_flow,
    days_of_cash_on_hand,
    free_cash_flow,
    net_cash_flow,
    operating_cash_flow_ratio,
    project_cash_position,
)
from budget_engine.returns import irr, npv, payback_period, profitability_index, roa, roe, roi
from budget_engine.interest import (
    amortization_schedule,
    compound_interest,
    future_value,
    loan_payment,
    present_value,
    remaining_balance,
    simple_interest,
    total_interest,
)
from budget_engine.estimation import (
    bottom_up_estimate,
    confidence_interval,
    contingency_reserve,
    evm_metrics,
    three_point_estimate,
    three_point_standard_deviation,
)
from budget_engine.optimization import (
    break_even_point,
    contribution_margin_ratio,
    priority_allocation,
    proportional_allocation,
)
from budget_engine.models import AllocationRequest, TrendDirection, VarianceStatus


# ============================================================================
# Numeric helpers
# ============================================================================

class TestNumeric:
    def test_float_goes_through_string(self):
        """0.1 converts to Decimal('0.1'), not its binary expansion."""
        assert to_decimal(0.1) == Decimal("0.1")
        assert to_decimal(3) == Decimal("3")
        assert to_decimal("2.50") == Decimal("2.50")

    def test_decimal_power_is_exact(self):
        assert decimal_power(Decimal("1.1"), 2) == Decimal("1.21")
        assert decimal_power(Decimal("1.1"), 0) == Decimal("1")
        assert decimal_power(Decimal("2"), -2) == Decimal("0.25")

    def test_float_power_fractional(self):
        assert float(float_power(Decimal("4"), 0.5)) == pytest.approx(2.0)


# ============================================================================
# Variance tests
# ============================================================================

class TestVariance:
    def test_variance_sign(self):
        """Positive variance means overspent."""
        assert variance(110, 100) == 10
        assert variance(90, 100) == -10

    def test_variance_percentage(self):
        assert variance_percentage(110, 100) == Decimal("10")
        assert variance_percentage(Decimal("75"), Decimal("60")) == (Decimal("75") - 60) / 60 * 100

    def test_zero_budget_has_no_percentages(self):
        assert variance_percentage(50, 0) is None
        assert utilization_rate(50, 0) is None

    @pytest.mark.parametrize(
        "actual, budgeted, tolerance, expected",
        [
            (100, 100, 0, VarianceStatus.ON_TARGET),
            (110, 100, 5, VarianceStatus.OVER),
            (90, 100, 5, VarianceStatus.UNDER),
            (103, 100, 5, VarianceStatus.ON_TARGET),
            (105, 100, 5, VarianceStatus.ON_TARGET),
            (95, 100, 5, VarianceStatus.ON_TARGET),
        ],
    )
    def test_variance_status_boundary_inclusive(self, actual, budgeted, tolerance, expected):
        assert variance_status(actual, budgeted, tolerance) == expected

    def test_utilization_and_remaining(self):
        assert utilization_rate(75, 100) == Decimal("75")
        assert remaining_budget(100, 130) == -30

    def test_burn_rate_zero_periods_is_zero(self):
        """Zero periods yields 0, not None."""
        assert burn_rate(500, 0) == 0
        assert burn_rate(500, 0) is not None
        assert burn_rate(600, 3) == 200


# ============================================================================
# Forecasting tests
# ============================================================================

class TestForecasting:
    def test_linear_forecast_perfect_line(self):
        """y = x + 1 on indices 0..4 extrapolates to 6, 7."""
        assert linear_forecast([1, 2, 3, 4, 5], 2) == [Decimal("6"), Decimal("7")]

    def test_linear_forecast_needs_two_points(self):
        assert linear_forecast([], 3) == []
        assert linear_forecast([42], 3) == []

    def test_linear_forecast_flat_series(self):
        assert linear_forecast([5, 5, 5], 2) == [Decimal("5"), Decimal("5")]

    def test_moving_average(self):
        assert moving_average_forecast([10, 20, 30, 40], 2, 5) == Decimal("35")

    def test_moving_average_short_history(self):
        assert moving_average_forecast([10, 20], 3, 1) == 0

    def test_moving_average_rejects_empty_window(self):
        with pytest.raises(ValueError):
            moving_average_forecast([10, 20], 0, 1)

    def test_smoothed_series(self):
        smoothed = smoothed_series([100, 110, 120], 0.5)
        assert smoothed == [Decimal("100"), Decimal("105.0"), Decimal("112.50")]

    def test_exponential_smoothing_flat_forecast(self):
        forecast = exponential_smoothing([100, 110, 120], 0.5, 3)
        assert forecast == [Decimal("112.5")] * 3

    def test_exponential_smoothing_empty_history(self):
        assert exponential_smoothing([], 0.5, 3) == []

    def test_trend_classification(self):
        assert identify_trend([1, 2, 3]) == TrendDirection.INCREASING
        assert identify_trend([3, 2, 1]) == TrendDirection.DECREASING
        assert identify_trend([1, 1.05, 1.1]) == TrendDirection.STABLE
        assert identify_trend([7]) == TrendDirection.STABLE


# ============================================================================
# Cash flow tests
# ============================================================================

class TestCashFlows:
    def test_net_cash_flow(self):
        assert net_cash_flow([100, 200], [50, 25]) == 225

    def test_cumulative_excludes_anchor(self):
        assert cumulative_cash_flow([10, -5, 20]) == [10, 5, 25]
        assert cumulative_cash_flow([]) == []

    def test_cumulative_differences_reconstruct_input(self):
        flows = [Decimal("12.5"), Decimal("-3"), Decimal("0"), Decimal("7.25")]
        cumulative = cumulative_cash_flow(flows)
        differences = [b - a for a, b in zip([Decimal("0")] + cumulative, cumulative)]
        assert differences == flows

    def test_ratios_none_for_zero_denominator(self):
        assert cash_flow_coverage_ratio(100, 0) is None
        assert operating_cash_flow_ratio(100, 0) is None
        assert days_of_cash_on_hand(100, 0) is None

    def test_ratios(self):
        assert cash_flow_coverage_ratio(300, 150) == 2
        assert operating_cash_flow_ratio(100, 400) == Decimal("0.25")
        assert days_of_cash_on_hand(9000, 100) == 90
        assert free_cash_flow(1000, 300) == 700

    def test_project_cash_position(self):
        positions = project_cash_position(1000, [500, 200], [300, 600])
        assert positions == [1200, 800]

    def test_project_cash_position_length_mismatch(self):
        with pytest.raises(ValueError):
            project_cash_position(0, [1, 2], [1])


# ============================================================================
# Return tests
# ============================================================================

class TestReturns:
    def test_ratios(self):
        assert roi(1200, 1000) == 20
        assert roa(50, 1000) == 5
        assert roe(50, 500) == 10

    def test_ratios_none_for_zero_denominator(self):
        assert roi(100, 0) is None
        assert roa(100, 0) is None
        assert roe(100, 0) is None

    def test_npv_zero_rate_is_sum(self):
        assert npv(0, [100, 100, 100]) == 300

    def test_npv_discounting(self):
        result = npv(Decimal("0.10"), [-1000, 300, 400, 500])
        assert float(result) == pytest.approx(-21.0368, abs=1e-4)

    def test_npv_period_zero_undiscounted(self):
        assert npv(Decimal("0.5"), [100]) == 100

    def test_irr_converges(self):
        flows = [-1000, 500, 500, 500]
        rate = irr(flows, 100, 1e-6)

        assert rate is not None
        assert rate > 0
        assert float(npv(rate / 100, flows)) == pytest.approx(0.0, abs=1e-4)
        assert float(rate) == pytest.approx(23.3752, abs=1e-3)

    def test_irr_no_sign_change(self):
        """All-positive flows have no root; iteration runs away."""
        assert irr([100, 100, 100], 100, 1e-6) is None

    def test_irr_iteration_cap(self):
        assert irr([-1000, 500, 500, 500], 1, 1e-6) is None

    def test_irr_flat_derivative(self):
        """A lone period-0 flow has a zero derivative at every rate."""
        assert irr([100], 100, 1e-6) is None

    def test_irr_leaves_flows_untouched(self):
        flows = [Decimal("-1000"), Decimal("500"), Decimal("500"), Decimal("500")]
        irr(flows, 100, 1e-6)
        assert flows == [-1000, 500, 500, 500]

    def test_payback_period(self):
        assert payback_period(1000, [300, 400, 500]) == 3
        assert payback_period(1000, [600, 400]) == 2
        assert payback_period(1000, [100, 100]) is None

    def test_profitability_index(self):
        assert profitability_index(1200, 1000) == Decimal("1.2")
        assert profitability_index(1200, 0) is None


# ============================================================================
# Interest and amortization tests
# ============================================================================

class TestInterest:
    def test_compound_interest(self):
        assert float(compound_interest(1000, Decimal("0.05"), 1, 2)) == pytest.approx(1102.5, abs=1e-6)
        assert float(compound_interest(1000, Decimal("0.12"), 12, 1)) == pytest.approx(1126.8250, abs=1e-3)

    def test_compound_interest_fractional_years(self):
        assert float(compound_interest(1000, Decimal("0.10"), 1, Decimal("0.5"))) == pytest.approx(
            1000 * 1.1 ** 0.5, abs=1e-6
        )

    def test_simple_interest(self):
        assert simple_interest(1000, Decimal("0.05"), 3) == 150

    def test_future_and_present_value(self):
        assert float(future_value(1000, Decimal("0.1"), 2)) == pytest.approx(1210.0, abs=1e-6)
        assert float(present_value(1210, Decimal("0.1"), 2)) == pytest.approx(1000.0, abs=1e-6)

    def test_loan_payment(self):
        assert float(loan_payment(10000, Decimal("0.06"), 12)) == pytest.approx(860.664, abs=1e-3)

    def test_loan_payment_zero_rate(self):
        assert loan_payment(1200, 0, 12) == 100

    def test_remaining_balance(self):
        assert float(remaining_balance(10000, Decimal("0.06"), 12, 12)) == pytest.approx(0.0, abs=1e-6)
        assert float(remaining_balance(10000, Decimal("0.06"), 12, 0)) == pytest.approx(10000.0, abs=1e-6)
        assert remaining_balance(1200, 0, 12, 3) == 900

    def test_total_interest(self):
        assert total_interest(1200, 0, 12) == 0
        assert float(total_interest(10000, Decimal("0.06"), 12)) == pytest.approx(327.97, abs=1e-2)

    def test_amortization_schedule(self):
        schedule = amortization_schedule(1000, Decimal("0.12"), 12)

        assert len(schedule) == 12
        assert [e.period for e in schedule] == list(range(1, 13))
        assert float(schedule[-1].balance) == pytest.approx(0.0, abs=1e-6)
        assert float(sum(e.principal for e in schedule)) == pytest.approx(1000.0, abs=1e-6)
        assert schedule[0].interest == Decimal("10.00")

    def test_amortization_balance_never_negative(self):
        schedule = amortization_schedule(1000, Decimal("0.12"), 12)
        assert all(e.balance >= 0 for e in schedule)


# ============================================================================
# Estimation tests
# ============================================================================

class TestEstimation:
    def test_three_point(self):
        assert three_point_estimate(10, 20, 30) == 20
        assert three_point_standard_deviation(10, 70) == 10

    def test_confidence_interval(self):
        assert confidence_interval(100, 10, 0.95) == (Decimal("80.4"), Decimal("119.6"))
        assert confidence_interval(100, 10, 0.68) == (Decimal("90.0"), Decimal("110.0"))
        assert confidence_interval(100, 10, 0.99) == (Decimal("74.2"), Decimal("125.8"))

    def test_confidence_interval_unknown_level_defaults(self):
        assert confidence_interval(100, 10, 0.90) == confidence_interval(100, 10, 0.95)

    def test_evm_metrics(self):
        m = evm_metrics(1000, 900, 1100, 5000)

        assert m.schedule_variance == -100
        assert m.cost_variance == -200
        assert m.schedule_performance_index == Decimal("0.9")
        assert float(m.cost_performance_index) == pytest.approx(900 / 1100)
        assert float(m.estimate_at_completion) == pytest.approx(5000 / (900 / 1100), abs=1e-6)
        assert float(m.estimate_to_complete) == pytest.approx(5000 / (900 / 1100) - 1100, abs=1e-6)

    def test_evm_optional_chain(self):
        """No CPI means no EAC and no ETC."""
        m = evm_metrics(0, 500, 0, 5000)

        assert m.schedule_performance_index is None
        assert m.cost_performance_index is None
        assert m.estimate_at_completion is None
        assert m.estimate_to_complete is None

    def test_evm_zero_cpi(self):
        m = evm_metrics(100, 0, 50, 5000)

        assert m.cost_performance_index == 0
        assert m.estimate_at_completion is None
        assert m.estimate_to_complete is None

    def test_contingency_and_bottom_up(self):
        assert contingency_reserve(1000, 10) == 100
        assert bottom_up_estimate([100, 200, 300], 10) == 660


# ============================================================================
# Allocation tests
# ============================================================================

class TestOptimization:
    def test_proportional_allocation(self):
        assert proportional_allocation(1000, [1, 1, 2]) == [250, 250, 500]

    def test_proportional_allocation_zero_weights(self):
        assert proportional_allocation(1000, [0, 0, 0]) == [0, 0, 0]

    def test_priority_allocation(self):
        result = priority_allocation(100, [("A", 60, 1), ("B", 60, 2)])
        assert result == [("A", 60), ("B", 40)]

    def test_priority_allocation_sorted_output(self):
        result = priority_allocation(100, [
            AllocationRequest("Low", Decimal("30"), 3),
            AllocationRequest("High", Decimal("80"), 1),
            AllocationRequest("Mid", Decimal("30"), 2),
        ])
        assert result == [("High", 80), ("Mid", 20), ("Low", 0)]

    def test_priority_allocation_keeps_caller_order(self):
        requests = [("Low", 30, 3), ("High", 80, 1), ("Mid", 30, 2)]
        snapshot = list(requests)

        priority_allocation(100, requests)

        assert requests == snapshot

    def test_break_even(self):
        assert break_even_point(1000, 15, 5) == 100
        assert break_even_point(1000, 5, 8) is None
        assert break_even_point(1000, 5, 5) is None

    def test_contribution_margin_ratio(self):
        assert contribution_margin_ratio(1000, 600) == 40
        assert contribution_margin_ratio(0, 600) is None
