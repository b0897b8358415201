"""
Budget Engine Main Orchestrator

Evaluates every section of a scenario with the calculation modules.
"""
from __future__ import annotations

import logging

from budget_engine.models import (
    AllocationInputs,
    AllocationLine,
    AllocationResult,
    BudgetInputs,
    BudgetResult,
    CashFlowInputs,
    CashFlowResult,
    ForecastInputs,
    ForecastResult,
    InvestmentInputs,
    InvestmentResult,
    LoanInputs,
    LoanResult,
    ProjectInputs,
    ProjectResult,
    ScenarioInputs,
    ScenarioOutputs,
    TaskEstimate,
)
from budget_engine.numeric import ZERO
from budget_engine.validation import validate_scenario
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
from budget_engine.returns import irr, npv, payback_period, profitability_index, roi
from budget_engine.interest import amortization_schedule, loan_payment, total_interest
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

logger = logging.getLogger(__name__)


class ScenarioEngine:
    """
    Main scenario computation engine.

    Validates the scenario on construction; run() evaluates each section
    present and leaves the others as None.
    """

    def __init__(self, inputs: ScenarioInputs):
        """
        Initialize engine with inputs.

        Args:
            inputs: Complete scenario inputs

        Raises:
            ValidationError: If the scenario fails cross-field checks
        """
        self.inputs = inputs
        self._validate()

    def _validate(self) -> None:
        """Validate inputs before computation."""
        validate_scenario(self.inputs)

    def run(self) -> ScenarioOutputs:
        """
        Execute every section of the scenario.

        Returns:
            ScenarioOutputs with one result per section present
        """
        inputs = self.inputs
        logger.info("Running scenario %r (sections: %s)", inputs.name, ", ".join(inputs.sections))

        return ScenarioOutputs(
            name=inputs.name,
            budget=self._run_budget(inputs.budget) if inputs.budget else None,
            forecast=self._run_forecast(inputs.forecast) if inputs.forecast else None,
            cash_flow=self._run_cash_flow(inputs.cash_flow) if inputs.cash_flow else None,
            investment=self._run_investment(inputs.investment) if inputs.investment else None,
            loan=self._run_loan(inputs.loan) if inputs.loan else None,
            project=self._run_project(inputs.project) if inputs.project else None,
            allocation=self._run_allocation(inputs.allocation) if inputs.allocation else None,
        )

    # ========================================================================
    # SECTIONS
    # ========================================================================

    def _run_budget(self, budget: BudgetInputs) -> BudgetResult:
        return BudgetResult(
            variance=variance(budget.actual, budget.budgeted),
            variance_percentage=variance_percentage(budget.actual, budget.budgeted),
            status=variance_status(budget.actual, budget.budgeted, budget.tolerance),
            utilization_rate=utilization_rate(budget.actual, budget.budgeted),
            remaining_budget=remaining_budget(budget.budgeted, budget.actual),
            burn_rate=burn_rate(budget.actual, budget.periods_elapsed),
        )

    def _run_forecast(self, forecast: ForecastInputs) -> ForecastResult:
        history = forecast.history
        return ForecastResult(
            linear=linear_forecast(history, forecast.periods_ahead),
            moving_average=moving_average_forecast(history, forecast.window_size, forecast.periods_ahead),
            exponential_smoothing=exponential_smoothing(history, forecast.alpha, forecast.periods_ahead),
            smoothed_history=smoothed_series(history, forecast.alpha),
            trend=identify_trend(history),
        )

    def _run_cash_flow(self, cash_flow: CashFlowInputs) -> CashFlowResult:
        net_flows = [i - o for i, o in zip(cash_flow.inflows, cash_flow.outflows)]
        positions = project_cash_position(cash_flow.starting_cash, cash_flow.inflows, cash_flow.outflows)
        total_net = net_cash_flow(cash_flow.inflows, cash_flow.outflows)

        # Operating cash flow defaults to the net flow over the horizon
        operating = cash_flow.operating_cash_flow
        if operating is None:
            operating = total_net

        coverage = None
        if cash_flow.total_debt_service is not None:
            coverage = cash_flow_coverage_ratio(operating, cash_flow.total_debt_service)

        ocf_ratio = None
        if cash_flow.current_liabilities is not None:
            ocf_ratio = operating_cash_flow_ratio(operating, cash_flow.current_liabilities)

        days = None
        if cash_flow.daily_cash_expenses is not None:
            closing_cash = positions[-1] if positions else cash_flow.starting_cash
            days = days_of_cash_on_hand(closing_cash, cash_flow.daily_cash_expenses)

        return CashFlowResult(
            net_flows=net_flows,
            net_cash_flow=total_net,
            cumulative=cumulative_cash_flow(net_flows),
            positions=positions,
            free_cash_flow=free_cash_flow(operating, cash_flow.capital_expenditures),
            coverage_ratio=coverage,
            operating_cash_flow_ratio=ocf_ratio,
            days_of_cash_on_hand=days,
        )

    def _run_investment(self, investment: InvestmentInputs) -> InvestmentResult:
        initial = investment.initial_investment
        future_flows = investment.future_flows

        # PV of the future flows alone: period 0 contributes nothing
        pv_future = npv(investment.discount_rate, [ZERO] + future_flows)

        return InvestmentResult(
            npv=npv(investment.discount_rate, investment.cash_flows),
            irr=irr(investment.cash_flows, investment.max_iterations, investment.tolerance),
            payback_period=payback_period(initial, future_flows),
            profitability_index=profitability_index(pv_future, initial),
            roi=roi(sum(future_flows, ZERO), initial),
        )

    def _run_loan(self, loan: LoanInputs) -> LoanResult:
        return LoanResult(
            payment=loan_payment(loan.principal, loan.annual_rate, loan.number_of_payments),
            total_interest=total_interest(loan.principal, loan.annual_rate, loan.number_of_payments),
            schedule=amortization_schedule(loan.principal, loan.annual_rate, loan.number_of_payments),
        )

    def _run_project(self, project: ProjectInputs) -> ProjectResult:
        tasks = [
            TaskEstimate(
                name=t.name,
                estimate=three_point_estimate(t.optimistic, t.most_likely, t.pessimistic),
                standard_deviation=three_point_standard_deviation(t.optimistic, t.pessimistic),
            )
            for t in project.tasks
        ]

        total = sum((t.estimate for t in tasks), ZERO)
        # Task estimates are treated as independent: variances add
        total_sd = sum((t.standard_deviation ** 2 for t in tasks), ZERO).sqrt()
        low, high = confidence_interval(total, total_sd, project.confidence_level)

        evm = None
        if project.earned_value is not None:
            ev = project.earned_value
            evm = evm_metrics(ev.planned_value, ev.earned_value, ev.actual_cost, ev.budget_at_completion)

        return ProjectResult(
            tasks=tasks,
            total_estimate=total,
            total_standard_deviation=total_sd,
            confidence_level=project.confidence_level,
            confidence_low=low,
            confidence_high=high,
            contingency_reserve=contingency_reserve(total, project.contingency_percent),
            bottom_up_total=bottom_up_estimate([t.estimate for t in tasks], project.contingency_percent),
            evm=evm,
        )

    def _run_allocation(self, allocation: AllocationInputs) -> AllocationResult:
        proportional = None
        if allocation.weights:
            proportional = proportional_allocation(allocation.total_budget, allocation.weights)

        priority = None
        unallocated = None
        if allocation.items:
            funded = priority_allocation(
                allocation.total_budget,
                [(i.name, i.minimum_required, i.priority) for i in allocation.items],
            )
            priority = [AllocationLine(name=name, amount=amount) for name, amount in funded]
            unallocated = allocation.total_budget - sum((amount for _, amount in funded), ZERO)

        break_even = None
        if allocation.fixed_costs is not None:
            break_even = break_even_point(
                allocation.fixed_costs,
                allocation.price_per_unit,
                allocation.variable_cost_per_unit,
            )

        cm_ratio = None
        if allocation.revenue is not None:
            cm_ratio = contribution_margin_ratio(allocation.revenue, allocation.variable_costs)

        return AllocationResult(
            proportional=proportional,
            priority=priority,
            unallocated=unallocated,
            break_even_units=break_even,
            contribution_margin_ratio=cm_ratio,
        )
