"""
Budget Engine Core Data Models

Pydantic models for calculation results and scenario inputs/outputs.
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import NamedTuple, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class VarianceStatus(str, Enum):
    """Budget position relative to a tolerance band."""
    OVER = "over"
    UNDER = "under"
    ON_TARGET = "on_target"


class TrendDirection(str, Enum):
    """Direction of a historical series."""
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class PaymentFrequency(str, Enum):
    """Loan payment frequency."""
    MONTHLY = "monthly"
    BIWEEKLY = "biweekly"
    WEEKLY = "weekly"

    @property
    def periods_per_year(self) -> int:
        return _PERIODS_PER_YEAR[self]


_PERIODS_PER_YEAR = {
    PaymentFrequency.MONTHLY: 12,
    PaymentFrequency.BIWEEKLY: 26,
    PaymentFrequency.WEEKLY: 52,
}


class RepaymentPlan(str, Enum):
    """Student loan repayment plan."""
    STANDARD = "standard"
    GRADUATED = "graduated"
    EXTENDED = "extended"
    INCOME_BASED = "income_based"


class AllocationRequest(NamedTuple):
    """Funding request for priority-based allocation (lower priority = funded first)."""
    name: str
    minimum_required: Decimal
    priority: int


# ============================================================================
# CALCULATION RESULTS
# ============================================================================

class AmortizationEntry(BaseModel):
    """Single period of a loan amortization schedule."""
    period: int
    payment: Decimal
    principal: Decimal
    interest: Decimal
    balance: Decimal


class EVMMetrics(BaseModel):
    """Earned Value Management metrics; indices are None when undefined."""
    planned_value: Decimal
    earned_value: Decimal
    actual_cost: Decimal
    schedule_variance: Decimal
    cost_variance: Decimal
    schedule_performance_index: Optional[Decimal] = None
    cost_performance_index: Optional[Decimal] = None
    estimate_at_completion: Optional[Decimal] = None
    estimate_to_complete: Optional[Decimal] = None


class MortgagePayment(BaseModel):
    """Single payment of a mortgage schedule."""
    payment_number: int
    payment_amount: Decimal
    principal_portion: Decimal
    interest_portion: Decimal
    remaining_balance: Decimal
    cumulative_interest: Decimal
    cumulative_principal: Decimal


class MortgageSummary(BaseModel):
    """Mortgage totals derived from the full schedule."""
    loan_amount: Decimal
    interest_rate: Decimal
    term_years: int
    term_months: int
    payment_frequency: PaymentFrequency
    regular_payment: Decimal
    total_payments: int
    total_interest: Decimal
    total_paid: Decimal
    payoff_date: Optional[date] = None


class PayoffAcceleration(BaseModel):
    """Effect of an extra periodic payment on a mortgage."""
    payments_saved: int
    interest_saved: Decimal
    regular_interest: Decimal


class CarLoanDetails(BaseModel):
    """Auto loan including sales tax and fees."""
    vehicle_price: Decimal
    down_payment: Decimal
    trade_in_value: Decimal
    loan_amount: Decimal
    interest_rate: Decimal
    term_months: int
    monthly_payment: Decimal
    total_interest: Decimal
    total_cost: Decimal
    sales_tax: Decimal
    fees: Decimal


class LeaseBuyComparison(BaseModel):
    """Total cost of leasing against buying a vehicle."""
    total_lease_cost: Decimal
    total_buy_cost: Decimal
    equity_gained: Decimal


class StudentLoanSummary(BaseModel):
    """Student loan after capitalizing grace and deferment interest."""
    loan_balance: Decimal
    interest_rate: Decimal
    plan: RepaymentPlan
    monthly_payment: Decimal
    total_payments: int
    total_interest: Decimal
    total_paid: Decimal
    interest_capitalization: Decimal


class ForgivenessOutcome(BaseModel):
    """Balance left when a forgiveness program ends."""
    remaining_balance: Decimal
    total_paid: Decimal
    total_interest: Decimal


class DebtItem(BaseModel):
    """Outstanding debt; interest_rate is an annual percentage."""
    name: str
    balance: Decimal
    interest_rate: Decimal
    minimum_payment: Decimal


class DebtPayoff(BaseModel):
    """Payoff result for one debt; months_to_payoff is None if it never clears."""
    name: str
    months_to_payoff: Optional[int]
    interest_paid: Decimal


class SavingsGoal(BaseModel):
    """Time and contributions needed to reach a savings target."""
    target_amount: Decimal
    current_savings: Decimal
    monthly_contribution: Decimal
    annual_return_rate: Decimal
    months_to_goal: int
    total_contributions: Decimal
    total_interest_earned: Decimal


class InvestmentProjection(BaseModel):
    """Future value of an investment with monthly contributions."""
    initial_investment: Decimal
    monthly_contribution: Decimal
    annual_return_rate: Decimal
    years: int
    future_value: Decimal
    total_contributions: Decimal
    total_gains: Decimal


class RefinanceComparison(BaseModel):
    """Current loan against a refinance offer."""
    current_loan: MortgageSummary
    new_loan: MortgageSummary
    closing_costs: Decimal
    break_even_months: Optional[int]
    monthly_payment_savings: Decimal
    total_interest_savings: Decimal
    net_savings: Decimal
    is_worthwhile: bool


class CategorySpending(BaseModel):
    """Budgeted against actual spending for one category."""
    category_name: str
    budgeted_amount: Decimal
    actual_spent: Decimal
    variance: Decimal
    variance_percent: Decimal
    percent_of_total: Decimal


class BudgetAnalysis(BaseModel):
    """Category spending grouped by variance band, with recommendations."""
    total_budgeted: Decimal
    total_spent: Decimal
    total_variance: Decimal
    overspent_categories: list[CategorySpending]
    underspent_categories: list[CategorySpending]
    on_track_categories: list[CategorySpending]
    recommendations: list[str]


class BudgetAdjustment(BaseModel):
    """Rescaled category budget."""
    category_name: str
    adjusted_budget: Decimal
    difference: Decimal


# ============================================================================
# SCENARIO INPUT MODELS
# ============================================================================

class BudgetInputs(BaseModel):
    """Budget against actual spending."""
    budgeted: Decimal = Field(..., description="Budgeted amount")
    actual: Decimal = Field(..., description="Actual amount spent")
    tolerance: Decimal = Field(Decimal("0"), ge=0, description="On-target band (absolute amount)")
    periods_elapsed: int = Field(0, ge=0, description="Periods elapsed for burn rate")


class ForecastInputs(BaseModel):
    """Historical series and forecast settings."""
    history: list[Decimal] = Field(..., description="Historical values in chronological order")
    periods_ahead: int = Field(3, ge=0, description="Number of periods to forecast")
    window_size: int = Field(3, ge=1, description="Moving average window")
    alpha: float = Field(0.5, ge=0.0, le=1.0, description="Exponential smoothing factor")


class CashFlowInputs(BaseModel):
    """Projected inflows/outflows and liquidity figures."""
    starting_cash: Decimal = Field(Decimal("0"), description="Cash at the start of period 1")
    inflows: list[Decimal] = Field(..., description="Inflows by period")
    outflows: list[Decimal] = Field(..., description="Outflows by period")
    operating_cash_flow: Optional[Decimal] = Field(None, description="Operating cash flow (defaults to net flow)")
    capital_expenditures: Decimal = Field(Decimal("0"), description="Capex for free cash flow")
    total_debt_service: Optional[Decimal] = Field(None, description="Debt service for coverage ratio")
    current_liabilities: Optional[Decimal] = Field(None, description="Current liabilities for OCF ratio")
    daily_cash_expenses: Optional[Decimal] = Field(None, description="Daily cash burn for days of cash")


class InvestmentInputs(BaseModel):
    """Investment cash flows; period 0 is the (negative) initial outlay."""
    cash_flows: list[Decimal] = Field(..., min_length=1, description="Cash flows from period 0")
    discount_rate: Decimal = Field(..., description="Discount rate as a fraction")
    max_iterations: int = Field(100, ge=1, description="IRR iteration cap")
    tolerance: float = Field(1e-6, gt=0.0, description="IRR convergence tolerance on NPV")

    @property
    def initial_investment(self) -> Decimal:
        return -self.cash_flows[0]

    @property
    def future_flows(self) -> list[Decimal]:
        return self.cash_flows[1:]


class LoanInputs(BaseModel):
    """Amortizing loan with monthly payments."""
    principal: Decimal = Field(..., description="Amount borrowed")
    annual_rate: Decimal = Field(..., ge=0, description="Annual rate as a fraction")
    number_of_payments: int = Field(..., ge=1, description="Number of monthly payments")


class TaskEstimateInputs(BaseModel):
    """Three-point estimate for a single task."""
    name: str
    optimistic: Decimal
    most_likely: Decimal
    pessimistic: Decimal

    @model_validator(mode="after")
    def validate_ordering(self) -> "TaskEstimateInputs":
        if not (self.optimistic <= self.most_likely <= self.pessimistic):
            raise ValueError(
                f"Task '{self.name}': expected optimistic <= most_likely <= pessimistic"
            )
        return self


class EarnedValueInputs(BaseModel):
    """Earned value status at the data date."""
    planned_value: Decimal
    earned_value: Decimal
    actual_cost: Decimal
    budget_at_completion: Decimal


class ProjectInputs(BaseModel):
    """Project cost estimation inputs."""
    tasks: list[TaskEstimateInputs] = Field(..., min_length=1)
    contingency_percent: Decimal = Field(Decimal("0"), ge=0, description="Contingency as % of base estimate")
    confidence_level: float = Field(0.95, description="Confidence level for the estimate interval")
    earned_value: Optional[EarnedValueInputs] = None


class AllocationItemInputs(BaseModel):
    """Funding request in a priority allocation."""
    name: str
    minimum_required: Decimal = Field(..., ge=0)
    priority: int


class AllocationInputs(BaseModel):
    """Budget allocation and break-even inputs."""
    total_budget: Decimal = Field(..., description="Budget to distribute")
    weights: Optional[list[Decimal]] = Field(None, description="Weights for proportional allocation")
    items: Optional[list[AllocationItemInputs]] = Field(None, description="Requests for priority allocation")
    fixed_costs: Optional[Decimal] = None
    price_per_unit: Optional[Decimal] = None
    variable_cost_per_unit: Optional[Decimal] = None
    revenue: Optional[Decimal] = None
    variable_costs: Optional[Decimal] = None


class ScenarioInputs(BaseModel):
    """Complete scenario; every section is optional."""
    name: str = Field("Scenario", description="Scenario name used in reports")
    budget: Optional[BudgetInputs] = None
    forecast: Optional[ForecastInputs] = None
    cash_flow: Optional[CashFlowInputs] = None
    investment: Optional[InvestmentInputs] = None
    loan: Optional[LoanInputs] = None
    project: Optional[ProjectInputs] = None
    allocation: Optional[AllocationInputs] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Scenario name must not be blank")
        return v.strip()

    @property
    def sections(self) -> list[str]:
        """Names of the sections present in this scenario."""
        return [
            name
            for name in ("budget", "forecast", "cash_flow", "investment", "loan", "project", "allocation")
            if getattr(self, name) is not None
        ]


# ============================================================================
# SCENARIO OUTPUT MODELS
# ============================================================================

class BudgetResult(BaseModel):
    """Variance analysis results."""
    variance: Decimal
    variance_percentage: Optional[Decimal]
    status: VarianceStatus
    utilization_rate: Optional[Decimal]
    remaining_budget: Decimal
    burn_rate: Decimal


class ForecastResult(BaseModel):
    """Forecasts from each method plus trend."""
    linear: list[Decimal]
    moving_average: Decimal
    exponential_smoothing: list[Decimal]
    smoothed_history: list[Decimal]
    trend: TrendDirection


class CashFlowResult(BaseModel):
    """Cash flow analysis results."""
    net_flows: list[Decimal]
    net_cash_flow: Decimal
    cumulative: list[Decimal]
    positions: list[Decimal]
    free_cash_flow: Decimal
    coverage_ratio: Optional[Decimal] = None
    operating_cash_flow_ratio: Optional[Decimal] = None
    days_of_cash_on_hand: Optional[Decimal] = None


class InvestmentResult(BaseModel):
    """Investment appraisal results; rates are percentages."""
    npv: Decimal
    irr: Optional[Decimal]
    payback_period: Optional[int]
    profitability_index: Optional[Decimal]
    roi: Optional[Decimal]


class LoanResult(BaseModel):
    """Loan payment and amortization."""
    payment: Decimal
    total_interest: Decimal
    schedule: list[AmortizationEntry]


class TaskEstimate(BaseModel):
    """PERT estimate for one task."""
    name: str
    estimate: Decimal
    standard_deviation: Decimal


class ProjectResult(BaseModel):
    """Project estimate roll-up."""
    tasks: list[TaskEstimate]
    total_estimate: Decimal
    total_standard_deviation: Decimal
    confidence_level: float
    confidence_low: Decimal
    confidence_high: Decimal
    contingency_reserve: Decimal
    bottom_up_total: Decimal
    evm: Optional[EVMMetrics] = None


class AllocationLine(BaseModel):
    """Amount allocated to one request."""
    name: str
    amount: Decimal


class AllocationResult(BaseModel):
    """Allocation and break-even results."""
    proportional: Optional[list[Decimal]] = None
    priority: Optional[list[AllocationLine]] = None
    unallocated: Optional[Decimal] = None
    break_even_units: Optional[Decimal] = None
    contribution_margin_ratio: Optional[Decimal] = None


class ScenarioOutputs(BaseModel):
    """Complete scenario outputs; sections mirror ScenarioInputs."""
    name: str
    budget: Optional[BudgetResult] = None
    forecast: Optional[ForecastResult] = None
    cash_flow: Optional[CashFlowResult] = None
    investment: Optional[InvestmentResult] = None
    loan: Optional[LoanResult] = None
    project: Optional[ProjectResult] = None
    allocation: Optional[AllocationResult] = None
