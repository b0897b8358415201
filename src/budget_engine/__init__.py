"""
Budget Engine

Stateless financial calculations for budgeting and planning:
- Budget variance and utilization
- Linear, moving average and exponential smoothing forecasts
- Cash flow analysis and position projection
- ROI, IRR, NPV, payback and profitability index
- Interest, loan payments and amortization
- PERT estimation and Earned Value Management
- Proportional and priority budget allocation, break-even
- Mortgage, auto, student loan, debt payoff and savings planning
"""
import logging

from budget_engine.models import ScenarioInputs, ScenarioOutputs
from budget_engine.engine import ScenarioEngine
from budget_engine.validation import ValidationError, validate_scenario
from budget_engine.loans import (
    car_loan,
    compare_refinance,
    mortgage_schedule,
    mortgage_summary,
    remaining_loan_summary,
    student_loan_with_deferment,
)
from budget_engine.debt import debt_avalanche, debt_snowball
from budget_engine.savings import investment_projection, savings_goal
from budget_engine.budget_analysis import analyze_category_spending, recommend_budget_adjustments

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ScenarioInputs",
    "ScenarioOutputs",
    "ScenarioEngine",
    "ValidationError",
    "validate_scenario",
    "car_loan",
    "compare_refinance",
    "mortgage_schedule",
    "mortgage_summary",
    "remaining_loan_summary",
    "student_loan_with_deferment",
    "debt_avalanche",
    "debt_snowball",
    "investment_projection",
    "savings_goal",
    "analyze_category_spending",
    "recommend_budget_adjustments",
]
