"""
Budget Engine Scenario Validation

Cross-field checks on scenario inputs, run before any computation.
Field types and ranges are enforced by the pydantic models themselves.
"""
from __future__ import annotations

from collections import Counter

from budget_engine.models import ScenarioInputs


class ValidationError(Exception):
    """Raised when scenario validation fails."""
    pass


def validate_scenario(inputs: ScenarioInputs) -> None:
    """
    Validate a scenario for completeness and consistency.

    Raises ValidationError with a precise message on failure.
    """
    if not inputs.sections:
        raise ValidationError(
            "Scenario has no sections: provide at least one of "
            "budget, forecast, cash_flow, investment, loan, project, allocation"
        )

    _validate_forecast(inputs)
    _validate_cash_flow(inputs)
    _validate_project(inputs)
    _validate_allocation(inputs)


def _validate_forecast(inputs: ScenarioInputs) -> None:
    """Ensure there is history to forecast from."""
    forecast = inputs.forecast
    if forecast is None:
        return

    if not forecast.history:
        raise ValidationError("forecast.history must contain at least one value")


def _validate_cash_flow(inputs: ScenarioInputs) -> None:
    """Ensure inflows and outflows cover the same periods."""
    cash_flow = inputs.cash_flow
    if cash_flow is None:
        return

    if len(cash_flow.inflows) != len(cash_flow.outflows):
        raise ValidationError(
            f"cash_flow.inflows has {len(cash_flow.inflows)} periods but "
            f"cash_flow.outflows has {len(cash_flow.outflows)}"
        )


def _validate_project(inputs: ScenarioInputs) -> None:
    """Ensure task names are unique."""
    project = inputs.project
    if project is None:
        return

    duplicates = [name for name, count in Counter(t.name for t in project.tasks).items() if count > 1]
    if duplicates:
        raise ValidationError(f"Duplicate task names in project: {duplicates}")


def _validate_allocation(inputs: ScenarioInputs) -> None:
    """Ensure each allocation analysis has all of its inputs."""
    allocation = inputs.allocation
    if allocation is None:
        return

    break_even = {
        "fixed_costs": allocation.fixed_costs,
        "price_per_unit": allocation.price_per_unit,
        "variable_cost_per_unit": allocation.variable_cost_per_unit,
    }
    provided = [k for k, v in break_even.items() if v is not None]
    if provided and len(provided) != len(break_even):
        missing = [k for k, v in break_even.items() if v is None]
        raise ValidationError(
            f"Break-even analysis underdetermined: missing {missing}"
        )

    if (allocation.revenue is None) != (allocation.variable_costs is None):
        raise ValidationError(
            "Contribution margin requires both 'revenue' and 'variable_costs'"
        )

    if allocation.items:
        duplicates = [name for name, count in Counter(i.name for i in allocation.items).items() if count > 1]
        if duplicates:
            raise ValidationError(f"Duplicate allocation item names: {duplicates}")

    if not (allocation.weights or allocation.items or provided or allocation.revenue is not None):
        raise ValidationError(
            "Allocation section underdetermined: provide 'weights', 'items', "
            "break-even inputs or 'revenue'/'variable_costs'"
        )
