"""
Budget Engine Allocation and Optimization

Proportional and priority-based budget allocation, break-even analysis.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from decimal import Decimal
from typing import Optional

from budget_engine.models import AllocationRequest
from budget_engine.numeric import HUNDRED, ZERO, Numeric, to_decimal


def proportional_allocation(total_budget: Numeric, weights: Sequence[Numeric]) -> list[Decimal]:
    """
    Split a budget in proportion to weights.

    Share_i = Total * w_i / sum(w)

    Returns:
        One share per weight; all zeros when the weights sum to zero
    """
    total_budget = to_decimal(total_budget)
    weights = [to_decimal(w) for w in weights]
    total_weight = sum(weights, ZERO)

    if total_weight == ZERO:
        return [ZERO] * len(weights)
    return [total_budget * (w / total_weight) for w in weights]


def priority_allocation(
    total_budget: Numeric,
    items: Iterable[tuple[str, Numeric, int]],
) -> list[tuple[str, Decimal]]:
    """
    Fund requests in priority order until the budget runs out.

    Requests are ordered by ascending priority (1 = most important; ties
    keep their input order). Each receives min(minimum_required, remaining).

    Args:
        total_budget: Budget to distribute
        items: (name, minimum_required, priority) tuples or AllocationRequest

    Returns:
        (name, allocated) pairs in priority order, not input order
    """
    requests = [AllocationRequest(name, to_decimal(minimum), priority) for name, minimum, priority in items]
    remaining = to_decimal(total_budget)

    allocations = []
    for request in sorted(requests, key=lambda r: r.priority):
        allocated = min(request.minimum_required, remaining)
        remaining -= allocated
        allocations.append((request.name, allocated))

    return allocations


def break_even_point(
    fixed_costs: Numeric,
    price_per_unit: Numeric,
    variable_cost_per_unit: Numeric,
) -> Optional[Decimal]:
    """
    Compute break-even volume.

    BreakEven = FixedCosts / (Price - VariableCost)

    Returns:
        Units, or None when each unit does not contribute a positive margin
    """
    contribution_margin = to_decimal(price_per_unit) - to_decimal(variable_cost_per_unit)
    if contribution_margin <= ZERO:
        return None
    return to_decimal(fixed_costs) / contribution_margin


def contribution_margin_ratio(revenue: Numeric, variable_costs: Numeric) -> Optional[Decimal]:
    """
    CM Ratio = (Revenue - VariableCosts) / Revenue * 100

    Returns:
        Percentage, or None for zero revenue
    """
    revenue = to_decimal(revenue)
    if revenue == ZERO:
        return None
    return (revenue - to_decimal(variable_costs)) / revenue * HUNDRED
