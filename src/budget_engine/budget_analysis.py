"""
Budget Engine Category Analysis

Classifies category spending against budget and rescales category budgets
to a new total.
"""
from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from budget_engine.models import BudgetAdjustment, BudgetAnalysis, CategorySpending
from budget_engine.numeric import HUNDRED, ZERO, Numeric, to_decimal

# Variance within 5% of the category budget counts as on track
ON_TRACK_BAND = Decimal("0.05")
# Overall underspend beyond 10% of the total budget earns a savings nudge
SAVINGS_NUDGE_THRESHOLD = Decimal("0.1")

Category = tuple[str, Numeric, Numeric]


def _category_spending(name: str, budgeted: Decimal, spent: Decimal, total_spent: Decimal) -> CategorySpending:
    variance = spent - budgeted
    return CategorySpending(
        category_name=name,
        budgeted_amount=budgeted,
        actual_spent=spent,
        variance=variance,
        variance_percent=ZERO if budgeted == ZERO else variance / budgeted * HUNDRED,
        percent_of_total=ZERO if total_spent == ZERO else spent / total_spent * HUNDRED,
    )


def analyze_category_spending(categories: Sequence[Category]) -> BudgetAnalysis:
    """
    Compare actual against budgeted spending per category.

    A category is overspent when its variance exceeds 5% of its budget,
    underspent when it falls below -5%, and on track otherwise.

    Args:
        categories: (name, budgeted, spent) tuples

    Returns:
        BudgetAnalysis with the categories grouped by band and a list of
        plain-text recommendations
    """
    rows = [(name, to_decimal(budgeted), to_decimal(spent)) for name, budgeted, spent in categories]
    total_budgeted = sum((budgeted for _, budgeted, _ in rows), ZERO)
    total_spent = sum((spent for _, _, spent in rows), ZERO)
    total_variance = total_spent - total_budgeted

    details = [_category_spending(name, budgeted, spent, total_spent) for name, budgeted, spent in rows]
    overspent = [c for c in details if c.variance > c.budgeted_amount * ON_TRACK_BAND]
    underspent = [c for c in details if c.variance < -c.budgeted_amount * ON_TRACK_BAND]
    on_track = [c for c in details if abs(c.variance) <= c.budgeted_amount * ON_TRACK_BAND]

    recommendations = []
    if total_variance > ZERO:
        recommendations.append("Overall spending exceeds budget. Consider reducing discretionary expenses.")
    if overspent:
        names = ", ".join(c.category_name for c in overspent)
        recommendations.append(f"Focus on reducing spending in: {names}")
    if underspent:
        names = ", ".join(c.category_name for c in underspent)
        recommendations.append(f"Consider reallocating funds from: {names}")
    if total_variance < ZERO and abs(total_variance) > total_budgeted * SAVINGS_NUDGE_THRESHOLD:
        recommendations.append("Great job staying under budget! Consider increasing savings.")

    return BudgetAnalysis(
        total_budgeted=total_budgeted,
        total_spent=total_spent,
        total_variance=total_variance,
        overspent_categories=overspent,
        underspent_categories=underspent,
        on_track_categories=on_track,
        recommendations=recommendations,
    )


def recommend_budget_adjustments(categories: Sequence[Category], target_total_budget: Numeric) -> list[BudgetAdjustment]:
    """
    Rescale every category budget so they sum to a new total.

    Adjusted_i = Budgeted_i * Target / sum(Budgeted)

    Raises:
        ValueError: If the current budgets sum to zero
    """
    current_total = sum((to_decimal(budgeted) for _, budgeted, _ in categories), ZERO)
    if current_total == ZERO:
        raise ValueError("Cannot rescale budgets that sum to zero")

    ratio = to_decimal(target_total_budget) / current_total
    adjustments = []
    for name, budgeted, _ in categories:
        budgeted = to_decimal(budgeted)
        adjusted = budgeted * ratio
        adjustments.append(BudgetAdjustment(
            category_name=name,
            adjusted_budget=adjusted,
            difference=adjusted - budgeted,
        ))
    return adjustments
