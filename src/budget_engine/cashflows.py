"""
Budget Engine Cash Flow Calculations

Net and cumulative flows, liquidity ratios and cash position projection.
"""
from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from itertools import accumulate
from typing import Optional

from budget_engine.numeric import ZERO, Numeric, to_decimal


def net_cash_flow(inflows: Sequence[Numeric], outflows: Sequence[Numeric]) -> Decimal:
    """
    Compute net cash flow.

    NetCashFlow = sum(Inflows) - sum(Outflows)
    """
    return sum((to_decimal(v) for v in inflows), ZERO) - sum((to_decimal(v) for v in outflows), ZERO)


def cumulative_cash_flow(net_flows: Sequence[Numeric]) -> list[Decimal]:
    """
    Compute the running total of net flows.

    Cumulative_t = NetFlow_1 + ... + NetFlow_t

    Returns:
        One cumulative value per period (the zero starting point is not included)
    """
    return list(accumulate((to_decimal(v) for v in net_flows), initial=ZERO))[1:]


def cash_flow_coverage_ratio(
    operating_cash_flow: Numeric,
    total_debt_service: Numeric,
) -> Optional[Decimal]:
    """
    Compute cash flow coverage.

    Coverage = OperatingCashFlow / TotalDebtService

    Returns:
        Ratio, or None when there is no debt service
    """
    total_debt_service = to_decimal(total_debt_service)
    if total_debt_service == ZERO:
        return None
    return to_decimal(operating_cash_flow) / total_debt_service


def operating_cash_flow_ratio(
    operating_cash_flow: Numeric,
    current_liabilities: Numeric,
) -> Optional[Decimal]:
    """
    Compute the operating cash flow ratio.

    OCF Ratio = OperatingCashFlow / CurrentLiabilities

    Returns:
        Ratio, or None when there are no current liabilities
    """
    current_liabilities = to_decimal(current_liabilities)
    if current_liabilities == ZERO:
        return None
    return to_decimal(operating_cash_flow) / current_liabilities


def free_cash_flow(operating_cash_flow: Numeric, capital_expenditures: Numeric) -> Decimal:
    """FCF = OperatingCashFlow - Capex"""
    return to_decimal(operating_cash_flow) - to_decimal(capital_expenditures)


def project_cash_position(
    starting_cash: Numeric,
    inflows: Sequence[Numeric],
    outflows: Sequence[Numeric],
) -> list[Decimal]:
    """
    Project the cash balance period by period.

    Position_t = Position_(t-1) + Inflow_t - Outflow_t
    Position_0 = StartingCash

    Returns:
        Closing position for each period (starting cash not included)

    Raises:
        ValueError: If inflows and outflows differ in length
    """
    if len(inflows) != len(outflows):
        raise ValueError(
            f"Inflows and outflows must cover the same periods "
            f"({len(inflows)} inflows, {len(outflows)} outflows)"
        )

    net_flows = (to_decimal(i) - to_decimal(o) for i, o in zip(inflows, outflows))
    return list(accumulate(net_flows, initial=to_decimal(starting_cash)))[1:]


def days_of_cash_on_hand(
    cash_and_equivalents: Numeric,
    daily_cash_expenses: Numeric,
) -> Optional[Decimal]:
    """
    Compute how many days current cash covers.

    Days = Cash / DailyCashExpenses

    Returns:
        Days, or None when daily expenses are zero
    """
    daily_cash_expenses = to_decimal(daily_cash_expenses)
    if daily_cash_expenses == ZERO:
        return None
    return to_decimal(cash_and_equivalents) / daily_cash_expenses
