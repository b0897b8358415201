"""
Personal Finance Display

Rich tables for the `budget plan` commands: mortgages, refinancing,
vehicle and student loans, debt payoff, savings and category spending.
"""
from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from typing import Optional

from rich.table import Table

from budget_engine.models import (
    BudgetAdjustment,
    BudgetAnalysis,
    CarLoanDetails,
    CategorySpending,
    DebtPayoff,
    ForgivenessOutcome,
    InvestmentProjection,
    LeaseBuyComparison,
    MortgagePayment,
    MortgageSummary,
    PayoffAcceleration,
    RefinanceComparison,
    SavingsGoal,
    StudentLoanSummary,
)
from budget_ui_cli.display import console, display_header, fmt, metric_table


def _months(value: Optional[int]) -> str:
    return "never" if value is None else f"{value} months"


def display_mortgage(
    summary: MortgageSummary,
    acceleration: Optional[PayoffAcceleration] = None,
    effective: Optional[Decimal] = None,
) -> None:
    """Display mortgage totals, with the effect of extra payments if any."""
    display_header("🏠 Mortgage")

    table = metric_table()
    table.add_row("Loan Amount", fmt(summary.loan_amount))
    table.add_row("Rate (%)", fmt(summary.interest_rate, ".3f"))
    table.add_row("Term", f"{summary.term_years} years")
    table.add_row(f"Regular Payment ({summary.payment_frequency.value})", f"[bold]{fmt(summary.regular_payment)}[/bold]")
    table.add_row("Payments", str(summary.total_payments))
    table.add_row("Total Interest", fmt(summary.total_interest))
    table.add_row("Total Paid", fmt(summary.total_paid))
    if summary.payoff_date is not None:
        table.add_row("Payoff Date", summary.payoff_date.isoformat())
    if effective is not None:
        table.add_row("Effective Rate (%)", fmt(effective, ".3f"))
    if acceleration is not None:
        table.add_row("", "")
        table.add_row("Payments Saved", str(acceleration.payments_saved))
        table.add_row("Interest Saved", f"[bold green]{fmt(acceleration.interest_saved)}[/bold green]")

    console.print(table)


def display_mortgage_schedule(schedule: Sequence[MortgagePayment]) -> None:
    """Display every payment of a mortgage schedule."""
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", justify="center")
    table.add_column("Payment", justify="right")
    table.add_column("Principal", justify="right")
    table.add_column("Interest", justify="right")
    table.add_column("Balance", justify="right", style="bold blue")

    for p in schedule:
        table.add_row(
            str(p.payment_number),
            fmt(p.payment_amount),
            fmt(p.principal_portion),
            fmt(p.interest_portion),
            fmt(p.remaining_balance),
        )

    console.print(table)


def display_refinance(result: RefinanceComparison) -> None:
    """Display the current loan against the refinance offer."""
    display_header("🔁 Refinance")

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("", style="dim")
    table.add_column("Current", justify="right")
    table.add_column("Refinanced", justify="right")
    table.add_row("Rate (%)", fmt(result.current_loan.interest_rate, ".3f"), fmt(result.new_loan.interest_rate, ".3f"))
    table.add_row("Term (months)", str(result.current_loan.term_months), str(result.new_loan.term_months))
    table.add_row("Monthly Payment", fmt(result.current_loan.regular_payment), fmt(result.new_loan.regular_payment))
    table.add_row("Total Interest", fmt(result.current_loan.total_interest), fmt(result.new_loan.total_interest))
    console.print(table)

    summary = metric_table()
    summary.add_row("Monthly Savings", fmt(result.monthly_payment_savings))
    summary.add_row("Interest Savings", fmt(result.total_interest_savings))
    summary.add_row("Closing Costs", fmt(result.closing_costs))
    summary.add_row("Net Savings", f"[bold]{fmt(result.net_savings)}[/bold]")
    summary.add_row("Break-even", _months(result.break_even_months))
    verdict = "[bold green]yes[/bold green]" if result.is_worthwhile else "[bold red]no[/bold red]"
    summary.add_row("Worthwhile", verdict)
    console.print(summary)


def display_car_loan(details: CarLoanDetails, lease: Optional[LeaseBuyComparison] = None) -> None:
    """Display an auto loan and, optionally, the lease comparison."""
    display_header("🚗 Auto Loan")

    table = metric_table()
    table.add_row("Vehicle Price", fmt(details.vehicle_price))
    table.add_row("Sales Tax", fmt(details.sales_tax))
    table.add_row("Fees", fmt(details.fees))
    table.add_row("Down Payment + Trade-in", fmt(details.down_payment + details.trade_in_value))
    table.add_row("Loan Amount", fmt(details.loan_amount))
    table.add_row("Monthly Payment", f"[bold]{fmt(details.monthly_payment)}[/bold]")
    table.add_row("Total Interest", fmt(details.total_interest))
    table.add_row("Total Cost", fmt(details.total_cost))
    if lease is not None:
        table.add_row("", "")
        table.add_row("Total Lease Cost", fmt(lease.total_lease_cost))
        table.add_row("Total Buy Cost", fmt(lease.total_buy_cost))
        table.add_row("Equity Gained", fmt(lease.equity_gained))

    console.print(table)


def display_student_loan(
    summary: StudentLoanSummary,
    income_based: Optional[Decimal] = None,
    forgiveness: Optional[ForgivenessOutcome] = None,
) -> None:
    """Display a student loan after capitalization, with optional alternatives."""
    display_header("🎓 Student Loan")

    table = metric_table()
    table.add_row("Capitalized Interest", fmt(summary.interest_capitalization))
    table.add_row("Balance at Repayment", fmt(summary.loan_balance))
    table.add_row(f"Monthly Payment ({summary.plan.value})", f"[bold]{fmt(summary.monthly_payment)}[/bold]")
    table.add_row("Payments", str(summary.total_payments))
    table.add_row("Total Interest", fmt(summary.total_interest))
    table.add_row("Total Paid", fmt(summary.total_paid))
    if income_based is not None:
        table.add_row("Income-based Payment", fmt(income_based))
    if forgiveness is not None:
        table.add_row("", "")
        table.add_row("Paid Before Forgiveness", fmt(forgiveness.total_paid))
        table.add_row("Balance Forgiven", f"[bold green]{fmt(forgiveness.remaining_balance)}[/bold green]")

    console.print(table)


def _payoff_table(title: str, plan: Sequence[DebtPayoff]) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Order", justify="center")
    table.add_column("Debt", style="dim")
    table.add_column("Payoff", justify="right")
    table.add_column("Interest", justify="right")
    for i, payoff in enumerate(plan, start=1):
        table.add_row(str(i), payoff.name, _months(payoff.months_to_payoff), fmt(payoff.interest_paid))
    return table


def display_debt_plan(
    avalanche: Sequence[DebtPayoff],
    snowball: Sequence[DebtPayoff],
    average_rate: Decimal,
    dti: Optional[Decimal] = None,
) -> None:
    """Display avalanche and snowball payoff orders side by side."""
    display_header("💳 Debt Payoff")

    console.print(_payoff_table("Avalanche (highest rate first)", avalanche))
    console.print(_payoff_table("Snowball (smallest balance first)", snowball))

    ratios = metric_table()
    ratios.add_row("Weighted Average Rate (%)", fmt(average_rate, ".3f"))
    ratios.add_row("Debt-to-Income (%)", fmt(dti))
    console.print(ratios)


def display_savings(
    goal: Optional[SavingsGoal],
    required: Optional[Decimal] = None,
    projection: Optional[InvestmentProjection] = None,
    compounded: Optional[Decimal] = None,
) -> None:
    """Display time to a savings goal and growth over a horizon."""
    display_header("🐖 Savings")

    table = metric_table()
    if goal is None:
        table.add_row("Months to Goal", "[yellow]not reachable[/yellow]")
    else:
        table.add_row("Months to Goal", f"[bold]{goal.months_to_goal}[/bold]")
        table.add_row("Contributions", fmt(goal.total_contributions))
        table.add_row("Interest Earned", fmt(goal.total_interest_earned))
    if required is not None:
        table.add_row("Required Monthly Savings", fmt(required))
    if projection is not None:
        table.add_row("", "")
        table.add_row(f"Value after {projection.years} years", f"[bold green]{fmt(projection.future_value)}[/bold green]")
        table.add_row("Gains", fmt(projection.total_gains))
    if compounded is not None:
        table.add_row("Current Savings Compounded", fmt(compounded))

    console.print(table)


def _category_rows(table: Table, label: str, categories: Sequence[CategorySpending], style: str) -> None:
    for c in categories:
        table.add_row(
            c.category_name,
            fmt(c.budgeted_amount),
            fmt(c.actual_spent),
            fmt(c.variance_percent),
            f"[{style}]{label}[/{style}]",
        )


def display_category_analysis(
    analysis: BudgetAnalysis,
    adjustments: Optional[Sequence[BudgetAdjustment]] = None,
) -> None:
    """Display category spending bands, recommendations and rescaled budgets."""
    display_header("🧾 Category Spending")

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Category", style="dim")
    table.add_column("Budgeted", justify="right")
    table.add_column("Spent", justify="right")
    table.add_column("Variance (%)", justify="right")
    table.add_column("Band")
    _category_rows(table, "over", analysis.overspent_categories, "bold red")
    _category_rows(table, "under", analysis.underspent_categories, "bold green")
    _category_rows(table, "on track", analysis.on_track_categories, "bold yellow")
    table.add_row(
        "[bold]Total[/bold]",
        f"[bold]{fmt(analysis.total_budgeted)}[/bold]",
        f"[bold]{fmt(analysis.total_spent)}[/bold]",
        "",
        "",
    )
    console.print(table)

    for line in analysis.recommendations:
        console.print(f"  • {line}")

    if adjustments:
        rescaled = Table(title="Rescaled Budgets", show_header=True, header_style="bold cyan")
        rescaled.add_column("Category", style="dim")
        rescaled.add_column("Budget", justify="right")
        rescaled.add_column("Change", justify="right")
        for a in adjustments:
            rescaled.add_row(a.category_name, fmt(a.adjusted_budget), fmt(a.difference))
        console.print(rescaled)
