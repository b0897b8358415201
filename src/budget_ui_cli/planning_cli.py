"""
Personal Finance CLI Commands

`budget plan ...` subcommands for mortgages, refinancing, auto and student
loans, debt payoff, savings goals and category spending. Rates on these
commands are annual percentages (6 = 6%).
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from budget_engine.budget_analysis import analyze_category_spending, recommend_budget_adjustments
from budget_engine.debt import debt_avalanche, debt_snowball, debt_to_income_ratio, weighted_average_rate
from budget_engine.loans import (
    car_loan,
    compare_refinance,
    effective_rate,
    income_based_payment,
    lease_vs_buy,
    loan_forgiveness,
    mortgage_schedule,
    mortgage_summary,
    payoff_acceleration,
    student_loan_with_deferment,
)
from budget_engine.models import DebtItem, PaymentFrequency
from budget_engine.savings import (
    compound_interest_by_frequency,
    investment_projection,
    required_monthly_savings,
    savings_goal,
)
from budget_io.writers import export_mortgage_schedule_xlsx
from budget_ui_cli.planning_display import (
    display_car_loan,
    display_category_analysis,
    display_debt_plan,
    display_mortgage,
    display_mortgage_schedule,
    display_refinance,
    display_savings,
    display_student_loan,
)


app = typer.Typer(
    name="plan",
    help="Personal finance planning: loans, debts, savings and spending",
)
console = Console()


def _split_record(raw: str, fields: int, shape: str) -> list[str]:
    """Split NAME:VALUE:... from the right, so names may contain colons."""
    parts = [part.strip() for part in raw.rsplit(":", fields - 1)]
    if len(parts) != fields or not parts[0]:
        raise typer.BadParameter(f"Expected {shape}, got {raw!r}")
    return parts


def _parse_debt(raw: str) -> DebtItem:
    name, balance, rate, minimum = _split_record(raw, 4, "NAME:BALANCE:RATE:MINIMUM")
    return DebtItem(
        name=name,
        balance=Decimal(balance),
        interest_rate=Decimal(rate),
        minimum_payment=Decimal(minimum),
    )


def _parse_category(raw: str) -> tuple[str, Decimal, Decimal]:
    name, budgeted, spent = _split_record(raw, 3, "NAME:BUDGETED:SPENT")
    return name, Decimal(budgeted), Decimal(spent)


@app.command()
def mortgage(
    principal: str = typer.Option(..., "--principal", "-p", help="Amount borrowed"),
    annual_rate: str = typer.Option(..., "--rate", "-r", help="Annual rate in percent"),
    years: int = typer.Option(30, "--years", "-y", min=1, help="Term in years"),
    frequency: PaymentFrequency = typer.Option(
        PaymentFrequency.MONTHLY,
        "--frequency", "-f",
        case_sensitive=False,
        help="Payment frequency",
    ),
    extra: str = typer.Option("0", "--extra", help="Extra principal paid each period"),
    fees: Optional[str] = typer.Option(None, "--fees", help="Upfront fees, reported as an effective rate"),
    start_date: Optional[datetime] = typer.Option(
        None,
        "--start-date",
        formats=["%Y-%m-%d"],
        help="First payment date, for the payoff date",
    ),
    show_schedule: bool = typer.Option(False, "--schedule", help="Print every payment"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the schedule to an Excel file"),
) -> None:
    """
    Mortgage payment, totals and payoff date.

    With --extra the savings against the regular schedule are shown too.
    """
    try:
        extra_payment = Decimal(extra)
        start = start_date.date() if start_date is not None else None

        summary = mortgage_summary(principal, annual_rate, years, frequency, extra_payment, start)
        acceleration = None
        if extra_payment > 0:
            acceleration = payoff_acceleration(principal, annual_rate, years, frequency, extra_payment)
        effective = effective_rate(principal, annual_rate, fees, years) if fees is not None else None

        display_mortgage(summary, acceleration, effective)

        if show_schedule or output:
            schedule = mortgage_schedule(principal, annual_rate, years, frequency, extra_payment)
            if show_schedule:
                display_mortgage_schedule(schedule)
            if output:
                export_mortgage_schedule_xlsx(schedule, output)
                console.print(f"[green]✓ Schedule written: {output}[/green]")

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def refinance(
    balance: str = typer.Option(..., "--balance", "-b", help="Balance of the current loan"),
    current_rate: str = typer.Option(..., "--rate", "-r", help="Current annual rate in percent"),
    remaining_months: int = typer.Option(..., "--remaining-months", "-m", min=1, help="Payments left on the current loan"),
    new_rate: str = typer.Option(..., "--new-rate", help="Offered annual rate in percent"),
    new_term: int = typer.Option(30, "--new-term", min=1, help="Term of the new loan in years"),
    closing_costs: str = typer.Option("0", "--closing-costs", "-c", help="Closing costs of the new loan"),
) -> None:
    """
    Compare keeping the current mortgage against refinancing it.
    """
    try:
        result = compare_refinance(balance, current_rate, remaining_months, new_rate, new_term, Decimal(closing_costs))
        display_refinance(result)

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def car(
    price: str = typer.Option(..., "--price", help="Vehicle price"),
    annual_rate: str = typer.Option(..., "--rate", "-r", help="Annual rate in percent"),
    months: int = typer.Option(60, "--months", "-n", min=1, help="Loan term in months"),
    down_payment: str = typer.Option("0", "--down", help="Down payment"),
    trade_in: str = typer.Option("0", "--trade-in", help="Trade-in value"),
    sales_tax: str = typer.Option("0", "--tax", help="Sales tax in percent"),
    fees: str = typer.Option("0", "--fees", help="Dealer and registration fees"),
    lease_payment: Optional[str] = typer.Option(None, "--lease-payment", help="Monthly lease payment to compare"),
    lease_months: int = typer.Option(36, "--lease-months", min=1, help="Lease term in months"),
    residual: str = typer.Option("0", "--residual", help="Vehicle value at the end of the loan"),
) -> None:
    """
    Auto loan with tax and fees, optionally compared with a lease.
    """
    try:
        details = car_loan(price, down_payment, trade_in, sales_tax, fees, Decimal(annual_rate), months)
        lease = None
        if lease_payment is not None:
            lease = lease_vs_buy(
                price, Decimal(lease_payment), lease_months, details.monthly_payment, months, Decimal(residual)
            )
        display_car_loan(details, lease)

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def student(
    principal: str = typer.Option(..., "--principal", "-p", help="Amount borrowed"),
    annual_rate: str = typer.Option(..., "--rate", "-r", help="Annual rate in percent"),
    years: int = typer.Option(10, "--years", "-y", min=1, help="Standard repayment term in years"),
    grace_months: int = typer.Option(0, "--grace", min=0, help="Grace period in months"),
    deferment_months: int = typer.Option(0, "--deferment", min=0, help="Deferment in months"),
    income: Optional[str] = typer.Option(None, "--income", help="Annual income, for the income-based payment"),
    family_size: int = typer.Option(1, "--family-size", min=1, help="Household size"),
    discretionary_percent: str = typer.Option("10", "--discretionary-pct", help="Share of discretionary income paid"),
    forgiveness_months: Optional[int] = typer.Option(
        None,
        "--forgiveness-months",
        min=1,
        help="Months until the remaining balance is forgiven",
    ),
) -> None:
    """
    Student loan after grace and deferment, with optional income-based
    repayment and forgiveness.

    Forgiveness is simulated with the income-based payment when --income
    is given and the standard payment otherwise.
    """
    try:
        summary = student_loan_with_deferment(principal, Decimal(annual_rate), grace_months, deferment_months, years)

        income_based = None
        if income is not None:
            income_based = income_based_payment(Decimal(income), family_size, Decimal(discretionary_percent))

        forgiveness = None
        if forgiveness_months is not None:
            payment = income_based if income_based is not None else summary.monthly_payment
            forgiveness = loan_forgiveness(summary.loan_balance, summary.interest_rate, payment, forgiveness_months)

        display_student_loan(summary, income_based, forgiveness)

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def debts(
    debt: List[str] = typer.Option(
        ...,
        "--debt", "-d",
        help="NAME:BALANCE:RATE:MINIMUM, repeat for each debt",
    ),
    extra: str = typer.Option("0", "--extra", help="Extra paid on each debt every month"),
    monthly_income: Optional[str] = typer.Option(None, "--income", help="Gross monthly income, for debt-to-income"),
) -> None:
    """
    Avalanche and snowball payoff plans for a set of debts.
    """
    try:
        items = [_parse_debt(raw) for raw in debt]
        extra_payment = Decimal(extra)

        dti = None
        if monthly_income is not None:
            minimums = sum((item.minimum_payment for item in items), Decimal("0"))
            dti = debt_to_income_ratio(minimums, Decimal(monthly_income))

        display_debt_plan(
            debt_avalanche(items, extra_payment),
            debt_snowball(items, extra_payment),
            weighted_average_rate(items),
            dti,
        )

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def savings(
    target: str = typer.Option(..., "--target", "-t", help="Savings target"),
    monthly: str = typer.Option(..., "--monthly", "-m", help="Monthly contribution"),
    current: str = typer.Option("0", "--current", "-c", help="Current savings"),
    annual_rate: str = typer.Option("0", "--rate", "-r", help="Annual return in percent"),
    years: Optional[int] = typer.Option(None, "--years", "-y", min=1, help="Horizon for projections"),
    compounding: int = typer.Option(12, "--compounding", min=1, help="Compounding periods per year"),
) -> None:
    """
    Months to a savings target; with --years also the contribution needed
    to hit it in time and the value reached by then.
    """
    try:
        rate = Decimal(annual_rate)
        goal = savings_goal(Decimal(target), Decimal(current), Decimal(monthly), rate)

        required = projection = compounded = None
        if years is not None:
            required = required_monthly_savings(Decimal(target), Decimal(current), rate, years)
            projection = investment_projection(Decimal(current), Decimal(monthly), rate, years)
            compounded = compound_interest_by_frequency(Decimal(current), rate, years, compounding)

        display_savings(goal, required, projection, compounded)

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def categories(
    category: List[str] = typer.Option(
        ...,
        "--category", "-k",
        help="NAME:BUDGETED:SPENT, repeat for each category",
    ),
    target_total: Optional[str] = typer.Option(
        None,
        "--target-total",
        help="Rescale category budgets to this total",
    ),
) -> None:
    """
    Spending against budget per category, with recommendations.
    """
    try:
        rows = [_parse_category(raw) for raw in category]
        adjustments = None
        if target_total is not None:
            adjustments = recommend_budget_adjustments(rows, Decimal(target_total))
        display_category_analysis(analyze_category_spending(rows), adjustments)

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
