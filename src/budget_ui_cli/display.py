"""
Budget CLI Display

Rich table formatting for terminal output.
"""
from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from budget_engine.models import AmortizationEntry, ScenarioOutputs, VarianceStatus


console = Console()

STATUS_STYLES = {
    VarianceStatus.OVER: "bold red",
    VarianceStatus.UNDER: "bold green",
    VarianceStatus.ON_TARGET: "bold yellow",
}


def fmt(value: Optional[Decimal], spec: str = ",.2f") -> str:
    """Format a number for display; None renders as N/A."""
    if value is None:
        return "N/A"
    return format(value, spec)


def display_header(title: str) -> None:
    """Display a section header."""
    console.print()
    console.print(Panel(Text(title, style="bold white"), style="blue"))


def metric_table() -> Table:
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Metric", style="dim")
    table.add_column("Value", justify="right")
    return table


def display_budget(outputs: ScenarioOutputs) -> None:
    """Display variance analysis."""
    display_header("📊 Budget Variance")
    b = outputs.budget

    table = metric_table()
    table.add_row("Variance", fmt(b.variance))
    table.add_row("Variance (%)", fmt(b.variance_percentage))
    status_style = STATUS_STYLES[b.status]
    table.add_row("Status", f"[{status_style}]{b.status.value}[/{status_style}]")
    table.add_row("Utilization (%)", fmt(b.utilization_rate))
    table.add_row("Remaining Budget", fmt(b.remaining_budget))
    table.add_row("Burn Rate", fmt(b.burn_rate))

    console.print(table)


def display_forecast(outputs: ScenarioOutputs) -> None:
    """Display forecasts by method."""
    display_header("📈 Forecast")
    f = outputs.forecast

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Period", justify="center")
    table.add_column("Linear", justify="right")
    table.add_column("Moving Avg", justify="right")
    table.add_column("Exp. Smoothing", justify="right")

    horizon = max(len(f.linear), len(f.exponential_smoothing))
    for i in range(horizon):
        table.add_row(
            f"+{i + 1}",
            fmt(f.linear[i]) if i < len(f.linear) else "N/A",
            fmt(f.moving_average),
            fmt(f.exponential_smoothing[i]) if i < len(f.exponential_smoothing) else "N/A",
        )

    console.print(table)
    console.print(f"  Trend: [bold]{f.trend.value}[/bold]")


def display_cash_flow(outputs: ScenarioOutputs) -> None:
    """Display per-period cash flows and liquidity ratios."""
    display_header("💸 Cash Flow")
    cf = outputs.cash_flow

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Period", justify="center")
    table.add_column("Net Flow", justify="right")
    table.add_column("Cumulative", justify="right")
    table.add_column("Cash Position", justify="right", style="bold green")

    for i, (net, cumulative, position) in enumerate(zip(cf.net_flows, cf.cumulative, cf.positions), start=1):
        table.add_row(str(i), fmt(net), fmt(cumulative), fmt(position))

    console.print(table)

    ratios = metric_table()
    ratios.add_row("Net Cash Flow", fmt(cf.net_cash_flow))
    ratios.add_row("Free Cash Flow", fmt(cf.free_cash_flow))
    ratios.add_row("Coverage Ratio", fmt(cf.coverage_ratio, ".2f"))
    ratios.add_row("Operating Cash Flow Ratio", fmt(cf.operating_cash_flow_ratio, ".2f"))
    ratios.add_row("Days of Cash on Hand", fmt(cf.days_of_cash_on_hand, ",.1f"))
    console.print(ratios)


def display_investment(outputs: ScenarioOutputs) -> None:
    """Display investment appraisal."""
    display_header("🎯 Investment Appraisal")
    inv = outputs.investment

    table = metric_table()
    table.add_row("[bold]NPV[/bold]", f"[bold]{fmt(inv.npv)}[/bold]")
    table.add_row("IRR (%)", fmt(inv.irr, ".4f"))
    table.add_row("Payback Period", str(inv.payback_period) if inv.payback_period is not None else "N/A")
    table.add_row("Profitability Index", fmt(inv.profitability_index, ".4f"))
    table.add_row("ROI (%)", fmt(inv.roi))

    console.print(table)


def display_schedule(schedule: Sequence[AmortizationEntry], title: str = "🏦 Amortization Schedule") -> None:
    """Display an amortization schedule."""
    display_header(title)

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Period", justify="center")
    table.add_column("Payment", justify="right")
    table.add_column("Principal", justify="right")
    table.add_column("Interest", justify="right")
    table.add_column("Balance", justify="right", style="bold blue")

    for entry in schedule:
        table.add_row(
            str(entry.period),
            fmt(entry.payment),
            fmt(entry.principal),
            fmt(entry.interest),
            fmt(entry.balance),
        )

    console.print(table)


def display_loan(outputs: ScenarioOutputs) -> None:
    """Display loan payment and schedule."""
    loan = outputs.loan
    display_schedule(loan.schedule)
    console.print(f"  Monthly payment: [bold]{fmt(loan.payment)}[/bold]")
    console.print(f"  Total interest:  [bold]{fmt(loan.total_interest)}[/bold]")


def display_project(outputs: ScenarioOutputs) -> None:
    """Display PERT estimates and EVM."""
    display_header("🗂 Project Estimate")
    p = outputs.project

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Task", style="dim")
    table.add_column("Estimate", justify="right")
    table.add_column("Std Dev", justify="right")

    for t in p.tasks:
        table.add_row(t.name, fmt(t.estimate), fmt(t.standard_deviation))
    table.add_row(
        "[bold]Total[/bold]",
        f"[bold]{fmt(p.total_estimate)}[/bold]",
        f"[bold]{fmt(p.total_standard_deviation)}[/bold]",
    )
    console.print(table)

    summary = metric_table()
    summary.add_row(
        f"Interval ({p.confidence_level:.0%})",
        f"{fmt(p.confidence_low)} – {fmt(p.confidence_high)}",
    )
    summary.add_row("Contingency Reserve", fmt(p.contingency_reserve))
    summary.add_row("[bold]Bottom-up Total[/bold]", f"[bold green]{fmt(p.bottom_up_total)}[/bold green]")

    if p.evm is not None:
        evm = p.evm
        summary.add_row("", "")
        summary.add_row("Schedule Variance", fmt(evm.schedule_variance))
        summary.add_row("Cost Variance", fmt(evm.cost_variance))
        summary.add_row("SPI", fmt(evm.schedule_performance_index, ".4f"))
        summary.add_row("CPI", fmt(evm.cost_performance_index, ".4f"))
        summary.add_row("EAC", fmt(evm.estimate_at_completion))
        summary.add_row("ETC", fmt(evm.estimate_to_complete))

    console.print(summary)


def display_allocation(outputs: ScenarioOutputs) -> None:
    """Display budget allocation and break-even."""
    display_header("⚖️ Allocation")
    a = outputs.allocation

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim")
    table.add_column("Amount", justify="right")

    if a.proportional is not None:
        for i, share in enumerate(a.proportional, start=1):
            table.add_row(f"Share {i}", fmt(share))
    if a.priority is not None:
        for line in a.priority:
            table.add_row(line.name, fmt(line.amount))
        table.add_row("[bold]Unallocated[/bold]", f"[bold]{fmt(a.unallocated)}[/bold]")
    table.add_row("Break-even Units", fmt(a.break_even_units))
    table.add_row("Contribution Margin (%)", fmt(a.contribution_margin_ratio))

    console.print(table)


def display_all(outputs: ScenarioOutputs) -> None:
    """Display every section present in the outputs."""
    console.print(f"[bold]Scenario:[/bold] {outputs.name}")

    if outputs.budget is not None:
        display_budget(outputs)
    if outputs.forecast is not None:
        display_forecast(outputs)
    if outputs.cash_flow is not None:
        display_cash_flow(outputs)
    if outputs.investment is not None:
        display_investment(outputs)
    if outputs.loan is not None:
        display_loan(outputs)
    if outputs.project is not None:
        display_project(outputs)
    if outputs.allocation is not None:
        display_allocation(outputs)

    console.print()
    console.print("[bold green]✓ Scenario Analysis Complete[/bold green]")
