"""
Budget CLI Application

Typer-based command-line interface for the budget calculations engine.
"""
from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from budget_engine.engine import ScenarioEngine
from budget_engine.interest import amortization_schedule, loan_payment, total_interest
from budget_engine.models import ScenarioOutputs
from budget_engine.returns import irr as compute_irr
from budget_engine.returns import npv as compute_npv
from budget_io.readers import read_input_file
from budget_io.writers import export_csv, export_schedule_xlsx, export_xlsx
from budget_ui_cli.charts import save_charts, show_charts
from budget_ui_cli.display import display_all, display_schedule, fmt
from budget_ui_cli.planning_cli import app as plan_app


app = typer.Typer(
    name="budget",
    help="Financial calculations for budgeting and planning",
    add_completion=False,
)
app.add_typer(plan_app, name="plan")

console = Console()

LOGGER_NAMES = ("budget_engine", "budget_io", "budget_ui_cli")

SCENARIO_ARGUMENT = typer.Argument(None, help="Scenario file (YAML or JSON)")
SCENARIO_OPTION = typer.Option(None, "--input", "-i", help="Scenario file (YAML or JSON)")


def _configure_logging(verbose: bool) -> None:
    """Route package loggers through rich; DEBUG when verbose."""
    level = logging.DEBUG if verbose else logging.WARNING
    handler = RichHandler(console=console, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        logger.handlers = [h for h in logger.handlers if not isinstance(h, RichHandler)]
        logger.addHandler(handler)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Show debug logging",
    ),
) -> None:
    """Financial calculations for budgeting and planning."""
    _configure_logging(verbose)


def _scenario_path(positional: Optional[Path], option: Optional[Path]) -> Path:
    """Pick the scenario path from --input or the positional argument."""
    path = option or positional
    if path is None:
        raise typer.BadParameter("No scenario file given; pass SCENARIO or --input.")
    if not path.is_file():
        raise typer.BadParameter(f"Scenario file does not exist: {path}")
    return path


def _load_and_run(positional: Optional[Path], option: Optional[Path]) -> ScenarioOutputs:
    path = _scenario_path(positional, option)
    console.print(f"[dim]Scenario: {path}[/dim]")
    return ScenarioEngine(read_input_file(path)).run()


def _write_outputs(
    outputs: ScenarioOutputs,
    xlsx_path: Optional[Path] = None,
    csv_dir: Optional[Path] = None,
    charts_dir: Optional[Path] = None,
) -> None:
    """Write whichever of the XLSX, CSV and chart outputs were requested."""
    if xlsx_path is not None:
        export_xlsx(outputs, xlsx_path)
        console.print(f"[green]✓ Workbook written: {xlsx_path}[/green]")
    if csv_dir is not None:
        written = export_csv(outputs, csv_dir)
        console.print(f"[green]✓ {len(written)} CSV tables written to {csv_dir}[/green]")
    if charts_dir is not None:
        written = save_charts(outputs, charts_dir)
        console.print(f"[green]✓ {len(written)} charts written to {charts_dir}[/green]")


def _parse_decimal_list(raw: str) -> list[Decimal]:
    """Parse a comma-separated list of numbers."""
    try:
        return [Decimal(part.strip()) for part in raw.split(",") if part.strip()]
    except InvalidOperation:
        raise typer.BadParameter(f"Not a comma-separated list of numbers: {raw!r}")


@app.command()
def run(
    scenario: Optional[Path] = SCENARIO_ARGUMENT,
    scenario_option: Optional[Path] = SCENARIO_OPTION,
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Also write an Excel workbook",
    ),
    csv_dir: Optional[Path] = typer.Option(
        None,
        "--csv-dir",
        help="Also write one CSV per table into this directory",
    ),
    charts: bool = typer.Option(
        False,
        "--charts",
        help="Open charts in the browser",
    ),
    charts_dir: Optional[Path] = typer.Option(
        None,
        "--charts-dir",
        help="Also write HTML charts into this directory",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet", "-q",
        help="Do not print result tables",
    ),
) -> None:
    """
    Evaluate every section of a scenario file.

    Results are printed as tables unless --quiet; workbook, CSV and chart
    outputs are written on request.
    """
    try:
        outputs = _load_and_run(scenario, scenario_option)
        if not quiet:
            display_all(outputs)

        _write_outputs(outputs, output, csv_dir, charts_dir)
        if charts:
            show_charts(outputs)

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def validate(
    scenario: Optional[Path] = SCENARIO_ARGUMENT,
    scenario_option: Optional[Path] = SCENARIO_OPTION,
) -> None:
    """
    Check a scenario file without evaluating it.

    Field types come from the input models; cross-section checks run when
    the engine is constructed.
    """
    try:
        inputs = read_input_file(_scenario_path(scenario, scenario_option))
        ScenarioEngine(inputs)

        console.print("[green]✓ Scenario file is valid[/green]")
        console.print(f"  {inputs.name}: {', '.join(inputs.sections)}")

    except Exception as e:
        console.print(f"[red]Validation failed: {e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def export(
    scenario: Optional[Path] = SCENARIO_ARGUMENT,
    scenario_option: Optional[Path] = SCENARIO_OPTION,
    output: Path = typer.Option(
        ...,
        "--output", "-o",
        help="Excel workbook to write",
    ),
    include_csv: bool = typer.Option(
        False,
        "--csv",
        help="Also write CSV tables to a csv/ directory next to the workbook",
    ),
    include_charts: bool = typer.Option(
        False,
        "--charts",
        help="Also write HTML charts to a charts/ directory next to the workbook",
    ),
) -> None:
    """
    Evaluate a scenario and write its results without printing tables.
    """
    try:
        outputs = _load_and_run(scenario, scenario_option)
        _write_outputs(
            outputs,
            xlsx_path=output,
            csv_dir=output.parent / "csv" if include_csv else None,
            charts_dir=output.parent / "charts" if include_charts else None,
        )

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def amortize(
    principal: str = typer.Option(
        ...,
        "--principal", "-p",
        help="Amount borrowed",
    ),
    annual_rate: str = typer.Option(
        ...,
        "--rate", "-r",
        help="Annual interest rate as a fraction (0.06 = 6%)",
    ),
    payments: int = typer.Option(
        ...,
        "--payments", "-n",
        min=1,
        help="Number of monthly payments",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Write the schedule to an Excel file",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet", "-q",
        help="Do not print the schedule table",
    ),
) -> None:
    """
    Print the monthly payment and amortization schedule of a loan.
    """
    try:
        principal_value = Decimal(principal)
        rate_value = Decimal(annual_rate)

        schedule = amortization_schedule(principal_value, rate_value, payments)
        if not quiet:
            display_schedule(schedule)

        console.print(f"\n  Monthly payment: [bold]{fmt(loan_payment(principal_value, rate_value, payments))}[/bold]")
        console.print(f"  Total interest:  [bold]{fmt(total_interest(principal_value, rate_value, payments))}[/bold]")

        if output:
            export_schedule_xlsx(schedule, output)
            console.print(f"[green]✓ Schedule written: {output}[/green]")

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def irr(
    flows: str = typer.Option(
        ...,
        "--flows", "-f",
        help="Comma-separated cash flows from period 0, e.g. -1000,300,400,500",
    ),
    discount_rate: Optional[str] = typer.Option(
        None,
        "--discount-rate", "-d",
        help="Also report NPV at this rate (fraction)",
    ),
) -> None:
    """
    Compute the internal rate of return of a cash flow series.
    """
    try:
        cash_flows = _parse_decimal_list(flows)
        if not cash_flows:
            raise typer.BadParameter("At least one cash flow is required.")

        result = compute_irr(cash_flows)
        if result is None:
            console.print("  IRR: [yellow]N/A (no convergence)[/yellow]")
        else:
            console.print(f"  IRR: [bold]{fmt(result, '.4f')}%[/bold]")

        if discount_rate is not None:
            console.print(f"  NPV: [bold]{fmt(compute_npv(Decimal(discount_rate), cash_flows))}[/bold]")

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
