"""
Budget I/O Writers

Export scenario outputs to XLSX and CSV formats.
"""
from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from pathlib import Path
from typing import Optional

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils.dataframe import dataframe_to_rows

from budget_engine.models import AmortizationEntry, MortgagePayment, ScenarioOutputs

NOT_AVAILABLE = "N/A"


def _value(value: Optional[Decimal]) -> float | str:
    """Decimal to float for tabular output; None becomes N/A."""
    if value is None:
        return NOT_AVAILABLE
    return float(value)


def _create_summary_table(outputs: ScenarioOutputs) -> pd.DataFrame:
    """Create scenario summary table."""
    sections = [
        name
        for name in ("budget", "forecast", "cash_flow", "investment", "loan", "project", "allocation")
        if getattr(outputs, name) is not None
    ]
    data = [
        ["Scenario", outputs.name],
        ["Sections", ", ".join(sections)],
    ]
    return pd.DataFrame(data, columns=["Parameter", "Value"])


def _create_budget_table(outputs: ScenarioOutputs) -> pd.DataFrame:
    """Create variance analysis table."""
    b = outputs.budget
    data = [
        ["Variance", _value(b.variance)],
        ["Variance (%)", _value(b.variance_percentage)],
        ["Status", b.status.value],
        ["Utilization (%)", _value(b.utilization_rate)],
        ["Remaining Budget", _value(b.remaining_budget)],
        ["Burn Rate", _value(b.burn_rate)],
    ]
    return pd.DataFrame(data, columns=["Metric", "Value"])


def _create_forecast_table(outputs: ScenarioOutputs) -> pd.DataFrame:
    """Create forecast table, one row per future period."""
    f = outputs.forecast
    horizon = max(len(f.linear), len(f.exponential_smoothing))
    rows = []
    for i in range(horizon):
        rows.append({
            "Period": i + 1,
            "Linear": _value(f.linear[i]) if i < len(f.linear) else NOT_AVAILABLE,
            "Moving Average": _value(f.moving_average),
            "Exponential Smoothing": (
                _value(f.exponential_smoothing[i]) if i < len(f.exponential_smoothing) else NOT_AVAILABLE
            ),
        })
    return pd.DataFrame(rows, columns=["Period", "Linear", "Moving Average", "Exponential Smoothing"])


def _create_cash_flow_table(outputs: ScenarioOutputs) -> pd.DataFrame:
    """Create per-period cash flow table."""
    cf = outputs.cash_flow
    rows = []
    for i, (net, cumulative, position) in enumerate(zip(cf.net_flows, cf.cumulative, cf.positions), start=1):
        rows.append({
            "Period": i,
            "Net Flow": _value(net),
            "Cumulative": _value(cumulative),
            "Cash Position": _value(position),
        })
    return pd.DataFrame(rows, columns=["Period", "Net Flow", "Cumulative", "Cash Position"])


def _create_liquidity_table(outputs: ScenarioOutputs) -> pd.DataFrame:
    """Create cash flow ratio table."""
    cf = outputs.cash_flow
    data = [
        ["Net Cash Flow", _value(cf.net_cash_flow)],
        ["Free Cash Flow", _value(cf.free_cash_flow)],
        ["Coverage Ratio", _value(cf.coverage_ratio)],
        ["Operating Cash Flow Ratio", _value(cf.operating_cash_flow_ratio)],
        ["Days of Cash on Hand", _value(cf.days_of_cash_on_hand)],
    ]
    return pd.DataFrame(data, columns=["Metric", "Value"])


def _create_investment_table(outputs: ScenarioOutputs) -> pd.DataFrame:
    """Create investment appraisal table."""
    inv = outputs.investment
    data = [
        ["NPV", _value(inv.npv)],
        ["IRR (%)", _value(inv.irr)],
        ["Payback Period", inv.payback_period if inv.payback_period is not None else NOT_AVAILABLE],
        ["Profitability Index", _value(inv.profitability_index)],
        ["ROI (%)", _value(inv.roi)],
    ]
    return pd.DataFrame(data, columns=["Metric", "Value"])


def _create_schedule_table(schedule: Sequence[AmortizationEntry]) -> pd.DataFrame:
    """Create amortization schedule table."""
    rows = []
    for entry in schedule:
        rows.append({
            "Period": entry.period,
            "Payment": float(entry.payment),
            "Principal": float(entry.principal),
            "Interest": float(entry.interest),
            "Balance": float(entry.balance),
        })
    return pd.DataFrame(rows, columns=["Period", "Payment", "Principal", "Interest", "Balance"])


MORTGAGE_COLUMNS = ["Payment #", "Payment", "Principal", "Interest", "Balance", "Cumulative Interest"]


def _create_mortgage_table(schedule: Sequence[MortgagePayment]) -> pd.DataFrame:
    """Create mortgage schedule table with running interest."""
    rows = [
        [
            p.payment_number,
            float(p.payment_amount),
            float(p.principal_portion),
            float(p.interest_portion),
            float(p.remaining_balance),
            float(p.cumulative_interest),
        ]
        for p in schedule
    ]
    return pd.DataFrame(rows, columns=MORTGAGE_COLUMNS)


def _create_project_table(outputs: ScenarioOutputs) -> pd.DataFrame:
    """Create PERT task table with a totals row."""
    p = outputs.project
    rows = []
    for t in p.tasks:
        rows.append({
            "Task": t.name,
            "Estimate": float(t.estimate),
            "Std Dev": float(t.standard_deviation),
        })
    rows.append({
        "Task": "Total",
        "Estimate": float(p.total_estimate),
        "Std Dev": float(p.total_standard_deviation),
    })
    return pd.DataFrame(rows)


def _create_project_summary_table(outputs: ScenarioOutputs) -> pd.DataFrame:
    """Create project roll-up and EVM table."""
    p = outputs.project
    data = [
        ["Confidence Level", p.confidence_level],
        ["Confidence Low", float(p.confidence_low)],
        ["Confidence High", float(p.confidence_high)],
        ["Contingency Reserve", float(p.contingency_reserve)],
        ["Bottom-up Total", float(p.bottom_up_total)],
    ]
    if p.evm is not None:
        evm = p.evm
        data.extend([
            ["---", "---"],
            ["Schedule Variance", _value(evm.schedule_variance)],
            ["Cost Variance", _value(evm.cost_variance)],
            ["SPI", _value(evm.schedule_performance_index)],
            ["CPI", _value(evm.cost_performance_index)],
            ["EAC", _value(evm.estimate_at_completion)],
            ["ETC", _value(evm.estimate_to_complete)],
        ])
    return pd.DataFrame(data, columns=["Item", "Value"])


def _create_allocation_table(outputs: ScenarioOutputs) -> pd.DataFrame:
    """Create allocation and break-even table."""
    a = outputs.allocation
    data = []
    if a.proportional is not None:
        for i, share in enumerate(a.proportional, start=1):
            data.append([f"Share {i}", float(share)])
    if a.priority is not None:
        for line in a.priority:
            data.append([line.name, float(line.amount)])
        data.append(["Unallocated", _value(a.unallocated)])
    data.append(["Break-even Units", _value(a.break_even_units)])
    data.append(["Contribution Margin (%)", _value(a.contribution_margin_ratio)])
    return pd.DataFrame(data, columns=["Item", "Value"])


def format_tables(outputs: ScenarioOutputs) -> dict[str, pd.DataFrame]:
    """
    Convert scenario outputs to display-ready DataFrames.

    Only sections present in the outputs produce tables; names are
    numbered in section order.

    Returns:
        Dict mapping table name to DataFrame
    """
    tables: list[tuple[str, pd.DataFrame]] = [("Summary", _create_summary_table(outputs))]

    if outputs.budget is not None:
        tables.append(("Budget_Variance", _create_budget_table(outputs)))
    if outputs.forecast is not None:
        tables.append(("Forecast", _create_forecast_table(outputs)))
    if outputs.cash_flow is not None:
        tables.append(("Cash_Flows", _create_cash_flow_table(outputs)))
        tables.append(("Liquidity", _create_liquidity_table(outputs)))
    if outputs.investment is not None:
        tables.append(("Investment", _create_investment_table(outputs)))
    if outputs.loan is not None:
        tables.append(("Amortization", _create_schedule_table(outputs.loan.schedule)))
    if outputs.project is not None:
        tables.append(("Project_Tasks", _create_project_table(outputs)))
        tables.append(("Project_Summary", _create_project_summary_table(outputs)))
    if outputs.allocation is not None:
        tables.append(("Allocation", _create_allocation_table(outputs)))

    return {f"{i}_{name}": df for i, (name, df) in enumerate(tables, start=1)}


def _style_xlsx_sheet(ws) -> None:
    """Apply styling to Excel worksheet."""
    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill(start_color="2E75B6", end_color="2E75B6", fill_type="solid")
    thin_border = Border(
        left=Side(style="thin"),
        right=Side(style="thin"),
        top=Side(style="thin"),
        bottom=Side(style="thin"),
    )

    for cell in ws[1]:
        cell.font = header_font
        cell.fill = header_fill
        cell.border = thin_border
        cell.alignment = Alignment(horizontal="center")

    for row in ws.iter_rows(min_row=2, max_row=ws.max_row, max_col=ws.max_column):
        for cell in row:
            cell.border = thin_border
            if isinstance(cell.value, (int, float)):
                cell.number_format = "#,##0.00" if isinstance(cell.value, float) else "#,##0"

    for column in ws.columns:
        max_length = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
        ws.column_dimensions[column[0].column_letter].width = min(max_length + 2, 40)


def _write_workbook(tables: dict[str, pd.DataFrame], path: Path) -> None:
    wb = Workbook()
    wb.remove(wb.active)
    for sheet_name, df in tables.items():
        ws = wb.create_sheet(title=sheet_name[:31])
        for r in dataframe_to_rows(df, index=False, header=True):
            ws.append(r)
        _style_xlsx_sheet(ws)
    wb.save(path)


def export_xlsx(outputs: ScenarioOutputs, path: str | Path) -> None:
    """
    Export scenario outputs to an Excel file, one sheet per table.

    Args:
        outputs: Scenario outputs to export
        path: Output file path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    _write_workbook(format_tables(outputs), path)


def export_schedule_xlsx(schedule: Sequence[AmortizationEntry], path: str | Path) -> None:
    """
    Export an amortization schedule to a single-sheet Excel file.

    Args:
        schedule: Amortization entries in period order
        path: Output file path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    _write_workbook({"Amortization": _create_schedule_table(schedule)}, path)


def export_mortgage_schedule_xlsx(schedule: Sequence[MortgagePayment], path: str | Path) -> None:
    """Export a mortgage payment schedule to a single-sheet Excel file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    _write_workbook({"Mortgage": _create_mortgage_table(schedule)}, path)


def export_csv(outputs: ScenarioOutputs, output_dir: str | Path) -> list[Path]:
    """
    Export scenario outputs to CSV files (one per table).

    Args:
        outputs: Scenario outputs to export
        output_dir: Directory to write CSV files

    Returns:
        List of created file paths
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    tables = format_tables(outputs)
    created_files = []

    for table_name, df in tables.items():
        file_path = output_dir / f"{table_name}.csv"
        df.to_csv(file_path, index=False)
        created_files.append(file_path)

    return created_files
