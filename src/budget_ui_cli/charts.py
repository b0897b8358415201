"""
Budget Visualizations

Plotly charts for scenario analysis.
"""
from __future__ import annotations

from pathlib import Path

import numpy as np
import plotly.graph_objects as go

from budget_engine.models import ScenarioOutputs


def create_cash_position_chart(outputs: ScenarioOutputs) -> go.Figure:
    """
    Create cash position chart.

    Net flow bars per period with the running cash position as a line.
    """
    cf = outputs.cash_flow
    periods = list(range(1, len(cf.net_flows) + 1))
    net_flows = [float(v) for v in cf.net_flows]

    fig = go.Figure()

    fig.add_trace(go.Bar(
        name="Net Flow",
        x=periods,
        y=net_flows,
        marker_color=["#44AF69" if v >= 0 else "#E94F37" for v in net_flows],
    ))

    fig.add_trace(go.Scatter(
        name="Cash Position",
        x=periods,
        y=[float(v) for v in cf.positions],
        mode="lines+markers",
        line=dict(color="#2E86AB", width=3),
    ))

    fig.update_layout(
        title="Cash Position",
        xaxis_title="Period",
        yaxis_title="Cash",
        template="plotly_white",
        height=400,
        legend=dict(
            orientation="h",
            yanchor="bottom",
            y=1.02,
            xanchor="right",
            x=1
        ),
    )

    return fig


def create_forecast_chart(outputs: ScenarioOutputs) -> go.Figure:
    """
    Create forecast chart.

    Smoothed history followed by the linear and exponential smoothing
    forecasts; the moving average is drawn as a flat reference line.
    """
    f = outputs.forecast
    n_history = len(f.smoothed_history)
    history_x = np.arange(1, n_history + 1)
    horizon = max(len(f.linear), len(f.exponential_smoothing))
    future_x = np.arange(n_history + 1, n_history + horizon + 1)

    fig = go.Figure()

    fig.add_trace(go.Scatter(
        name="Smoothed",
        x=history_x,
        y=[float(v) for v in f.smoothed_history],
        mode="lines",
        line=dict(color="#2E86AB"),
    ))

    if f.linear:
        fig.add_trace(go.Scatter(
            name="Linear",
            x=future_x[:len(f.linear)],
            y=[float(v) for v in f.linear],
            mode="lines+markers",
            line=dict(color="#44AF69", dash="dash"),
        ))

    if f.exponential_smoothing:
        fig.add_trace(go.Scatter(
            name="Exp. Smoothing",
            x=future_x[:len(f.exponential_smoothing)],
            y=[float(v) for v in f.exponential_smoothing],
            mode="lines+markers",
            line=dict(color="#2E86AB", dash="dot"),
        ))

    if horizon:
        fig.add_hline(
            y=float(f.moving_average),
            line_dash="dot",
            line_color="#E94F37",
            annotation_text="Moving Average",
        )

    fig.update_layout(
        title=f"Forecast (trend: {f.trend.value})",
        xaxis_title="Period",
        yaxis_title="Value",
        template="plotly_white",
        height=400,
    )

    return fig


def create_amortization_chart(outputs: ScenarioOutputs) -> go.Figure:
    """
    Create amortization chart.

    Stacked principal/interest per payment with the remaining balance on a
    secondary axis.
    """
    schedule = outputs.loan.schedule
    periods = [e.period for e in schedule]

    fig = go.Figure()

    fig.add_trace(go.Bar(
        name="Principal",
        x=periods,
        y=[float(e.principal) for e in schedule],
        marker_color="#2E86AB",
    ))

    fig.add_trace(go.Bar(
        name="Interest",
        x=periods,
        y=[float(e.interest) for e in schedule],
        marker_color="#E94F37",
    ))

    fig.add_trace(go.Scatter(
        name="Balance",
        x=periods,
        y=[float(e.balance) for e in schedule],
        mode="lines",
        line=dict(color="#44AF69", width=3),
        yaxis="y2",
    ))

    fig.update_layout(
        title="Loan Amortization",
        xaxis_title="Payment",
        yaxis_title="Payment Split",
        yaxis2=dict(title="Balance", overlaying="y", side="right"),
        barmode="stack",
        template="plotly_white",
        height=400,
    )

    return fig


def _build_charts(outputs: ScenarioOutputs) -> dict[str, go.Figure]:
    charts = {}
    if outputs.cash_flow is not None:
        charts["cash_position"] = create_cash_position_chart(outputs)
    if outputs.forecast is not None:
        charts["forecast"] = create_forecast_chart(outputs)
    if outputs.loan is not None:
        charts["amortization"] = create_amortization_chart(outputs)
    return charts


def save_charts(
    outputs: ScenarioOutputs,
    output_dir: str | Path,
    format: str = "html",
) -> list[Path]:
    """
    Generate and save the charts available for the scenario.

    Args:
        outputs: Scenario outputs
        output_dir: Directory to save charts
        format: Output format ("html", "png", "svg")

    Returns:
        List of created file paths
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    created_files = []
    for name, fig in _build_charts(outputs).items():
        file_path = output_dir / f"{name}.{format}"
        if format == "html":
            fig.write_html(str(file_path))
        else:
            fig.write_image(str(file_path))
        created_files.append(file_path)

    return created_files


def show_charts(outputs: ScenarioOutputs) -> None:
    """
    Display all available charts (opens in browser).
    """
    for chart in _build_charts(outputs).values():
        chart.show()
