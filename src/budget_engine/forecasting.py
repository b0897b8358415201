"""
Budget Engine Forecasting

Linear regression, moving average and exponential smoothing forecasts,
plus trend classification of historical series.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from decimal import Decimal

from budget_engine.models import TrendDirection
from budget_engine.numeric import ONE, ZERO, Numeric, to_decimal

logger = logging.getLogger(__name__)

# Mean period-over-period change treated as flat
TREND_DEADBAND = Decimal("0.1")


def linear_forecast(history: Sequence[Numeric], periods_ahead: int) -> list[Decimal]:
    """
    Forecast by ordinary least squares on the period index.

    Fits y = slope * x + intercept with x = 0, 1, ..., n-1, then
    extrapolates to x = n, n+1, ..., n+periods_ahead-1.

    slope = sum((x - x̄)(y - ȳ)) / sum((x - x̄)^2)
    intercept = ȳ - slope * x̄

    Returns:
        periods_ahead forecasts, or [] with fewer than two observations
    """
    values = [to_decimal(v) for v in history]
    n = len(values)
    if n < 2:
        return []

    xs = [Decimal(i) for i in range(n)]
    avg_x = sum(xs) / n
    avg_y = sum(values) / n

    numerator = sum((x - avg_x) * (y - avg_y) for x, y in zip(xs, values))
    denominator = sum((x - avg_x) ** 2 for x in xs)

    slope = ZERO if denominator == ZERO else numerator / denominator
    intercept = avg_y - slope * avg_x

    return [slope * Decimal(n + p - 1) + intercept for p in range(1, periods_ahead + 1)]


def moving_average_forecast(
    history: Sequence[Numeric],
    window_size: int,
    periods_ahead: int,
) -> Decimal:
    """
    Forecast as the mean of the most recent window_size values.

    A single flat value is returned for the whole horizon; periods_ahead is
    accepted for signature parity with the other forecasts but does not
    change the result.

    Returns:
        Window mean, or 0 when history is shorter than the window

    Raises:
        ValueError: If window_size < 1
    """
    if window_size < 1:
        raise ValueError(f"window_size must be at least 1, got {window_size}")
    if len(history) < window_size:
        logger.debug(
            "History of %d values shorter than window %d; forecasting 0",
            len(history), window_size,
        )
        return ZERO

    window = [to_decimal(v) for v in history[-window_size:]]
    return sum(window) / window_size


def smoothed_series(history: Sequence[Numeric], alpha: Numeric) -> list[Decimal]:
    """
    Simple exponential smoothing of a series.

    S_0 = y_0
    S_t = alpha * y_t + (1 - alpha) * S_(t-1)

    Returns:
        Smoothed values, same length as history
    """
    if not history:
        return []

    alpha = to_decimal(alpha)
    weight = ONE - alpha

    smoothed = [to_decimal(history[0])]
    for value in history[1:]:
        smoothed.append(alpha * to_decimal(value) + weight * smoothed[-1])
    return smoothed


def exponential_smoothing(
    history: Sequence[Numeric],
    alpha: Numeric,
    periods_ahead: int,
) -> list[Decimal]:
    """
    Forecast by simple exponential smoothing.

    The last smoothed value is carried flat over the horizon.

    Returns:
        periods_ahead copies of the final smoothed value, or [] for empty history
    """
    smoothed = smoothed_series(history, alpha)
    if not smoothed:
        return []
    return [smoothed[-1]] * periods_ahead


def identify_trend(values: Sequence[Numeric]) -> TrendDirection:
    """
    Classify a series by its mean period-over-period change.

    mean(diff) >  0.1 -> INCREASING
    mean(diff) < -0.1 -> DECREASING
    otherwise         -> STABLE (also for fewer than two values)
    """
    if len(values) < 2:
        return TrendDirection.STABLE

    points = [to_decimal(v) for v in values]
    differences = [b - a for a, b in zip(points, points[1:])]
    avg_diff = sum(differences) / len(differences)

    if avg_diff > TREND_DEADBAND:
        return TrendDirection.INCREASING
    if avg_diff < -TREND_DEADBAND:
        return TrendDirection.DECREASING
    return TrendDirection.STABLE
