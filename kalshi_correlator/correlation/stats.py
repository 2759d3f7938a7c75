"""
Alignment and correlation math.

Plain-Python Pearson correlation over price and return sequences. Bad
input never raises here: mismatched or empty sequences give 0.0 so a
single odd pair can't take down a batch run.
"""

import math
from typing import Optional, Sequence

from .models import AlignedPair, TimeSeries

# Fewest shared timestamps worth correlating
MIN_ALIGNED_POINTS = 3

# Relative spread below which a series counts as constant
VARIANCE_TOLERANCE = 1e-12


def align(series_a: TimeSeries, series_b: TimeSeries) -> Optional[AlignedPair]:
    """
    Pair up the prices of two series at their common timestamps.

    Only exact timestamp matches count. Output follows series_b's order.

    Returns:
        AlignedPair, or None if fewer than MIN_ALIGNED_POINTS timestamps overlap
    """
    lookup = dict(zip(series_a.timestamps, series_a.close_prices))

    timestamps = []
    prices_a = []
    prices_b = []

    for ts, price in zip(series_b.timestamps, series_b.close_prices):
        if ts in lookup:
            timestamps.append(ts)
            prices_a.append(lookup[ts])
            prices_b.append(price)

    if len(timestamps) < MIN_ALIGNED_POINTS:
        return None

    return AlignedPair(prices_a=prices_a, prices_b=prices_b, timestamps=timestamps)


def pearson(x: Sequence[float], y: Sequence[float]) -> float:
    """
    Pearson correlation coefficient of two equal-length sequences.

    Returns 0.0 when the lengths differ, either sequence is empty, or
    either sequence has no variance.
    """
    if len(x) != len(y) or len(x) == 0:
        return 0.0

    n = len(x)
    sum_x = sum(x)
    sum_y = sum(y)
    sum_xy = sum(xi * yi for xi, yi in zip(x, y))
    sum_x2 = sum(xi * xi for xi in x)
    sum_y2 = sum(yi * yi for yi in y)

    spread_x = n * sum_x2 - sum_x * sum_x
    spread_y = n * sum_y2 - sum_y * sum_y

    # A constant float series leaves rounding noise here, not exactly zero
    if spread_x <= VARIANCE_TOLERANCE * n * sum_x2 or spread_y <= VARIANCE_TOLERANCE * n * sum_y2:
        return 0.0

    numerator = n * sum_xy - sum_x * sum_y
    return numerator / math.sqrt(spread_x * spread_y)


def returns(prices: Sequence[float]) -> list[float]:
    """Period-over-period relative change. A zero previous price yields 0.0."""
    result = []
    for prev, cur in zip(prices, prices[1:]):
        if prev != 0:
            result.append((cur - prev) / prev)
        else:
            result.append(0.0)
    return result


def rolling(x: Sequence[float], y: Sequence[float], window: int = 20) -> list[float]:
    """
    Pearson correlation over each right-aligned window of the two sequences.

    Returns len(x) - window + 1 values, or an empty list if x is shorter
    than the window.
    """
    if window < 1:
        raise ValueError(f"window must be at least 1, got {window}")

    return [
        pearson(x[end - window:end], y[end - window:end])
        for end in range(window, len(x) + 1)
    ]
