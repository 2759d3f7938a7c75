"""
Market Correlation Engine

Aligns market price series, correlates their returns pairwise in
bounded windows and merges the results into one set per market pair.
"""

from .analyzer import CorrelationAnalyzer
from .merge import merge
from .models import (
    AlignedPair,
    CorrelationRecord,
    MarketRef,
    PairOutcome,
    TimeRange,
    TimeSeries,
)
from .stats import align, pearson, returns, rolling
from .windows import InsufficientDataError, WindowedRunner, partition

__all__ = [
    "AlignedPair",
    "CorrelationAnalyzer",
    "CorrelationRecord",
    "InsufficientDataError",
    "MarketRef",
    "PairOutcome",
    "TimeRange",
    "TimeSeries",
    "WindowedRunner",
    "align",
    "merge",
    "partition",
    "pearson",
    "returns",
    "rolling",
]
