"""
Windowed batch runs.

Pair work grows quadratically with the number of markets per call, so
large market lists are analyzed in fixed-size windows, one after another.
"""

import logging
from typing import TypeVar

from .analyzer import CorrelationAnalyzer
from .models import CorrelationRecord, MarketRef, TimeRange

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SIZE = 50  # Markets per analysis window

T = TypeVar("T")


class InsufficientDataError(Exception):
    """Raised when a run has too little input to produce any correlation."""


def partition(items: list[T], window_size: int) -> list[list[T]]:
    """Split items into consecutive slices of at most window_size."""
    if window_size < 1:
        raise ValueError(f"window_size must be at least 1, got {window_size}")

    return [items[i:i + window_size] for i in range(0, len(items), window_size)]


class WindowedRunner:
    """
    Runs the analyzer over consecutive windows of a market list.

    Markets should already be in priority order (e.g. by volume); the
    runner keeps that order so the first windows cover the most important
    markets.
    """

    def __init__(self, analyzer: CorrelationAnalyzer, window_size: int = DEFAULT_WINDOW_SIZE):
        # A window needs two markets to form a pair
        if window_size < 2:
            raise ValueError(f"window_size must be at least 2, got {window_size}")

        self.analyzer = analyzer
        self.window_size = window_size
        self.stats = {
            "windows_total": 0,
            "windows_run": 0,
            "windows_skipped": 0,
        }

    async def run(
        self, markets: list[MarketRef], time_range: TimeRange
    ) -> list[CorrelationRecord]:
        """
        Analyze each window in turn and concatenate the results.

        Windows don't overlap, so the result has no duplicate pairs; use
        merge() when combining several runs.

        Raises:
            InsufficientDataError: fewer than 2 markets, or no usable
                series in any window
        """
        if len(markets) < 2:
            raise InsufficientDataError(
                f"Need at least 2 markets for correlation analysis, got {len(markets)}"
            )

        windows = partition(markets, self.window_size)
        self.stats["windows_total"] += len(windows)

        all_correlations = []
        series_fetched = 0
        start = 0

        for number, window in enumerate(windows, start=1):
            end = start + len(window)

            if len(window) < 2:
                logger.info(f"Window {number}: only {len(window)} market(s), skipping")
                self.stats["windows_skipped"] += 1
                start = end
                continue

            logger.info(
                f"Window {number}/{len(windows)}: analyzing markets {start + 1}-{end}..."
            )

            fetched_before = self.analyzer.get_stats()["series_fetched"]
            correlations = await self.analyzer.analyze_many(window, time_range)
            series_fetched += self.analyzer.get_stats()["series_fetched"] - fetched_before

            all_correlations.extend(correlations)
            self.stats["windows_run"] += 1
            logger.info(f"Found {len(correlations)} correlations in window {number}")
            start = end

        if series_fetched == 0:
            raise InsufficientDataError(
                f"No usable time series fetched for any of {len(markets)} markets"
            )

        return all_correlations

    def get_stats(self) -> dict:
        """Return cumulative runner statistics."""
        return dict(self.stats)
