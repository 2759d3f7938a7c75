"""
Pairwise correlation engine.

Fetches price series for a set of markets, aligns every cross-event pair
on common timestamps and correlates their period returns.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Iterator, Optional

from .models import CorrelationRecord, MarketRef, PairOutcome, TimeRange, TimeSeries
from .stats import align, pearson, returns

logger = logging.getLogger(__name__)

# Configuration defaults
DEFAULT_PERIOD_INTERVAL = 60  # Candle width in minutes
MIN_BATCH_POINTS = 10  # Aligned points required for a pair in a batch run
PROGRESS_EVERY = 10  # Log fetch progress every N markets

FetchSeries = Callable[[MarketRef, TimeRange, int], Awaitable[Optional[TimeSeries]]]


class CorrelationAnalyzer:
    """
    Finds markets with correlated price movements.

    The fetch function is the only way data gets in: it returns a
    TimeSeries, None when the market has no usable data, or raises on
    transport failure.
    """

    def __init__(
        self,
        fetch_series: FetchSeries,
        period_interval: int = DEFAULT_PERIOD_INTERVAL,
        min_batch_points: int = MIN_BATCH_POINTS,
    ):
        """
        Initialize the analyzer.

        Args:
            fetch_series: async (market, time_range, period_interval) -> TimeSeries | None
            period_interval: Candle width in minutes requested for every series
            min_batch_points: Minimum aligned points for a pair in analyze_many
        """
        self.fetch_series = fetch_series
        self.period_interval = period_interval
        self.min_batch_points = min_batch_points

        self.stats = {
            "series_fetched": 0,
            "fetch_failures": 0,
            "pairs_evaluated": 0,
            "correlations_found": 0,
            "skipped_same_event": 0,
            "skipped_insufficient_data": 0,
        }

    async def analyze_pair(
        self,
        market_a: MarketRef,
        market_b: MarketRef,
        time_range: TimeRange,
    ) -> Optional[CorrelationRecord]:
        """
        Analyze correlation between two markets.

        Both series are fetched concurrently. If one fetch raises, the
        other is cancelled and the exception propagates to the caller.

        Returns:
            CorrelationRecord with the return correlation, or None if
            either series is missing or they share fewer than 3 timestamps
        """
        logger.info(
            f"Analyzing correlation between {market_a.market_ticker} and {market_b.market_ticker}"
        )

        fetches = [
            asyncio.ensure_future(self.fetch_series(market, time_range, self.period_interval))
            for market in (market_a, market_b)
        ]

        try:
            series_a, series_b = await asyncio.gather(*fetches)
        except BaseException:
            # Don't leave the other fetch running after the pair is abandoned
            for fetch in fetches:
                fetch.cancel()
            await asyncio.gather(*fetches, return_exceptions=True)
            raise

        if not series_a or not series_b:
            logger.warning("Insufficient data for correlation analysis")
            return None

        aligned = align(series_a, series_b)
        if not aligned:
            logger.warning("Not enough overlapping data points for correlation")
            return None

        # Level correlation is diagnostic only; trending markets inflate it
        price_correlation = pearson(aligned.prices_a, aligned.prices_b)
        logger.debug(
            f"Price level correlation {series_a.market_ticker}/{series_b.market_ticker}: "
            f"{price_correlation:.3f} over {len(aligned)} points"
        )

        returns_a = returns(aligned.prices_a)
        returns_b = returns(aligned.prices_b)
        returns_correlation = pearson(returns_a, returns_b) if returns_a else 0.0

        return CorrelationRecord(
            market_a=series_a.market_ticker,
            market_b=series_b.market_ticker,
            correlation=returns_correlation,
            data_points=len(aligned),
            event_title_a=series_a.event_title,
            event_title_b=series_b.event_title,
        )

    async def fetch_all(
        self, markets: list[MarketRef], time_range: TimeRange
    ) -> list[TimeSeries]:
        """
        Fetch series for each market, one at a time.

        A market whose fetch raises is logged and left out, which drops
        every pair it would have been part of.
        """
        series_list = []
        total = len(markets)

        for i, market in enumerate(markets):
            if i == 0 or i == total - 1 or (i + 1) % PROGRESS_EVERY == 0:
                logger.info(f"Fetching {i + 1}/{total}: {market.market_ticker}...")

            try:
                series = await self.fetch_series(market, time_range, self.period_interval)
            except Exception as e:
                self.stats["fetch_failures"] += 1
                logger.error(f"Error fetching data for {market.market_ticker}: {e}")
                continue

            if series:
                series_list.append(series)

        self.stats["series_fetched"] += len(series_list)
        logger.info(f"Successfully fetched {len(series_list)} time series")
        return series_list

    def iter_correlations(self, series_list: list[TimeSeries]) -> Iterator[PairOutcome]:
        """
        Lazily evaluate every unordered pair of series.

        Yields one PairOutcome per pair, in (i, j) order with i < j.
        """
        for i in range(len(series_list)):
            for j in range(i + 1, len(series_list)):
                series_a = series_list[i]
                series_b = series_list[j]
                self.stats["pairs_evaluated"] += 1

                # Markets of one event move together by construction
                if series_a.event_ticker == series_b.event_ticker:
                    self.stats["skipped_same_event"] += 1
                    yield PairOutcome(
                        series_a.market_ticker, series_b.market_ticker,
                        skip_reason="same_event",
                    )
                    continue

                aligned = align(series_a, series_b)
                if not aligned or len(aligned) < self.min_batch_points:
                    self.stats["skipped_insufficient_data"] += 1
                    yield PairOutcome(
                        series_a.market_ticker, series_b.market_ticker,
                        skip_reason="insufficient_overlap",
                    )
                    continue

                returns_a = returns(aligned.prices_a)
                returns_b = returns(aligned.prices_b)
                if not returns_a or not returns_b:
                    self.stats["skipped_insufficient_data"] += 1
                    yield PairOutcome(
                        series_a.market_ticker, series_b.market_ticker,
                        skip_reason="empty_returns",
                    )
                    continue

                record = CorrelationRecord(
                    market_a=series_a.market_ticker,
                    market_b=series_b.market_ticker,
                    correlation=pearson(returns_a, returns_b),
                    data_points=len(aligned),
                    event_title_a=series_a.event_title,
                    event_title_b=series_b.event_title,
                )
                self.stats["correlations_found"] += 1
                yield PairOutcome(series_a.market_ticker, series_b.market_ticker, record=record)

    async def analyze_many(
        self, markets: list[MarketRef], time_range: TimeRange
    ) -> list[CorrelationRecord]:
        """
        Analyze correlations across multiple markets.

        Pairs from the same event, and pairs with fewer than
        min_batch_points aligned points, are skipped.

        Returns:
            One CorrelationRecord per pair that could be evaluated
        """
        logger.info(f"Analyzing correlations for {len(markets)} markets...")

        series_list = await self.fetch_all(markets, time_range)

        logger.info("Calculating pairwise correlations...")
        correlations = []
        skipped_same_event = 0

        for outcome in self.iter_correlations(series_list):
            if outcome.record:
                correlations.append(outcome.record)
            elif outcome.skip_reason == "same_event":
                skipped_same_event += 1

        if skipped_same_event > 0:
            logger.info(f"Skipped {skipped_same_event} same-event pair(s)")

        return correlations

    def get_stats(self) -> dict:
        """Return cumulative analyzer statistics."""
        return dict(self.stats)
