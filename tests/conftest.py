import pytest
from kalshi_correlator.correlation.models import MarketRef, TimeRange, TimeSeries

HOUR = 3600

PRICES_UP = [0.50, 0.52, 0.51, 0.55, 0.53, 0.58, 0.56, 0.60, 0.59, 0.62, 0.61, 0.65]
PRICES_UP_2 = [0.30, 0.31, 0.305, 0.33, 0.32, 0.35, 0.34, 0.36, 0.355, 0.37, 0.365, 0.39]
PRICES_DOWN = [0.80, 0.78, 0.79, 0.75, 0.77, 0.72, 0.74, 0.70, 0.71, 0.68, 0.69, 0.66]


def make_series(ticker, event, prices, start=0, event_title=None):
    """Hourly series starting at hour `start`."""
    return TimeSeries(
        market_ticker=ticker,
        event_ticker=event,
        title=ticker,
        event_title=event_title or f"{event} title",
        timestamps=[(start + i) * HOUR for i in range(len(prices))],
        close_prices=list(prices),
        volumes=[100] * len(prices),
    )


def make_ref(ticker, event):
    return MarketRef(event_ticker=event, market_ticker=ticker, series_ticker="SER", title=ticker)


class FakeFetcher:
    """Async fetch function backed by a dict of prepared series."""

    def __init__(self, series=None, failing=()):
        self.series = {s.market_ticker: s for s in (series or [])}
        self.failing = set(failing)
        self.calls = []

    async def __call__(self, market, time_range, period_interval):
        self.calls.append(market.market_ticker)
        if market.market_ticker in self.failing:
            raise ConnectionError(f"connection reset fetching {market.market_ticker}")
        return self.series.get(market.market_ticker)


@pytest.fixture
def time_range():
    return TimeRange(start_ts=0, end_ts=30 * 24 * HOUR)
