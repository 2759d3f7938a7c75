"""
Candlestick normalization.

Turns raw Kalshi candles into a validated TimeSeries. Candle prices are
integer cents; series prices are dollars.
"""

from typing import Optional

from .correlation.models import MarketRef, TimeSeries

OHLC_FIELDS = ("open", "high", "low", "close")


def transform_candle(candle: dict) -> dict:
    """
    Make sure a candle has a price.

    Markets without trades in a period come back with a null price. In
    that case fall back to the mid of yes_ask/yes_bid, then to whichever
    side exists, then to a zero price (which build_time_series drops).
    """
    price = candle.get("price")
    if price and price.get("close"):
        return candle

    yes_ask = candle.get("yes_ask")
    yes_bid = candle.get("yes_bid")

    if yes_ask and yes_bid:
        mid = {
            key: ((yes_ask.get(key) or 0) + (yes_bid.get(key) or 0)) / 2
            for key in OHLC_FIELDS
        }
        return {**candle, "price": mid}

    if yes_ask:
        return {**candle, "price": yes_ask}

    if yes_bid:
        return {**candle, "price": yes_bid}

    return {**candle, "price": {key: 0 for key in OHLC_FIELDS}}


def build_time_series(market: MarketRef, candles: list[dict]) -> Optional[TimeSeries]:
    """
    Extract close prices from candles into a TimeSeries.

    Candles with no positive close are dropped. If two candles share a
    timestamp the later one wins.

    Returns:
        TimeSeries, or None if no candle has a usable price
    """
    points: dict[int, tuple[float, int]] = {}

    for candle in candles:
        candle = transform_candle(candle)
        ts = candle.get("end_period_ts")
        close = (candle.get("price") or {}).get("close") or 0

        if ts is None or close <= 0:
            continue

        points[int(ts)] = (close / 100, int(candle.get("volume") or 0))

    if not points:
        return None

    timestamps = sorted(points)
    return TimeSeries(
        market_ticker=market.market_ticker,
        event_ticker=market.event_ticker,
        title=market.title or None,
        event_title=market.event_title,
        timestamps=timestamps,
        close_prices=[points[ts][0] for ts in timestamps],
        volumes=[points[ts][1] for ts in timestamps],
    )
