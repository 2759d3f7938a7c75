#!/usr/bin/env python3
"""
Show how the correlation between two markets evolves over time.

Usage:
    python3 scripts/rolling_correlation.py TICKER_A TICKER_B
    python3 scripts/rolling_correlation.py TICKER_A TICKER_B --window 48 --days 14
"""

import argparse
import asyncio
import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from kalshi_correlator.correlation import (
    CorrelationAnalyzer,
    TimeRange,
    align,
    pearson,
    returns,
    rolling,
)
from kalshi_correlator.kalshi_client import KalshiClient


def parse_args():
    parser = argparse.ArgumentParser(description="Rolling return correlation of two markets")
    parser.add_argument("market_a", help="First market ticker")
    parser.add_argument("market_b", help="Second market ticker")
    parser.add_argument("--window", type=int, default=20, help="Rolling window in candles (default: 20)")
    parser.add_argument("--days", type=int, default=30, help="Days of history (default: 30)")
    parser.add_argument("--interval", type=int, default=60, help="Candle width in minutes (default: 60)")
    return parser.parse_args()


async def main():
    args = parse_args()
    client = KalshiClient()
    await client.init()

    # analyze_pair fetches the series; keep them for the rolling view
    fetched = {}

    async def fetch_and_keep(market, time_range, period_interval):
        series = await client.fetch_series(market, time_range, period_interval)
        fetched[market.market_ticker] = series
        return series

    analyzer = CorrelationAnalyzer(fetch_and_keep, period_interval=args.interval)

    try:
        ref_a, ref_b = await asyncio.gather(
            client.get_market_ref(args.market_a),
            client.get_market_ref(args.market_b),
        )
        record = await analyzer.analyze_pair(ref_a, ref_b, TimeRange.last_days(args.days))
    finally:
        await client.close()

    if not record:
        print("Missing price data or not enough overlapping points")
        return 1

    aligned = align(fetched[ref_a.market_ticker], fetched[ref_b.market_ticker])
    returns_a = returns(aligned.prices_a)
    returns_b = returns(aligned.prices_b)

    print(f"{ref_a.market_ticker}: {ref_a.title}")
    print(f"{ref_b.market_ticker}: {ref_b.title}")
    print(f"Aligned points: {record.data_points}")
    print(f"Price level correlation: {pearson(aligned.prices_a, aligned.prices_b):.3f}")
    print(f"Return correlation:      {record.correlation:.3f}\n")

    values = rolling(returns_a, returns_b, args.window)
    if not values:
        print(f"Fewer than {args.window} returns, no rolling values")
        return 0

    # Return i ends at aligned timestamp i + 1
    for offset, value in enumerate(values):
        ts = aligned.timestamps[offset + args.window]
        print(f"{datetime.fromtimestamp(ts):%m/%d %H:%M}  {value:+.3f}")

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
