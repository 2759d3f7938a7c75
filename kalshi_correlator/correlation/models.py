"""
Value types shared by the correlation engine.

Raw API payloads never get past the fetch layer; everything the engine
sees is one of these.
"""

import time
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class MarketRef:
    """A market selected for analysis, identified before any data is fetched."""

    event_ticker: str
    market_ticker: str
    series_ticker: str = ""
    title: str = ""
    event_title: Optional[str] = None
    volume: int = 0


@dataclass(frozen=True)
class TimeRange:
    """Inclusive range of unix timestamps (seconds)."""

    start_ts: int
    end_ts: int

    @classmethod
    def last_days(cls, days: int, now: Optional[int] = None) -> "TimeRange":
        end_ts = int(now if now is not None else time.time())
        return cls(start_ts=end_ts - days * 24 * 60 * 60, end_ts=end_ts)


@dataclass
class TimeSeries:
    """
    Close prices of one market, one point per candle.

    Prices are in dollars. Timestamps must be strictly increasing and
    every price positive; candles without a usable price are dropped
    before a TimeSeries is built.
    """

    market_ticker: str
    event_ticker: str
    title: Optional[str] = None
    event_title: Optional[str] = None
    timestamps: list[int] = field(default_factory=list)
    close_prices: list[float] = field(default_factory=list)
    volumes: list[int] = field(default_factory=list)

    def __post_init__(self):
        if not (len(self.timestamps) == len(self.close_prices) == len(self.volumes)):
            raise ValueError(
                f"{self.market_ticker}: timestamps, prices and volumes differ in length"
            )

        for prev, cur in zip(self.timestamps, self.timestamps[1:]):
            if cur <= prev:
                raise ValueError(
                    f"{self.market_ticker}: timestamps not strictly increasing at {cur}"
                )

        for price in self.close_prices:
            if price <= 0:
                raise ValueError(f"{self.market_ticker}: non-positive price {price}")

    def __len__(self) -> int:
        return len(self.timestamps)


@dataclass
class AlignedPair:
    """Prices of two markets at the timestamps they have in common."""

    prices_a: list[float]
    prices_b: list[float]
    timestamps: list[int]

    def __len__(self) -> int:
        return len(self.timestamps)


@dataclass
class CorrelationRecord:
    """Return correlation between two markets."""

    market_a: str
    market_b: str
    correlation: float
    data_points: int
    event_title_a: Optional[str] = None
    event_title_b: Optional[str] = None
    p_value: Optional[float] = None  # Not computed

    def pair_key(self) -> tuple[str, str]:
        """Order-independent identity of the pair."""
        if self.market_a < self.market_b:
            return (self.market_a, self.market_b)
        return (self.market_b, self.market_a)


@dataclass
class PairOutcome:
    """Result of evaluating one pair: a record, or the reason it was skipped."""

    market_a: str
    market_b: str
    record: Optional[CorrelationRecord] = None
    skip_reason: Optional[str] = None  # 'same_event', 'insufficient_overlap', 'empty_returns'
