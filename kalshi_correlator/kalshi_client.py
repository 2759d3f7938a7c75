import logging
import time
from typing import Optional

import aiohttp

from .candles import build_time_series
from .correlation.models import MarketRef, TimeRange, TimeSeries

logger = logging.getLogger(__name__)

KALSHI_API_BASE = "https://api.elections.kalshi.com/trade-api/v2"
EVENTS_PAGE_LIMIT = 200  # Max events per /events page


class KalshiAPIError(Exception):
    """Non-200 response from the Kalshi API."""

    def __init__(self, status: int, url: str, body: str = ""):
        self.status = status
        self.url = url
        self.body = body
        super().__init__(f"Kalshi API returned {status} for {url}: {body[:200]}")


class KalshiClient:
    """
    Reads events and candlesticks from Kalshi's public market data API.

    Only unauthenticated endpoints are used. Transport errors and non-200
    responses raise; empty data is reported as None.
    """

    def __init__(self, base_url: str = KALSHI_API_BASE, timeout: float = 30):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session: Optional[aiohttp.ClientSession] = None

    async def init(self):
        """Initialize the HTTP session."""
        self.session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout),
            headers={"User-Agent": "KalshiCorrelator/1.0"},
        )

    async def close(self):
        """Close the HTTP session."""
        if self.session:
            await self.session.close()
            self.session = None

    async def _get(self, path: str, params: dict) -> dict:
        """GET a path under the API base and return the decoded JSON body."""
        if not self.session:
            await self.init()

        url = f"{self.base_url}{path}"
        start = time.time()

        async with self.session.get(url, params=params) as resp:
            elapsed = time.time() - start
            if resp.status == 200:
                logger.debug(f"GET {path} took {elapsed:.1f}s")
                return await resp.json()

            body = await resp.text()
            if resp.status == 429:
                logger.warning(f"Rate limited on {path} after {elapsed:.1f}s")
            raise KalshiAPIError(resp.status, url, body)

    async def get_events(self, limit: int = 500, status: str = "open") -> list[dict]:
        """
        Fetch events with their nested markets.

        GET /events?with_nested_markets=true

        Follows the cursor until limit events are collected or there are
        no more pages.
        """
        events: list[dict] = []
        cursor = None

        while len(events) < limit:
            params = {
                "limit": min(EVENTS_PAGE_LIMIT, limit - len(events)),
                "status": status,
                "with_nested_markets": "true",
            }
            if cursor:
                params["cursor"] = cursor

            data = await self._get("/events", params)
            page = data.get("events") or []
            events.extend(page)

            cursor = data.get("cursor")
            if not page or not cursor:
                break

        logger.info(f"Fetched {len(events)} events")
        return events

    async def get_market_ref(self, market_ticker: str) -> MarketRef:
        """
        Look up one market and its event.

        GET /markets/{ticker}, then GET /events/{event_ticker} for the
        series ticker the candlestick endpoint needs.
        """
        market = (await self._get(f"/markets/{market_ticker}", {})).get("market") or {}
        event_ticker = market.get("event_ticker", "")
        event = (await self._get(f"/events/{event_ticker}", {})).get("event") or {}

        return MarketRef(
            event_ticker=event_ticker,
            market_ticker=market_ticker,
            series_ticker=event.get("series_ticker", ""),
            title=market.get("title") or market_ticker,
            event_title=event.get("title"),
            volume=market.get("volume") or 0,
        )

    async def get_market_candlesticks(
        self,
        series_ticker: str,
        market_ticker: str,
        start_ts: int,
        end_ts: int,
        period_interval: int = 60,
    ) -> list[dict]:
        """
        Fetch candlesticks for a market.

        GET /series/{series_ticker}/markets/{market_ticker}/candlesticks

        period_interval is the candle width in minutes (1, 60 or 1440).
        """
        data = await self._get(
            f"/series/{series_ticker}/markets/{market_ticker}/candlesticks",
            {
                "start_ts": start_ts,
                "end_ts": end_ts,
                "period_interval": period_interval,
            },
        )
        return data.get("candlesticks") or []

    async def fetch_series(
        self, market: MarketRef, time_range: TimeRange, period_interval: int = 60
    ) -> Optional[TimeSeries]:
        """
        Fetch a market's candles and convert them to a TimeSeries.

        Returns None when the market has no candles or no usable prices.
        """
        candles = await self.get_market_candlesticks(
            market.series_ticker or market.event_ticker,
            market.market_ticker,
            time_range.start_ts,
            time_range.end_ts,
            period_interval,
        )

        if not candles:
            logger.warning(f"No data for {market.market_ticker}")
            return None

        series = build_time_series(market, candles)
        if series is None:
            logger.warning(f"No valid price data for {market.market_ticker}")
            return None

        return series
