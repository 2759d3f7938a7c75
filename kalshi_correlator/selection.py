"""
Pick which markets go into a correlation run.

One market per event, highest-volume events first, so that windowed
runs cover the most active markets before anything else.
"""

from .correlation.models import MarketRef

# Configuration defaults
VOLUME_THRESHOLD = 10000  # Minimum market volume
MAX_MARKETS = 100  # Maximum markets to analyze


def _max_market_volume(event: dict) -> int:
    return max((market.get("volume") or 0 for market in event.get("markets") or []), default=0)


def select_markets(
    events: list[dict],
    volume_threshold: int = VOLUME_THRESHOLD,
    max_markets: int = MAX_MARKETS,
) -> tuple[list[MarketRef], int]:
    """
    Collect the first sufficiently traded market from each event.

    Args:
        events: Event dicts from GET /events with nested markets
        volume_threshold: A market must trade strictly more than this
        max_markets: Stop after this many markets

    Returns:
        (markets in descending event-volume order, events skipped for low volume)
    """
    with_markets = [event for event in events if event.get("markets")]
    with_markets.sort(key=_max_market_volume, reverse=True)

    selected = []
    skipped_low_volume = 0

    for event in with_markets:
        if len(selected) >= max_markets:
            break

        market = next(
            (m for m in event["markets"] if (m.get("volume") or 0) > volume_threshold),
            None,
        )
        if market is None:
            skipped_low_volume += 1
            continue

        selected.append(
            MarketRef(
                event_ticker=event.get("event_ticker", ""),
                market_ticker=market.get("ticker", ""),
                series_ticker=event.get("series_ticker", ""),
                title=market.get("title") or market.get("ticker") or "Unknown",
                event_title=event.get("title"),
                volume=market.get("volume") or 0,
            )
        )

    return selected, skipped_low_volume
