"""
Tests for picking markets out of the events listing.
"""

from kalshi_correlator.selection import select_markets


def event(ticker, volumes, title=None):
    return {
        "event_ticker": ticker,
        "series_ticker": ticker.split("-")[0],
        "title": title or f"{ticker} title",
        "markets": [
            {"ticker": f"{ticker}-M{i}", "title": f"Market {i}", "volume": v}
            for i, v in enumerate(volumes)
        ],
    }


class TestSelectMarkets:
    """Tests for volume-ordered, one-per-event market selection."""

    def test_sorted_by_event_volume(self):
        events = [event("LOW-1", [20000]), event("HIGH-1", [90000]), event("MID-1", [50000])]
        markets, skipped = select_markets(events, volume_threshold=10000)
        assert [m.event_ticker for m in markets] == ["HIGH-1", "MID-1", "LOW-1"]
        assert skipped == 0

    def test_first_market_above_threshold(self):
        """The first qualifying market is taken, not the biggest one."""
        events = [event("EV-1", [5000, 15000, 80000])]
        markets, _ = select_markets(events, volume_threshold=10000)
        assert [m.market_ticker for m in markets] == ["EV-1-M1"]

    def test_one_market_per_event(self):
        events = [event("EV-1", [50000, 60000]), event("EV-2", [40000, 30000])]
        markets, _ = select_markets(events, volume_threshold=10000)
        assert len({m.event_ticker for m in markets}) == len(markets) == 2

    def test_threshold_is_strict(self):
        events = [event("EV-1", [10000]), event("EV-2", [10001])]
        markets, skipped = select_markets(events, volume_threshold=10000)
        assert [m.event_ticker for m in markets] == ["EV-2"]
        assert skipped == 1

    def test_events_without_markets_ignored(self):
        events = [{"event_ticker": "EMPTY", "markets": []}, {"event_ticker": "NONE"}, event("EV-1", [20000])]
        markets, skipped = select_markets(events, volume_threshold=10000)
        assert [m.event_ticker for m in markets] == ["EV-1"]
        assert skipped == 0

    def test_max_markets(self):
        events = [event(f"EV-{i}", [20000 + i]) for i in range(10)]
        markets, _ = select_markets(events, volume_threshold=10000, max_markets=4)
        assert len(markets) == 4
        assert markets[0].event_ticker == "EV-9"

    def test_market_ref_fields(self):
        markets, _ = select_markets([event("KXFED-25DEC", [20000], title="Fed decision")])
        ref = markets[0]
        assert ref.series_ticker == "KXFED"
        assert ref.event_title == "Fed decision"
        assert ref.title == "Market 0"
        assert ref.volume == 20000
