"""
CLI entry point for cross-event correlation analysis.

Usage:
    python3 -m kalshi_correlator.main [--max-markets N] [--window-size N] [--days N]

Examples:
    # Standard run (top 100 markets, 30 days of hourly candles)
    python3 -m kalshi_correlator.main

    # Only report strong relationships
    python3 -m kalshi_correlator.main --threshold 0.7

    # Show what one market moves with
    python3 -m kalshi_correlator.main --market KXFEDDECISION-25DEC-H0
"""

import argparse
import asyncio
import logging
import os
import sys

from dotenv import load_dotenv

from .correlation import (
    CorrelationAnalyzer,
    InsufficientDataError,
    TimeRange,
    WindowedRunner,
    merge,
)
from .kalshi_client import KALSHI_API_BASE, KalshiClient
from .report import (
    find_correlated_with,
    find_top_correlations,
    format_correlation_table,
    format_top_correlations,
)
from .selection import select_markets

# Load environment variables
load_dotenv()

# Configuration
BASE_PATH = os.getenv("KALSHI_BASE_PATH", KALSHI_API_BASE)
VOLUME_THRESHOLD = int(os.getenv("VOLUME_THRESHOLD", 10000))
MAX_MARKETS = int(os.getenv("MAX_MARKETS", 100))
WINDOW_SIZE = int(os.getenv("WINDOW_SIZE", 50))
EVENT_LIMIT = int(os.getenv("EVENT_LIMIT", 500))
LOOKBACK_DAYS = int(os.getenv("LOOKBACK_DAYS", 30))
PERIOD_INTERVAL = int(os.getenv("PERIOD_INTERVAL", 60))
CORRELATION_THRESHOLD = float(os.getenv("CORRELATION_THRESHOLD", 0.3))
TOP_N = int(os.getenv("TOP_N", 20))

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
    ],
)
logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Find Kalshi markets from different events whose prices move together"
    )
    parser.add_argument(
        "--max-markets",
        type=int,
        default=MAX_MARKETS,
        help=f"Maximum markets to analyze (default: {MAX_MARKETS})",
    )
    parser.add_argument(
        "--window-size",
        type=int,
        default=WINDOW_SIZE,
        help=f"Markets per analysis window (default: {WINDOW_SIZE})",
    )
    parser.add_argument(
        "--volume-threshold",
        type=int,
        default=VOLUME_THRESHOLD,
        help=f"Minimum market volume (default: {VOLUME_THRESHOLD})",
    )
    parser.add_argument(
        "--event-limit",
        type=int,
        default=EVENT_LIMIT,
        help=f"Events to fetch before selecting markets (default: {EVENT_LIMIT})",
    )
    parser.add_argument(
        "--days",
        type=int,
        default=LOOKBACK_DAYS,
        help=f"Days of price history (default: {LOOKBACK_DAYS})",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=CORRELATION_THRESHOLD,
        help=f"Minimum |correlation| to report (default: {CORRELATION_THRESHOLD})",
    )
    parser.add_argument(
        "--top",
        type=int,
        default=TOP_N,
        help=f"Number of top correlations to list (default: {TOP_N})",
    )
    parser.add_argument(
        "--market",
        help="Also list correlations involving this market ticker",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


class CorrelationScanner:
    """
    Orchestrates a full run:
    - Event and market selection from the Kalshi API
    - Windowed pairwise correlation of market returns
    - Merging and console reporting of the results
    """

    def __init__(self, args: argparse.Namespace):
        self.args = args
        self.client = KalshiClient(BASE_PATH)
        self.analyzer = CorrelationAnalyzer(
            self.client.fetch_series, period_interval=PERIOD_INTERVAL
        )
        self.runner = WindowedRunner(self.analyzer, window_size=args.window_size)

    async def run(self) -> int:
        """Run the analysis. Returns the process exit code."""
        await self.client.init()

        try:
            logger.info("Fetching events and markets...")
            events = await self.client.get_events(limit=self.args.event_limit)

            if not events:
                logger.warning("No events found")
                return 0

            markets, skipped_low_volume = select_markets(
                events,
                volume_threshold=self.args.volume_threshold,
                max_markets=self.args.max_markets,
            )

            if skipped_low_volume > 0:
                logger.info(
                    f"Skipped {skipped_low_volume} event(s) with volume <= "
                    f"{self.args.volume_threshold:,}"
                )
            logger.info(f"Collected {len(markets)} markets from unique events")

            time_range = TimeRange.last_days(self.args.days)
            logger.info(
                f"Performing windowed analysis ({self.args.window_size} markets per window)"
            )

            all_correlations = await self.runner.run(markets, time_range)

            window_stats = self.runner.get_stats()
            logger.info(f"Combining results from {window_stats['windows_run']} window(s)...")
            correlations = merge(all_correlations)
            logger.info(f"Total unique correlations: {len(correlations)}")

            self.print_report(correlations)
            return 0

        except InsufficientDataError as e:
            logger.warning(f"Insufficient data for correlation analysis: {e}")
            return 1

        finally:
            await self.client.close()

    def print_report(self, correlations):
        """Print the correlation table and top lists."""
        print()
        print(format_correlation_table(correlations, self.args.threshold))

        print(f"\nTop {self.args.top} Correlations\n")
        print(format_top_correlations(find_top_correlations(correlations, self.args.top)))

        if self.args.market:
            print(f"\nCorrelated with {self.args.market}\n")
            print(
                format_top_correlations(
                    find_correlated_with(self.args.market, correlations, self.args.threshold)
                )
            )

        stats = self.analyzer.get_stats()
        logger.info(
            f"Stats: {stats['series_fetched']} series, "
            f"{stats['fetch_failures']} fetch failures, "
            f"{stats['pairs_evaluated']} pairs evaluated, "
            f"{stats['skipped_same_event']} same-event skipped"
        )


async def main(argv=None) -> int:
    """Entry point for the scanner."""
    args = parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    scanner = CorrelationScanner(args)

    try:
        exit_code = await scanner.run()
    except Exception as e:
        logger.error(f"Error: {e}")
        return 1

    if exit_code == 0:
        logger.info("Analysis complete")
    return exit_code


def run():
    """Console script wrapper."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
