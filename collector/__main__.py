# =============================================================================
# POLYMARKET WINDOW TRACKER
# Module: collector/__main__.py
# Purpose: Run a single discovery scan and print the scored candidates
# =============================================================================
#
# USAGE:
# python -m collector --asset Bitcoin --limit 50
#
# OPTIONS:
# --asset      Asset name used in the search query
# --limit      Maximum search results (default: 50)
# --timezone   Reference time zone (default: America/New_York)
# --cli        Path or name of the Polymarket CLI
# --verbose    Enable debug logging
#
# =============================================================================

import argparse
import logging
import sys
from zoneinfo import ZoneInfoNotFoundError

from .client import PolymarketCli
from .discovery import MarketDiscovery, DEFAULT_QUERY_TEMPLATE
from shared.enums import ScanStatus
from tracker.scoring import ReferenceClock
from tracker.selector import is_running, is_upcoming
from tracker.time_window import format_minute_of_day


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    format_str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
    )


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="python -m collector",
        description="Polymarket Window Tracker - run one discovery scan",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m collector
  python -m collector --asset Ethereum --limit 100
  python -m collector --verbose

Note: This does NOT start the tracking loop. Use cockpit.py for that.
        """,
    )

    parser.add_argument("--asset", type=str, default="Bitcoin",
                        help="Asset name used in the search query (default: Bitcoin)")
    parser.add_argument("--query-template", type=str, default=DEFAULT_QUERY_TEMPLATE,
                        help="Search query template")
    parser.add_argument("--limit", type=int, default=50,
                        help="Maximum search results (default: 50)")
    parser.add_argument("--timezone", type=str, default="America/New_York",
                        help="Reference time zone (default: America/New_York)")
    parser.add_argument("--cli", type=str, default="polymarket",
                        help="Polymarket CLI binary (default: polymarket)")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable debug logging")

    return parser.parse_args(argv)


def candidate_label(diff_minutes: int, running: bool, upcoming: bool) -> str:
    if running:
        return "RUNNING"
    if upcoming:
        return f"in {diff_minutes}m"
    return f"{-diff_minutes}m ago"


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    setup_logging(verbose=args.verbose)
    logger = logging.getLogger(__name__)

    try:
        cli = PolymarketCli(binary=args.cli)
        clock = ReferenceClock(args.timezone)
        discovery = MarketDiscovery(
            cli=cli,
            clock=clock,
            asset=args.asset,
            query_template=args.query_template,
            search_limit=args.limit,
        )

        result = discovery.scan()

        print("\n" + "=" * 60)
        print("DISCOVERY SCAN")
        print("=" * 60)
        print(f"Query:       {result.query}")
        print(f"Now:         {format_minute_of_day(result.now_minute)} {clock.zone_abbreviation()}")
        print(f"Status:      {result.status.value}")
        print(f"Fetched:     {result.total_fetched}")
        print(f"Rejected:    {result.total_rejected}")
        print(f"Eligible:    {result.total_scored}")

        if result.status == ScanStatus.ERROR:
            print(f"Error:       {result.error_message}")
            print("=" * 60)
            return 1

        if result.selection is not None:
            chosen = result.selection.scored
            print()
            print(f"Selected ({result.selection.tier.value}):")
            print(f"  {chosen.candidate.question}")
            print(f"  id={chosen.candidate.id} diff={chosen.diff_minutes}m")

            print()
            print("Eligible candidates:")
            for scored in result.scored:
                label = candidate_label(
                    scored.diff_minutes, is_running(scored), is_upcoming(scored)
                )
                print(f"  [{label:>9}] {scored.candidate.question}")
        else:
            print("\nNo active market found.")

        print("=" * 60)
        return 0

    except ZoneInfoNotFoundError:
        logger.error(f"Unknown time zone: {args.timezone}")
        return 1

    except KeyboardInterrupt:
        logger.info("Scan interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
