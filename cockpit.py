#!/usr/bin/env python3
# =============================================================================
# POLYMARKET WINDOW TRACKER - COCKPIT
# =============================================================================
#
# READ-ONLY ENTRY POINT
#
# Follows the live 15-minute "Up or Down" market for an asset, switching
# to the next market as windows roll over. No trading, no positions.
#
# Usage:
#   python cockpit.py                    # Full panel, refresh every 5s
#   python cockpit.py --compact          # One line per tick
#   python cockpit.py --json             # Raw order book per tick
#   python cockpit.py --refresh 2 --scan 30
#   python cockpit.py --doctor           # Check the Polymarket CLI, exit
#
# =============================================================================

import sys
import os
import argparse
import logging
import traceback
from pathlib import Path
from datetime import datetime
from typing import Optional

logger = logging.getLogger("cockpit")

BASE_DIR = Path(__file__).parent
sys.path.insert(0, str(BASE_DIR))

from collector.client import PolymarketCli  # noqa: E402
from collector.discovery import MarketDiscovery  # noqa: E402
from shared.enums import OutputMode  # noqa: E402
from shared.logging_config import setup_logging, TrackingEventLogger  # noqa: E402
from tracker.config import load_config, TrackerConfig  # noqa: E402
from tracker.display import C, DisplayAdapter  # noqa: E402
from tracker.environment import (  # noqa: E402
    detect_release_target,
    ensure_collaborator,
    is_update_available,
    latest_release_tag,
    release_asset_url,
)
from tracker.errors import TrackerSetupError  # noqa: E402
from tracker.loop import TrackingLoop  # noqa: E402
from tracker.scoring import ReferenceClock  # noqa: E402

CRASH_LOG = BASE_DIR / "logs" / "crash.log"


# =============================================================================
# CRASH LOG
# =============================================================================

def _rotate_crash_log():
    """Rotate crash.log if it exceeds 1 MB."""
    if CRASH_LOG.exists() and CRASH_LOG.stat().st_size > 1_000_000:  # 1 MB
        rotated = CRASH_LOG.with_suffix(f".{datetime.now().strftime('%Y%m%d')}.log")
        CRASH_LOG.rename(rotated)


def setup_crash_logger():
    """Install global exception hook that logs crashes to crash.log."""
    def log_crash(exc_type, exc_value, exc_tb):
        try:
            CRASH_LOG.parent.mkdir(parents=True, exist_ok=True)
            _rotate_crash_log()
            with open(CRASH_LOG, "a", encoding="utf-8") as f:
                f.write(f"\n{'='*60}\n")
                f.write(f"CRASH: {datetime.now().isoformat()}\n")
                f.write(f"PID: {os.getpid()}\n")
                traceback.print_exception(exc_type, exc_value, exc_tb, file=f)
        except OSError as e:
            logger.warning("Could not write crash log: %s", e)
        # Still call default handler for console output
        sys.__excepthook__(exc_type, exc_value, exc_tb)
    sys.excepthook = log_crash


# =============================================================================
# OUTPUT HELPERS
# =============================================================================

def print_header(config: TrackerConfig, cli_version: str):
    """Print header."""
    print(f"\n{C.BOLD}{C.CYAN}{'='*50}{C.RESET}")
    print(f"{C.BOLD}{C.CYAN}   POLYMARKET WINDOW TRACKER{C.RESET}")
    print(f"{C.DIM}   Live 15-minute market follower (read-only){C.RESET}")
    print(f"{C.BOLD}{C.CYAN}{'='*50}{C.RESET}")
    print(f"  Asset:    {config.asset}")
    print(f"  Refresh:  {config.refresh_seconds:g}s")
    print(f"  Scan:     {config.scan_seconds:g}s")
    print(f"  Mode:     {config.output_mode.value}")
    print(f"  CLI:      polymarket {cli_version}")
    print(f"\n{C.DIM}Press Ctrl+C to stop{C.RESET}\n")


def print_check(label: str, ok: bool, detail: str):
    """Print one doctor line."""
    status = f"{C.GREEN}OK{C.RESET}" if ok else f"{C.RED}FAIL{C.RESET}"
    print(f"  [{status}] {label:<12} {detail}")


# =============================================================================
# MAIN FUNCTIONS
# =============================================================================

def run_doctor(config: TrackerConfig) -> int:
    """Check platform, CLI and latest release; never installs anything."""
    print(f"\n{C.BOLD}Environment check{C.RESET}")
    print(f"{C.DIM}{'-' * 40}{C.RESET}")

    target = None
    try:
        target = detect_release_target()
        print_check("Platform", True, target)
    except TrackerSetupError as e:
        print_check("Platform", False, str(e))

    version = None
    try:
        path, version = ensure_collaborator(config.cli_binary)
        print_check("CLI", True, f"{path} ({version})")
    except TrackerSetupError as e:
        print_check("CLI", False, str(e).splitlines()[0])

    latest = latest_release_tag()
    if latest is None:
        print_check("Release", False, "could not reach GitHub")
    else:
        print_check("Release", True, f"latest {latest}")
        if is_update_available(version, latest):
            print(f"\n  {C.YELLOW}Update available: {version} -> {latest}{C.RESET}")
            if target:
                print(f"  {C.DIM}{release_asset_url(latest, target)}{C.RESET}")

    print()
    return 0 if version else 1


def run_tracker(config: TrackerConfig, cli_version: str) -> int:
    """Build the pipeline and run the loop until Ctrl+C."""
    cli = PolymarketCli(binary=config.cli_binary, timeout=config.cli_timeout_seconds)
    clock = ReferenceClock(config.timezone)
    discovery = MarketDiscovery(
        cli=cli,
        clock=clock,
        asset=config.asset,
        query_template=config.query_template,
        search_limit=config.search_limit,
    )
    display = DisplayAdapter(cli=cli, clock=clock, mode=config.output_mode)
    event_logger = TrackingEventLogger()

    # full mode clears the screen on every panel; json keeps stdout for payloads
    if config.output_mode == OutputMode.COMPACT:
        print_header(config, cli_version)

    loop = TrackingLoop(
        discovery=discovery,
        display=display,
        refresh_seconds=config.refresh_seconds,
        scan_seconds=config.scan_seconds,
        drop_stale=config.drop_stale_market,
        event_logger=event_logger,
    )
    try:
        loop.run()
    finally:
        event_logger.close()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Polymarket Window Tracker - Cockpit",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python cockpit.py                       Full panel
  python cockpit.py --compact             One line per tick
  python cockpit.py --json                Raw order book per tick
  python cockpit.py --refresh 2 --scan 30 Faster refresh, faster re-scan
  python cockpit.py --asset Ethereum      Track another asset
  python cockpit.py --doctor              Check the Polymarket CLI
"""
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument('--compact', action='store_true',
                      help='One line per tick')
    mode.add_argument('--json', action='store_true',
                      help='Print the raw order-book payload per tick')

    parser.add_argument('--refresh', type=float, default=None,
                        help='Price refresh interval in seconds (default: 5)')
    parser.add_argument('--scan', type=float, default=None,
                        help='Minimum seconds between market re-scans (default: 60)')
    parser.add_argument('--asset', type=str, default=None,
                        help='Asset in the search query (default: Bitcoin)')
    parser.add_argument('--query-template', type=str, default=None,
                        help='Search query template ({asset} {month} {day} {year})')
    parser.add_argument('--limit', type=int, default=None,
                        help='Maximum search results per scan (default: 50)')
    parser.add_argument('--timezone', type=str, default=None,
                        help='Reference time zone (default: America/New_York)')
    parser.add_argument('--cli', type=str, default=None,
                        help='Polymarket CLI binary (default: polymarket)')
    parser.add_argument('--drop-stale', action='store_true', default=None,
                        help='Go idle when a scan finds nothing instead of keeping the last market')
    parser.add_argument('--config', type=Path, default=None,
                        help='YAML config file (default: config/tracker.yaml)')
    parser.add_argument('--doctor', action='store_true',
                        help='Check platform and Polymarket CLI, then exit')
    parser.add_argument('--no-color', action='store_true',
                        help='Disable colors')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Log to the console at DEBUG level')
    return parser


def cli_overrides(args: argparse.Namespace) -> dict:
    """Map parsed flags to config keys; unset flags stay None."""
    output_mode = None
    if args.compact:
        output_mode = OutputMode.COMPACT.value
    elif args.json:
        output_mode = OutputMode.JSON.value

    return {
        "refresh_seconds": args.refresh,
        "scan_seconds": args.scan,
        "output_mode": output_mode,
        "asset": args.asset,
        "query_template": args.query_template,
        "search_limit": args.limit,
        "timezone": args.timezone,
        "cli_binary": args.cli,
        "drop_stale_market": args.drop_stale,
    }


def main(argv: Optional[list] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.no_color or args.json or not sys.stdout.isatty():
        C.disable()

    setup_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        console_output=args.verbose,
        file_output=True,
    )
    setup_crash_logger()

    try:
        config = load_config(config_path=args.config, overrides=cli_overrides(args))
    except TrackerSetupError as e:
        print(f"{C.RED}{e}{C.RESET}", file=sys.stderr)
        return 1

    if args.doctor:
        return run_doctor(config)

    try:
        _, cli_version = ensure_collaborator(config.cli_binary)
    except TrackerSetupError as e:
        logger.error(str(e))
        print(f"{C.RED}{e}{C.RESET}", file=sys.stderr)
        return 1

    return run_tracker(config, cli_version)


if __name__ == "__main__":
    sys.exit(main())
