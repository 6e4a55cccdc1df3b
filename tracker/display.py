# =============================================================================
# POLYMARKET WINDOW TRACKER
# Module: tracker/display.py
# Purpose: Fetch live prices for the tracked market and render them
# =============================================================================
#
# MODES:
#   full     multi-line panel, both clocks, raw order book
#   compact  one line per tick
#   json     raw order-book payload, unmodified, one per tick
#
# Prices are fetched on every tick, independent of the scan cadence.
# A midpoint that does not parse falls back to 0.5 (neutral).
#
# =============================================================================

import logging
import re
import sys
from typing import Optional, TextIO

from collector.client import PolymarketCli
from models.data_models import MarketQuote, TrackedMarket, DEFAULT_MIDPOINT, WINDOW_LENGTH_MINUTES
from shared.enums import Bias, OutputMode, TrackingEventType
from tracker.scoring import ReferenceClock, window_offset

logger = logging.getLogger(__name__)

NUMBER_PATTERN = re.compile(r"-?\d+(?:\.\d+)?")
RULE_WIDTH = 50


# =============================================================================
# TERMINAL COLORS
# =============================================================================

class C:
    """Terminal colors."""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    CYAN = "\033[96m"

    @classmethod
    def disable(cls):
        for attr in dir(cls):
            if attr.isupper() and not attr.startswith('_'):
                setattr(cls, attr, "")


BIAS_MARKERS = {
    Bias.YES: ("▲", "GREEN"),
    Bias.NO: ("▼", "RED"),
    Bias.NEUTRAL: ("•", "YELLOW"),
}


# =============================================================================
# PARSING
# =============================================================================

def parse_decimal(text: Optional[str]) -> Optional[float]:
    """
    Pull the decimal value out of CLI text such as "Midpoint: 0.525".

    The last number in the text wins, so a leading label is ignored.
    Returns None when there is no number.
    """
    if not text:
        return None
    matches = NUMBER_PATTERN.findall(text)
    if not matches:
        return None
    try:
        return float(matches[-1])
    except ValueError:
        return None


def parse_midpoint(text: Optional[str]) -> float:
    """Midpoint probability; DEFAULT_MIDPOINT when unparseable or outside [0, 1]."""
    value = parse_decimal(text)
    if value is None or not 0.0 <= value <= 1.0:
        return DEFAULT_MIDPOINT
    return value


def fetch_quote(cli: PolymarketCli, market: TrackedMarket, with_book: bool = False) -> MarketQuote:
    """
    Fetch midpoint and spread (and optionally the book) for the YES token.

    Failed fetches yield default values, never an exception.
    """
    token = market.yes_token

    midpoint_result = cli.midpoint(token)
    midpoint_raw = midpoint_result.stdout.strip() if midpoint_result.success else None

    spread_result = cli.spread(token)
    spread_raw = spread_result.stdout.strip() if spread_result.success else None

    book = None
    if with_book:
        book_result = cli.book(token)
        book = book_result.stdout.rstrip() if book_result.success else None

    return MarketQuote(
        token_id=token,
        midpoint=parse_midpoint(midpoint_raw),
        spread=parse_decimal(spread_raw),
        book=book,
        midpoint_raw=midpoint_raw,
        spread_raw=spread_raw,
    )


# =============================================================================
# FORMATTING
# =============================================================================

def format_bias(bias: Bias) -> str:
    marker, color = BIAS_MARKERS[bias]
    return f"{getattr(C, color)}{marker} {bias.value}{C.RESET}"


def format_spread(spread: Optional[float]) -> str:
    return f"{spread:.3f}" if spread is not None else "n/a"


def describe_offset(diff_minutes: int) -> str:
    """Human wording for a window offset."""
    if diff_minutes > 0:
        return f"starts in {diff_minutes} min"
    if diff_minutes == 0:
        return "started just now"
    return f"started {-diff_minutes} min ago"


def format_compact(market: TrackedMarket, quote: MarketQuote, clock: ReferenceClock) -> str:
    """Single-line rendering."""
    now = clock.now_reference()
    return (
        f"{C.DIM}{now.strftime('%H:%M:%S')} {clock.zone_abbreviation()}{C.RESET} | "
        f"{market.question} | "
        f"{C.BOLD}YES {quote.midpoint_pct:.1f}%{C.RESET} {format_bias(quote.bias)} | "
        f"spread {format_spread(quote.spread)}"
    )


def format_full(
    market: TrackedMarket,
    quote: MarketQuote,
    clock: ReferenceClock,
    notice: Optional[str] = None,
) -> str:
    """Multi-line panel rendering."""
    local = clock.now_local()
    reference = clock.now_reference()
    now_minute = reference.hour * 60 + reference.minute

    lines = [
        f"{C.BOLD}{C.CYAN}{'=' * RULE_WIDTH}{C.RESET}",
        f"{C.BOLD}{C.CYAN}   POLYMARKET WINDOW TRACKER{C.RESET}",
        f"{C.BOLD}{C.CYAN}{'=' * RULE_WIDTH}{C.RESET}",
        f"  Local:   {local.strftime('%Y-%m-%d %H:%M:%S %Z')}",
        f"  {clock.zone_abbreviation():<7}  {reference.strftime('%Y-%m-%d %H:%M:%S')}",
        f"{C.DIM}{'-' * RULE_WIDTH}{C.RESET}",
        f"  {C.BOLD}{market.question}{C.RESET}",
        f"  {C.DIM}id {market.id}{C.RESET}",
    ]

    window = market.window
    if window is not None and window.valid:
        diff, _ = window_offset(window.start_minute, now_minute)
        parts = [window.label, describe_offset(diff)]
        minutes_left = window.minutes_left(now_minute)
        if minutes_left is not None:
            parts.append(f"{minutes_left} min left")
        elif diff < 0:
            parts.append(f"ended {-diff - WINDOW_LENGTH_MINUTES} min ago")
        lines.append("  Window:  " + " | ".join(parts))
    else:
        lines.append(f"  Window:  {describe_offset(market.diff_minutes)}")

    lines.extend([
        f"{C.DIM}{'-' * RULE_WIDTH}{C.RESET}",
        f"  YES:     {C.BOLD}{quote.midpoint_pct:.1f}%{C.RESET}  {format_bias(quote.bias)}",
        f"  Spread:  {format_spread(quote.spread)}",
        f"{C.DIM}{'-' * RULE_WIDTH}{C.RESET}",
        "  Order book:",
    ])

    if quote.book:
        lines.extend(f"  {line}" for line in quote.book.splitlines())
    else:
        lines.append(f"  {C.DIM}(unavailable){C.RESET}")

    if notice:
        lines.extend([f"{C.DIM}{'-' * RULE_WIDTH}{C.RESET}", f"  {C.YELLOW}{notice}{C.RESET}"])

    lines.append(f"\n{C.DIM}Press Ctrl+C to stop{C.RESET}")
    return "\n".join(lines)


def format_notice(event_type: TrackingEventType, market: Optional[TrackedMarket]) -> Optional[str]:
    """Operator-facing text for a tracking event, or None if silent."""
    if event_type == TrackingEventType.TRACKING_STARTED and market is not None:
        text = f"Now tracking: {market.question}"
        if market.diff_minutes > 0:
            text += f" (starts in {market.diff_minutes} minutes)"
        return text
    if event_type == TrackingEventType.SCAN_FAILED and market is not None:
        return "Market scan failed - showing last known market"
    return None


# =============================================================================
# DISPLAY ADAPTER
# =============================================================================

class DisplayAdapter:
    """
    Renders the tracked market for one output mode.

    Used by TrackingLoop through notify(), render(), waiting() and closing().
    """

    def __init__(
        self,
        cli: PolymarketCli,
        clock: ReferenceClock,
        mode: OutputMode = OutputMode.FULL,
        out: Optional[TextIO] = None,
        clear_screen: bool = True,
    ):
        self.cli = cli
        self.clock = clock
        self.mode = mode
        self.out = out or sys.stdout
        self.clear_screen = clear_screen
        self.last_notice: Optional[str] = None

    def _write(self, text: str, end: str = "\n") -> None:
        self.out.write(text + end)
        self.out.flush()

    def notify(self, event) -> None:
        """Show a tracking notification (log-only in json mode)."""
        notice = format_notice(event.type, event.market)
        # a silent event supersedes the previous notice
        self.last_notice = notice
        if notice is None:
            return
        if self.mode == OutputMode.JSON:
            logger.info(notice)
        elif self.mode == OutputMode.COMPACT:
            self._write(f"{C.CYAN}>> {notice}{C.RESET}")
        # full mode shows the notice inside the next panel

    def render(self, market: TrackedMarket) -> None:
        """Fetch live data for the market and draw it."""
        if self.mode == OutputMode.JSON:
            result = self.cli.book(market.yes_token, as_json=True)
            if result.success:
                self._write(result.stdout.rstrip())
            else:
                logger.warning(f"Book fetch failed for {market.id}: {result.error_message}")
            return

        quote = fetch_quote(self.cli, market, with_book=self.mode == OutputMode.FULL)

        if self.mode == OutputMode.COMPACT:
            self._write(format_compact(market, quote, self.clock))
            return

        if self.clear_screen:
            self._write("\033[2J\033[H", end="")
        self._write(format_full(market, quote, self.clock, notice=self.last_notice))
        self.last_notice = None

    def waiting(self) -> None:
        """Idle indicator."""
        if self.mode == OutputMode.JSON:
            logger.info("Waiting for an active market...")
            return
        now = self.clock.now_reference().strftime('%H:%M:%S')
        self._write(f"{C.DIM}{now} {self.clock.zone_abbreviation()}{C.RESET} "
                    f"{C.YELLOW}Waiting for an active market...{C.RESET}")

    def closing(self, stats) -> None:
        """Final status message."""
        if self.mode == OutputMode.JSON:
            logger.info(f"Stopped after {stats.ticks} ticks")
            return
        self._write(f"\n{C.YELLOW}Tracker stopped{C.RESET}")
        self._write(f"  Ticks:      {stats.ticks}")
        self._write(f"  Scans:      {stats.scans}")
        self._write(f"  Rollovers:  {stats.rollovers}")
        self._write(f"  Duration:   {stats.duration}")
