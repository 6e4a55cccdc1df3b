# =============================================================================
# POLYMARKET WINDOW TRACKER
# Module: tracker/loop.py
# Purpose: Polling state machine - when to re-scan, rollover detection
# =============================================================================
#
# STATES:
#   IDLE      no tracked market -> scan every tick, show waiting indicator
#   TRACKING  tracked market    -> scan every scan_seconds, render every tick
#
# The state is an immutable LoopState value threaded through tick().
# tick() is pure apart from the discovery callable it is given, so the
# state machine can be tested without a CLI or a terminal.
#
# ORDERING:
# Within one tick the scan (if any) completes and the new state is in
# place before anything is rendered.
#
# STALE MARKETS:
# A failed or empty scan keeps the last known good market unless
# drop_stale is set.
#
# =============================================================================

import logging
import time
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from collector.discovery import MarketDiscovery, ScanResult
from models.data_models import LoopState, TrackedMarket
from shared.enums import LoopPhase, ScanStatus, TrackingEventType
from shared.logging_config import TrackingEventLogger

logger = logging.getLogger(__name__)


# =============================================================================
# EVENTS
# =============================================================================


@dataclass(frozen=True)
class TrackingEvent:
    """A notification produced by a tick."""
    type: TrackingEventType
    market: Optional[TrackedMarket] = None
    previous_market_id: Optional[str] = None
    message: Optional[str] = None

    @property
    def starts_in_minutes(self) -> Optional[int]:
        """Minutes until the window opens, only for markets not yet open."""
        if self.market is not None and self.market.diff_minutes > 0:
            return self.market.diff_minutes
        return None


@dataclass
class TickOutcome:
    """Result of one tick: the next state and what happened."""
    state: LoopState
    scanned: bool
    scan: Optional[ScanResult] = None
    events: List[TrackingEvent] = field(default_factory=list)

    @property
    def rolled_over(self) -> bool:
        return any(e.type == TrackingEventType.TRACKING_STARTED for e in self.events)


# =============================================================================
# PURE TRANSITIONS
# =============================================================================


def should_scan(state: LoopState, now: float, scan_interval: float) -> bool:
    """Scan when idle, or when the last scan is at least scan_interval old."""
    if state.phase == LoopPhase.IDLE or state.last_scan_time is None:
        return True
    return (now - state.last_scan_time) >= scan_interval


def apply_scan(
    state: LoopState,
    scan: ScanResult,
    now: float,
    drop_stale: bool = False,
) -> Tuple[LoopState, List[TrackingEvent]]:
    """
    Fold a scan result into the loop state.

    Returns:
        (new LoopState, list of TrackingEvent)
    """
    current = state.tracked_market

    if scan.status != ScanStatus.SUCCESS or scan.selection is None:
        event_type = (
            TrackingEventType.SCAN_FAILED
            if scan.status == ScanStatus.ERROR
            else TrackingEventType.SCAN_EMPTY
        )
        event = TrackingEvent(type=event_type, market=current, message=scan.error_message)
        tracked = None if drop_stale else current
        return LoopState(tracked_market=tracked, last_scan_time=now), [event]

    selected = TrackedMarket.from_scored(scan.selection.scored, scan.selection.tier)

    if current is None or current.id != selected.id:
        event = TrackingEvent(
            type=TrackingEventType.TRACKING_STARTED,
            market=selected,
            previous_market_id=current.id if current else None,
        )
        return LoopState(tracked_market=selected, last_scan_time=now), [event]

    # Same market: only the offset moves
    refreshed = replace(current, diff_minutes=selected.diff_minutes)
    event = TrackingEvent(type=TrackingEventType.MARKET_REFRESHED, market=refreshed)
    return LoopState(tracked_market=refreshed, last_scan_time=now), [event]


def tick(
    state: LoopState,
    now: float,
    scan_interval: float,
    discover: Callable[[], ScanResult],
    drop_stale: bool = False,
) -> TickOutcome:
    """
    Advance the state machine by one tick.

    Args:
        state: Current loop state
        now: Monotonic time of this tick (seconds)
        scan_interval: Minimum seconds between scans while tracking
        discover: Performs one scan
        drop_stale: Return to IDLE when a scan finds nothing

    Returns:
        TickOutcome with the next state
    """
    if not should_scan(state, now, scan_interval):
        return TickOutcome(state=state, scanned=False)

    scan = discover()
    new_state, events = apply_scan(state, scan, now, drop_stale=drop_stale)
    return TickOutcome(state=new_state, scanned=True, scan=scan, events=events)


# =============================================================================
# DRIVER
# =============================================================================


@dataclass
class SessionStats:
    """Counters for the closing status message."""
    started_at: datetime = field(default_factory=datetime.now)
    ticks: int = 0
    scans: int = 0
    failed_scans: int = 0
    rollovers: int = 0

    @property
    def duration(self) -> str:
        return str(datetime.now() - self.started_at).split('.')[0]


class TrackingLoop:
    """
    Drives tick() at a fixed refresh period and hands the tracked market
    to the display.

    The display object needs notify(event), render(market), waiting()
    and closing(stats).
    """

    def __init__(
        self,
        discovery: MarketDiscovery,
        display,
        refresh_seconds: float = 5,
        scan_seconds: float = 60,
        drop_stale: bool = False,
        event_logger: Optional[TrackingEventLogger] = None,
        monotonic: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.discovery = discovery
        self.display = display
        self.refresh_seconds = refresh_seconds
        self.scan_seconds = scan_seconds
        self.drop_stale = drop_stale
        self.event_logger = event_logger
        self._monotonic = monotonic
        self._sleep = sleep

        self.state = LoopState()
        self.stats = SessionStats()

    def run_tick(self) -> TickOutcome:
        """Run a single tick: maybe scan, then render."""
        outcome = tick(
            self.state,
            self._monotonic(),
            self.scan_seconds,
            self.discovery.scan,
            drop_stale=self.drop_stale,
        )
        self.state = outcome.state
        self.stats.ticks += 1

        if outcome.scanned:
            self.stats.scans += 1
            if outcome.scan is not None and outcome.scan.status == ScanStatus.ERROR:
                self.stats.failed_scans += 1

        for event in outcome.events:
            self._handle_event(event)

        if self.state.phase == LoopPhase.TRACKING:
            self.display.render(self.state.tracked_market)
        else:
            self.display.waiting()

        return outcome

    def run(self, max_ticks: Optional[int] = None) -> SessionStats:
        """
        Tick until interrupted (or max_ticks is reached).

        The closing message is always shown.
        """
        logger.info(
            f"Tracking loop started | refresh={self.refresh_seconds}s | scan={self.scan_seconds}s"
        )
        try:
            while max_ticks is None or self.stats.ticks < max_ticks:
                self.run_tick()
                if max_ticks is not None and self.stats.ticks >= max_ticks:
                    break
                self._sleep(self.refresh_seconds)
        except KeyboardInterrupt:
            logger.info("Tracking loop interrupted by operator")
        finally:
            logger.info(
                f"Tracking loop stopped | ticks={self.stats.ticks} | scans={self.stats.scans} | "
                f"rollovers={self.stats.rollovers} | duration={self.stats.duration}"
            )
            self.display.closing(self.stats)
        return self.stats

    def _handle_event(self, event: TrackingEvent) -> None:
        if event.type == TrackingEventType.TRACKING_STARTED:
            self.stats.rollovers += 1
            market = event.market
            logger.info(
                f"Now tracking {market.id} (previous={event.previous_market_id}) | "
                f"diff={market.diff_minutes}m | {market.question}"
            )
            if self.event_logger is not None:
                self.event_logger.log_transition(
                    market_id=market.id,
                    question=market.question,
                    window_label=market.window_label,
                    diff_minutes=market.diff_minutes,
                    previous_market_id=event.previous_market_id,
                )
        elif event.type == TrackingEventType.MARKET_REFRESHED:
            logger.debug(f"Still tracking {event.market.id} | diff={event.market.diff_minutes}m")
        elif event.market is not None:
            action = "dropping" if self.drop_stale else "keeping"
            logger.warning(f"Scan {event.type.value}: {action} {event.market.id}")
        self.display.notify(event)
