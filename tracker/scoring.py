# =============================================================================
# POLYMARKET WINDOW TRACKER
# Module: tracker/scoring.py
# Purpose: Signed minute-offset between "now" and a window start
# =============================================================================
#
# A window recurs every day, so "start - now" has two candidate
# representations (today's and the adjacent day's occurrence). The
# scorer keeps the one closest to zero, always in [-720, 720].
#
# "Now" comes from a ReferenceClock bound to a real time zone
# (default America/New_York), so daylight-saving changes are handled.
#
# =============================================================================

import logging
from datetime import datetime, date, timezone
from typing import Callable, List, Optional, Sequence, Tuple
from zoneinfo import ZoneInfo

from models.data_models import (
    MarketCandidate,
    ScoredCandidate,
    TimeWindow,
    MINUTES_PER_DAY,
)
from tracker.time_window import parse_time_window

logger = logging.getLogger(__name__)

HALF_DAY_MINUTES = MINUTES_PER_DAY // 2
DEFAULT_TIMEZONE = "America/New_York"


# =============================================================================
# REFERENCE CLOCK
# =============================================================================


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ReferenceClock:
    """
    Clock for the market's reference time zone.

    The now() callable is injectable so tests can freeze time.
    It must return a timezone-aware datetime.
    """

    def __init__(
        self,
        tz_name: str = DEFAULT_TIMEZONE,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self.tz_name = tz_name
        self.tz = ZoneInfo(tz_name)
        self._now = now or _utc_now

    def now_reference(self) -> datetime:
        """Current time in the reference zone."""
        return self._now().astimezone(self.tz)

    def now_local(self) -> datetime:
        """Current time in the host's local zone."""
        return self._now().astimezone()

    def minute_of_day(self) -> int:
        current = self.now_reference()
        return current.hour * 60 + current.minute

    def today(self) -> date:
        """Calendar date in the reference zone."""
        return self.now_reference().date()

    def zone_abbreviation(self) -> str:
        return self.now_reference().tzname() or self.tz_name


# =============================================================================
# SCORING
# =============================================================================


def window_offset(start_minute: int, now_minute: int) -> Tuple[int, int]:
    """
    Signed distance from now to a window start, with day wraparound.

    Args:
        start_minute: Window start, minute-of-day [0, 1440)
        now_minute: Current minute-of-day [0, 1440)

    Returns:
        (diff_minutes, abs_diff) with diff_minutes in [-720, 720]
    """
    diff = start_minute - now_minute
    if diff < -HALF_DAY_MINUTES:
        diff += MINUTES_PER_DAY
    elif diff > HALF_DAY_MINUTES:
        diff -= MINUTES_PER_DAY
    return diff, abs(diff)


def score_candidate(
    candidate: MarketCandidate,
    window: TimeWindow,
    now_minute: int,
) -> ScoredCandidate:
    """Attach the window offset to a candidate with a valid window."""
    diff, abs_diff = window_offset(window.start_minute, now_minute)
    return ScoredCandidate(
        candidate=candidate,
        window=window,
        diff_minutes=diff,
        abs_diff=abs_diff,
    )


def score_candidates(
    candidates: Sequence[MarketCandidate],
    now_minute: int,
) -> List[ScoredCandidate]:
    """
    Parse and score every eligible candidate, preserving input order.

    Candidates that are not accepting orders, or whose title has no
    valid 15-minute window, are excluded.
    """
    scored = []
    skipped_closed = 0
    skipped_window = 0

    for candidate in candidates:
        if not candidate.accepting_orders:
            skipped_closed += 1
            continue

        window = parse_time_window(candidate.question)
        if not window.valid:
            skipped_window += 1
            continue

        scored.append(score_candidate(candidate, window, now_minute))

    logger.debug(
        f"Scored {len(scored)} candidates | "
        f"not_accepting={skipped_closed} | no_window={skipped_window}"
    )
    return scored
