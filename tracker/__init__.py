# =============================================================================
# POLYMARKET WINDOW TRACKER
# Module: tracker/__init__.py
# Purpose: Window parsing, scoring, selection and the tracking loop
# =============================================================================
#
# Only the pure core is re-exported here. The loop, display, config and
# environment modules pull in the collector and are imported directly:
#
#   from tracker.loop import TrackingLoop
#
# =============================================================================

from .time_window import parse_time_window, to_minute_of_day, format_minute_of_day
from .scoring import ReferenceClock, window_offset, score_candidate, score_candidates
from .selector import Selection, select_market

__all__ = [
    "parse_time_window",
    "to_minute_of_day",
    "format_minute_of_day",
    "ReferenceClock",
    "window_offset",
    "score_candidate",
    "score_candidates",
    "Selection",
    "select_market",
]
