# =============================================================================
# POLYMARKET WINDOW TRACKER
# Module: models/__init__.py
# Purpose: Package initialization for data models
# =============================================================================
#
# This module exposes all data structures used by the collector and tracker.
# No network calls. No I/O.
#
# =============================================================================

from .data_models import (
    MINUTES_PER_DAY,
    WINDOW_LENGTH_MINUTES,
    TimeWindow,
    MarketCandidate,
    RejectedItem,
    ScoredCandidate,
    TrackedMarket,
    LoopState,
    MarketQuote,
)

__all__ = [
    "MINUTES_PER_DAY",
    "WINDOW_LENGTH_MINUTES",
    "TimeWindow",
    "MarketCandidate",
    "RejectedItem",
    "ScoredCandidate",
    "TrackedMarket",
    "LoopState",
    "MarketQuote",
]
