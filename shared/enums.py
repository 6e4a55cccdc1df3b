# =============================================================================
# POLYMARKET WINDOW TRACKER - SHARED ENUMS
# =============================================================================
#
# These enums define the shared vocabulary across the tracker.
# String values are stable: they appear in log lines and in the
# tracking event log (logs/events/*.jsonl).
#
# =============================================================================

from enum import Enum


class OutputMode(Enum):
    """
    Rendering mode for the tracked market.

    FULL: Multi-line panel with both clocks and the order book.
    COMPACT: One line per tick.
    JSON: Raw order-book payload, passed through unmodified.
    """
    FULL = "full"
    COMPACT = "compact"
    JSON = "json"


class CliResultStatus(Enum):
    """
    Status of a single collaborator CLI call.

    SUCCESS: Process exited 0 and produced output.
    EMPTY: Process exited 0 but printed nothing usable.
    NOT_FOUND: The CLI binary could not be executed.
    TIMEOUT: The call exceeded the configured timeout.
    PROCESS_ERROR: Non-zero exit status or OS-level failure.
    """
    SUCCESS = "SUCCESS"
    EMPTY = "EMPTY"
    NOT_FOUND = "NOT_FOUND"
    TIMEOUT = "TIMEOUT"
    PROCESS_ERROR = "PROCESS_ERROR"


class ScanStatus(Enum):
    """
    Outcome of one market-discovery scan.

    SUCCESS: A market was selected.
    EMPTY: The search worked but no accepting, valid-window market exists.
    ERROR: The search failed or returned something that is not JSON.
    """
    SUCCESS = "SUCCESS"
    EMPTY = "EMPTY"
    ERROR = "ERROR"


class SelectionTier(Enum):
    """Which rule of the selection policy picked the market."""
    RUNNING = "RUNNING"
    UPCOMING = "UPCOMING"
    NEAREST = "NEAREST"


class Bias(Enum):
    """Side favoured by the midpoint price."""
    YES = "YES"
    NO = "NO"
    NEUTRAL = "NEUTRAL"


class LoopPhase(Enum):
    """State of the tracking loop."""
    IDLE = "IDLE"
    TRACKING = "TRACKING"


class TrackingEventType(Enum):
    """
    Notifications emitted by a tick.

    TRACKING_STARTED: A new market id was selected (first pick or rollover).
    MARKET_REFRESHED: The same market was re-selected; only diff_minutes moved.
    SCAN_EMPTY: A scan found nothing to track.
    SCAN_FAILED: A scan could not complete.
    """
    TRACKING_STARTED = "TRACKING_STARTED"
    MARKET_REFRESHED = "MARKET_REFRESHED"
    SCAN_EMPTY = "SCAN_EMPTY"
    SCAN_FAILED = "SCAN_FAILED"
