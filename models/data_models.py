# =============================================================================
# POLYMARKET WINDOW TRACKER
# Module: models/data_models.py
# Purpose: Data structures for the discovery and tracking pipeline
# =============================================================================
#
# All models are immutable (frozen=True). A scan produces fresh
# MarketCandidate / ScoredCandidate values every cycle; only LoopState
# survives between ticks, and it is replaced, never mutated.
#
# TIME MODEL:
# Windows are recurring daily intervals expressed as minute-of-day
# in the reference time zone (0..1439). They are NOT timestamps.
#
# =============================================================================

from dataclasses import dataclass, asdict
from typing import Optional, List, Dict, Any

from shared.enums import LoopPhase, SelectionTier, Bias

MINUTES_PER_DAY = 1440
WINDOW_LENGTH_MINUTES = 15


# =============================================================================
# TIME WINDOW
# =============================================================================


@dataclass(frozen=True)
class TimeWindow:
    """
    A recurring daily interval embedded in a market title.

    If valid, (end_minute - start_minute) mod 1440 == 15.
    Invalid windows carry no minutes.
    """
    valid: bool
    start_minute: Optional[int] = None
    end_minute: Optional[int] = None
    label: Optional[str] = None  # matched text, e.g. "1:00PM-1:15PM ET"

    @classmethod
    def invalid(cls, label: Optional[str] = None) -> "TimeWindow":
        return cls(valid=False, label=label)

    def minutes_left(self, now_minute: int) -> Optional[int]:
        """Minutes until the window ends; None unless the window is open at now_minute."""
        if not self.valid:
            return None
        elapsed = (now_minute - self.start_minute) % MINUTES_PER_DAY
        if elapsed >= WINDOW_LENGTH_MINUTES:
            return None
        return WINDOW_LENGTH_MINUTES - elapsed


# =============================================================================
# MARKET CANDIDATE
# =============================================================================


@dataclass(frozen=True)
class MarketCandidate:
    """
    One search result from the collaborator.

    Strict schema - validated on creation. Immutable once fetched.
    """
    id: str
    question: str
    accepting_orders: bool
    yes_token: str
    no_token: str

    def __post_init__(self):
        """Validate candidate on creation."""
        errors = self.validate()
        if errors:
            raise ValueError(f"Invalid MarketCandidate: {'; '.join(errors)}")

    def validate(self) -> List[str]:
        """Validate all fields. Returns list of errors."""
        errors = []

        if not isinstance(self.id, str) or not self.id:
            errors.append("id is required")

        if not isinstance(self.question, str) or not self.question.strip():
            errors.append("question is required")

        if not isinstance(self.accepting_orders, bool):
            errors.append(
                f"accepting_orders must be bool, got {type(self.accepting_orders).__name__}"
            )

        for name in ("yes_token", "no_token"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                errors.append(f"{name} is required")

        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for logging."""
        return asdict(self)


@dataclass(frozen=True)
class RejectedItem:
    """A search result that failed schema validation."""
    index: int
    reason: str
    market_id: Optional[str] = None


# =============================================================================
# SCORING / SELECTION
# =============================================================================


@dataclass(frozen=True)
class ScoredCandidate:
    """
    A candidate with its window and its signed distance to now.

    diff_minutes is in [-720, 720]: negative means the window started
    in the past, positive means it starts in the future.
    """
    candidate: MarketCandidate
    window: TimeWindow
    diff_minutes: int
    abs_diff: int


@dataclass(frozen=True)
class TrackedMarket:
    """The market the loop is currently following."""
    id: str
    question: str
    yes_token: str
    no_token: str
    diff_minutes: int
    window: Optional[TimeWindow] = None
    tier: Optional[SelectionTier] = None

    @classmethod
    def from_scored(
        cls,
        scored: ScoredCandidate,
        tier: Optional[SelectionTier] = None,
    ) -> "TrackedMarket":
        candidate = scored.candidate
        return cls(
            id=candidate.id,
            question=candidate.question,
            yes_token=candidate.yes_token,
            no_token=candidate.no_token,
            diff_minutes=scored.diff_minutes,
            window=scored.window,
            tier=tier,
        )

    @property
    def window_label(self) -> Optional[str]:
        return self.window.label if self.window else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for logging."""
        return {
            "id": self.id,
            "question": self.question,
            "yes_token": self.yes_token,
            "no_token": self.no_token,
            "diff_minutes": self.diff_minutes,
            "window": self.window_label,
            "tier": self.tier.value if self.tier else None,
        }


# =============================================================================
# LOOP STATE
# =============================================================================


@dataclass(frozen=True)
class LoopState:
    """
    State threaded through each tick of the tracking loop.

    last_scan_time is a monotonic timestamp (seconds), None before the
    first scan.
    """
    tracked_market: Optional[TrackedMarket] = None
    last_scan_time: Optional[float] = None

    @property
    def phase(self) -> LoopPhase:
        if self.tracked_market is None:
            return LoopPhase.IDLE
        return LoopPhase.TRACKING


# =============================================================================
# LIVE QUOTE
# =============================================================================


# Midpoint thresholds for the bias flag
YES_BIAS_THRESHOLD = 0.52
NO_BIAS_THRESHOLD = 0.48
DEFAULT_MIDPOINT = 0.5


@dataclass(frozen=True)
class MarketQuote:
    """Live price data for the tracked market's YES token."""
    token_id: str
    midpoint: float
    spread: Optional[float]
    book: Optional[str]
    midpoint_raw: Optional[str] = None
    spread_raw: Optional[str] = None

    @property
    def midpoint_pct(self) -> float:
        """Midpoint as a percentage, one decimal."""
        return round(self.midpoint * 100, 1)

    @property
    def bias(self) -> Bias:
        if self.midpoint > YES_BIAS_THRESHOLD:
            return Bias.YES
        if self.midpoint < NO_BIAS_THRESHOLD:
            return Bias.NO
        return Bias.NEUTRAL
