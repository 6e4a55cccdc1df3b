# =============================================================================
# POLYMARKET WINDOW TRACKER
# Module: tracker/selector.py
# Purpose: Three-tier selection of the live market
# =============================================================================
#
# POLICY (evaluated in order):
# 1. RUNNING:  diff in (-15, 0]  -> smallest abs_diff
# 2. UPCOMING: diff > 0          -> smallest diff
# 3. NEAREST:  everything        -> smallest abs_diff
#
# Ties go to the first candidate in input order.
#
# =============================================================================

from dataclasses import dataclass
from typing import Optional, Sequence

from models.data_models import ScoredCandidate, WINDOW_LENGTH_MINUTES
from shared.enums import SelectionTier


@dataclass(frozen=True)
class Selection:
    """The chosen candidate and the rule that chose it."""
    scored: ScoredCandidate
    tier: SelectionTier


def is_running(scored: ScoredCandidate) -> bool:
    """Window started at most 15 minutes ago and is not in the future."""
    return -WINDOW_LENGTH_MINUTES < scored.diff_minutes <= 0


def is_upcoming(scored: ScoredCandidate) -> bool:
    return scored.diff_minutes > 0


def select_market(candidates: Sequence[ScoredCandidate]) -> Optional[Selection]:
    """
    Apply the selection policy.

    Args:
        candidates: Scored, accepting, valid-window candidates

    Returns:
        Selection, or None when there are no candidates
    """
    if not candidates:
        return None

    # min() returns the first minimal element, which keeps ties stable
    running = [c for c in candidates if is_running(c)]
    if running:
        return Selection(min(running, key=lambda c: c.abs_diff), SelectionTier.RUNNING)

    upcoming = [c for c in candidates if is_upcoming(c)]
    if upcoming:
        return Selection(min(upcoming, key=lambda c: c.diff_minutes), SelectionTier.UPCOMING)

    return Selection(min(candidates, key=lambda c: c.abs_diff), SelectionTier.NEAREST)
