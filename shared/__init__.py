# =============================================================================
# POLYMARKET WINDOW TRACKER - SHARED MODULE
# =============================================================================
#
# Shared utilities used by both the collector and the tracker.
# No business logic lives here.
#
# CONTENTS:
# - Enums (shared type definitions)
# - Logging utilities (operational log + tracking event log)
#
# =============================================================================

from .enums import (
    OutputMode,
    CliResultStatus,
    ScanStatus,
    SelectionTier,
    Bias,
    LoopPhase,
    TrackingEventType,
)
from .logging_config import setup_logging, TrackingEventLogger

__all__ = [
    "OutputMode",
    "CliResultStatus",
    "ScanStatus",
    "SelectionTier",
    "Bias",
    "LoopPhase",
    "TrackingEventType",
    "setup_logging",
    "TrackingEventLogger",
]
