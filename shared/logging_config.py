# =============================================================================
# POLYMARKET WINDOW TRACKER - LOGGING CONFIGURATION
# =============================================================================
#
# Operational logs go to logs/tracker_<timestamp>.log.
# Tracking transitions go to logs/events/events_<YYYYMMDD>.jsonl.
#
# The terminal is the rendering surface of the tracker, so console logging
# is opt-in (--verbose) and always goes to stderr.
#
# =============================================================================

import hashlib
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Dict, Any


LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Packages whose loggers we configure
TRACKER_LOGGERS = ("tracker", "collector", "cockpit")


# =============================================================================
# LOG DIRECTORIES (relative to project root)
# =============================================================================

def _get_project_root() -> Path:
    """Get the project root directory."""
    # This file is at shared/logging_config.py
    return Path(__file__).parent.parent


def get_log_dir(base_dir: Optional[Path] = None) -> Path:
    """Get the directory operational logs are written to."""
    return (base_dir or _get_project_root()) / "logs"


# =============================================================================
# LOGGING SETUP
# =============================================================================

def setup_logging(
    level: int = logging.INFO,
    console_output: bool = False,
    file_output: bool = True,
    log_dir: Optional[Path] = None,
) -> Optional[Path]:
    """
    Configure logging for the tracker packages.

    Args:
        level: Logging level
        console_output: Whether to log to the console (stderr)
        file_output: Whether to log to a file
        log_dir: Override for the log directory (default: <root>/logs)

    Returns:
        Path of the log file, or None if file output is disabled
    """
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    log_file = None
    handlers = []

    if console_output:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    if file_output:
        directory = log_dir or get_log_dir()
        directory.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = directory / f"tracker_{timestamp}.log"

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    for name in TRACKER_LOGGERS + ("__main__",):
        logger = logging.getLogger(name)
        logger.setLevel(level)
        # Remove existing handlers to avoid duplicates
        logger.handlers.clear()
        logger.propagate = False
        for handler in handlers:
            logger.addHandler(handler)

    # Reduce noise from urllib3 (release check)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    tracker_logger = logging.getLogger("tracker")
    tracker_logger.info("Logging initialized")
    if log_file:
        tracker_logger.info(f"Log file: {log_file}")

    return log_file


# =============================================================================
# TRACKING EVENT LOG
# =============================================================================

class TrackingEventLogger:
    """
    Append-only JSONL log of tracking transitions.

    One line per "now tracking" transition. The log is never read back
    by the tracker; it exists so a session can be reviewed afterwards.
    """

    def __init__(self, log_dir: Optional[Path] = None):
        self.events_dir = (log_dir or get_log_dir()) / "events"
        self._setup_event_logger()

    def _setup_event_logger(self) -> None:
        """Set up the event logger with a dedicated file."""
        self.events_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d")
        self.event_file = self.events_dir / f"events_{timestamp}.jsonl"

        self.logger = logging.getLogger(f"events.{id(self)}")
        self.logger.setLevel(logging.INFO)
        self.logger.handlers.clear()
        self.logger.propagate = False

        # JSON-lines format for event records
        handler = logging.FileHandler(self.event_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(message)s"))
        self.logger.addHandler(handler)

    @staticmethod
    def _compute_hash(data: Dict[str, Any]) -> str:
        """SHA-256 of the payload, serialized deterministically."""
        serialized = json.dumps(data, sort_keys=True, separators=(',', ':'))
        return hashlib.sha256(serialized.encode('utf-8')).hexdigest()

    def log_transition(
        self,
        market_id: str,
        question: str,
        window_label: Optional[str],
        diff_minutes: int,
        previous_market_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Record a tracking transition.

        Returns:
            The record that was written
        """
        payload = {
            "market_id": market_id,
            "question": question,
            "window": window_label,
            "diff_minutes": diff_minutes,
            "previous_market_id": previous_market_id,
        }
        record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "event": "TRACKING_STARTED",
            **payload,
            "payload_hash": self._compute_hash(payload),
        }
        self.logger.info(json.dumps(record, ensure_ascii=False))
        return record

    def close(self) -> None:
        """Close the underlying file handler."""
        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)
