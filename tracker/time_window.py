# =============================================================================
# POLYMARKET WINDOW TRACKER
# Module: tracker/time_window.py
# Purpose: Extract a 15-minute time window from a market title
# =============================================================================
#
# Market instances carry no machine-readable window. The only source is
# the title, e.g. "Bitcoin Up or Down - October 19, 1:00PM-1:15PM ET".
#
# The parser is total: every failure is a TimeWindow with valid=False.
#
# =============================================================================

import re
from typing import Optional

from models.data_models import TimeWindow, MINUTES_PER_DAY, WINDOW_LENGTH_MINUTES

WINDOW_PATTERN = re.compile(
    r"(?<!\d)(\d{1,2}):(\d{2})\s*(AM|PM)\s*[-–]\s*(\d{1,2}):(\d{2})\s*(AM|PM)\s+ET\b",
    re.IGNORECASE,
)

# Same-day span, or a span that crosses midnight (1440 + diff == 15)
VALID_DIFFS = (WINDOW_LENGTH_MINUTES, WINDOW_LENGTH_MINUTES - MINUTES_PER_DAY)


def to_minute_of_day(hour: int, minute: int, meridiem: str) -> Optional[int]:
    """
    Convert a 12-hour clock time to minute-of-day.

    Returns None if hour is not 1-12 or minute is not 0-59.
    """
    if not 1 <= hour <= 12 or not 0 <= minute <= 59:
        return None

    meridiem = meridiem.upper()
    if meridiem not in ("AM", "PM"):
        return None

    hour24 = hour % 12
    if meridiem == "PM":
        hour24 += 12
    return hour24 * 60 + minute


def parse_time_window(title: Optional[str]) -> TimeWindow:
    """
    Parse the "H:MM{AM|PM}-H:MM{AM|PM} ET" range out of a title.

    Args:
        title: Free-text market question

    Returns:
        TimeWindow; valid only for an exact 15-minute span
    """
    if not isinstance(title, str):
        return TimeWindow.invalid()

    match = WINDOW_PATTERN.search(title)
    if not match:
        return TimeWindow.invalid()

    label = match.group(0)
    start_h, start_m, start_ampm, end_h, end_m, end_ampm = match.groups()

    start = to_minute_of_day(int(start_h), int(start_m), start_ampm)
    end = to_minute_of_day(int(end_h), int(end_m), end_ampm)
    if start is None or end is None:
        return TimeWindow.invalid(label)

    if end - start not in VALID_DIFFS:
        return TimeWindow.invalid(label)

    return TimeWindow(valid=True, start_minute=start, end_minute=end, label=label)


def format_minute_of_day(minute: int) -> str:
    """Render minute-of-day as a 12-hour clock time, e.g. 795 -> '1:15PM'."""
    hour24, mins = divmod(minute % MINUTES_PER_DAY, 60)
    meridiem = "AM" if hour24 < 12 else "PM"
    hour12 = hour24 % 12 or 12
    return f"{hour12}:{mins:02d}{meridiem}"
