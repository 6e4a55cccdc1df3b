# =============================================================================
# UNIT TESTS - Time Window Parsing
# =============================================================================

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from models.data_models import MINUTES_PER_DAY  # noqa: E402
from tracker.time_window import (  # noqa: E402
    format_minute_of_day,
    parse_time_window,
    to_minute_of_day,
)


# =============================================================================
# MINUTE-OF-DAY CONVERSION
# =============================================================================


class TestToMinuteOfDay:

    def test_midnight_is_zero(self):
        """12:00AM is minute 0."""
        assert to_minute_of_day(12, 0, "AM") == 0

    def test_noon_is_720(self):
        """12:00PM is minute 720."""
        assert to_minute_of_day(12, 0, "PM") == 720

    def test_afternoon(self):
        assert to_minute_of_day(1, 15, "PM") == 795

    def test_meridiem_case_insensitive(self):
        assert to_minute_of_day(9, 30, "am") == 570

    def test_out_of_range_hour(self):
        """Hours outside 1-12 are not valid 12-hour times."""
        assert to_minute_of_day(13, 0, "PM") is None
        assert to_minute_of_day(0, 0, "AM") is None

    def test_out_of_range_minute(self):
        assert to_minute_of_day(1, 60, "PM") is None


# =============================================================================
# WINDOW PARSING
# =============================================================================


class TestParseTimeWindow:

    def test_plain_window(self):
        """1:00PM-1:15PM ET parses to 780..795."""
        window = parse_time_window("1:00PM-1:15PM ET")

        assert window.valid
        assert window.start_minute == 780
        assert window.end_minute == 795
        assert window.label == "1:00PM-1:15PM ET"

    def test_window_inside_market_title(self):
        window = parse_time_window("Bitcoin Up or Down - October 19, 1:00PM-1:15PM ET")

        assert window.valid
        assert window.start_minute == 780

    def test_midnight_crossing_window(self):
        """11:45PM-12:00AM ET is a valid 15-minute window."""
        window = parse_time_window("Bitcoin Up or Down - October 19, 11:45PM-12:00AM ET")

        assert window.valid
        assert window.start_minute == 1425
        assert window.end_minute == 0

    def test_noon_crossing_window(self):
        window = parse_time_window("11:45AM-12:00PM ET")

        assert window.valid
        assert (window.start_minute, window.end_minute) == (705, 720)

    def test_lowercase_meridiem(self):
        assert parse_time_window("1:00pm-1:15pm ET").valid

    def test_spaces_around_dash(self):
        assert parse_time_window("1:00PM - 1:15PM ET").valid

    def test_twenty_minute_span_is_invalid(self):
        """Only exact 15-minute spans count."""
        window = parse_time_window("1:00PM-1:20PM ET")

        assert not window.valid
        assert window.start_minute is None

    def test_hourly_market_is_invalid(self):
        assert not parse_time_window("Bitcoin Up or Down - October 19, 1PM ET").valid
        assert not parse_time_window("1:00PM-2:00PM ET").valid

    def test_reversed_window_is_invalid(self):
        assert not parse_time_window("1:15PM-1:00PM ET").valid

    def test_hour_thirteen_is_invalid(self):
        """A 24-hour style hour never yields a window."""
        assert not parse_time_window("13:00PM-1:15PM ET").valid

    def test_extra_leading_digit_is_invalid(self):
        """An hour glued to another digit is not a clock time."""
        assert not parse_time_window("111:45PM-12:00AM ET").valid
        assert not parse_time_window("Window 211:45PM-12:00AM ET").valid

    def test_missing_zone_suffix(self):
        assert not parse_time_window("1:00PM-1:15PM").valid

    def test_no_match(self):
        assert not parse_time_window("Will Bitcoin hit $150k in 2026?").valid

    def test_non_string_input(self):
        """Parsing is total: odd inputs give an invalid window, never an error."""
        assert not parse_time_window(None).valid
        assert not parse_time_window("").valid
        assert not parse_time_window(12345).valid


# =============================================================================
# PROPERTIES
# =============================================================================


class TestWindowProperties:

    def test_every_valid_window_spans_fifteen_minutes(self):
        """(end - start) mod 1440 == 15 for every parsed valid window."""
        found = 0
        for meridiem in ("AM", "PM"):
            for hour in range(1, 13):
                for minute in range(0, 60, 5):
                    for end_offset in (10, 15, 20, 30):
                        start = to_minute_of_day(hour, minute, meridiem)
                        end = start + end_offset
                        title = f"{format_minute_of_day(start)}-{format_minute_of_day(end)} ET"
                        window = parse_time_window(title)
                        if window.valid:
                            found += 1
                            span = (window.end_minute - window.start_minute) % MINUTES_PER_DAY
                            assert span == 15, title
                        else:
                            assert end_offset != 15, title

        assert found == 2 * 12 * 12

    def test_all_minutes_in_range(self):
        for minute in range(0, MINUTES_PER_DAY, 15):
            window = parse_time_window(
                f"{format_minute_of_day(minute)}-{format_minute_of_day(minute + 15)} ET"
            )
            assert window.valid
            assert 0 <= window.start_minute < MINUTES_PER_DAY
            assert 0 <= window.end_minute < MINUTES_PER_DAY


class TestMinutesLeft:

    def test_open_window(self):
        window = parse_time_window("1:15PM-1:30PM ET")
        assert window.minutes_left(795) == 15
        assert window.minutes_left(800) == 10
        assert window.minutes_left(809) == 1

    def test_closed_window(self):
        window = parse_time_window("11:40AM-11:55AM ET")
        assert window.minutes_left(715) is None
        assert window.minutes_left(800) is None

    def test_upcoming_window(self):
        assert parse_time_window("1:30PM-1:45PM ET").minutes_left(800) is None

    def test_open_across_midnight(self):
        window = parse_time_window("11:45PM-12:00AM ET")
        assert window.minutes_left(1435) == 5
        assert window.minutes_left(0) is None

    def test_invalid_window(self):
        assert parse_time_window("no window here").minutes_left(800) is None


class TestFormatMinuteOfDay:

    def test_examples(self):
        assert format_minute_of_day(795) == "1:15PM"
        assert format_minute_of_day(0) == "12:00AM"
        assert format_minute_of_day(720) == "12:00PM"
        assert format_minute_of_day(1425) == "11:45PM"

    def test_wraps_past_midnight(self):
        assert format_minute_of_day(1440) == "12:00AM"
