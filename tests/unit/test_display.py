# =============================================================================
# UNIT TESTS - Price Parsing and Display Modes
# =============================================================================

import io
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from models.data_models import MarketQuote, TrackedMarket  # noqa: E402
from shared.enums import Bias, CliResultStatus, OutputMode, SelectionTier, TrackingEventType  # noqa: E402
from tracker.display import (  # noqa: E402
    C,
    DisplayAdapter,
    describe_offset,
    fetch_quote,
    format_notice,
    parse_decimal,
    parse_midpoint,
)
from tracker.loop import SessionStats, TrackingEvent  # noqa: E402
from tests.mock_data import (  # noqa: E402
    DEFAULT_BOOK_JSON,
    FakeCli,
    cli_result,
    fixed_clock,
    scored_at,
)


@pytest.fixture
def no_color(monkeypatch):
    for attr in dir(C):
        if attr.isupper() and not attr.startswith('_'):
            monkeypatch.setattr(C, attr, "")


def _market(start_minute=795, now_minute=800):
    return TrackedMarket.from_scored(scored_at(start_minute, now_minute), SelectionTier.RUNNING)


def _quote(midpoint):
    return MarketQuote(token_id="t", midpoint=midpoint, spread=0.01, book=None)


# =============================================================================
# PARSING
# =============================================================================


class TestParsing:

    def test_labelled_value(self):
        assert parse_decimal("Midpoint: 0.525") == 0.525

    def test_bare_value(self):
        assert parse_decimal("0.4\n") == 0.4

    def test_no_number(self):
        assert parse_decimal("n/a") is None
        assert parse_decimal(None) is None

    def test_unparseable_midpoint_defaults_to_half(self):
        """Unparseable midpoint falls back to 0.5."""
        assert parse_midpoint("garbage") == 0.5
        assert parse_midpoint("") == 0.5
        assert parse_midpoint(None) == 0.5

    def test_out_of_range_midpoint_defaults_to_half(self):
        assert parse_midpoint("1.7") == 0.5


class TestQuote:

    def test_bias_thresholds(self):
        """Above 0.52 is YES, below 0.48 is NO, the band between is neutral."""
        assert _quote(0.53).bias == Bias.YES
        assert _quote(0.47).bias == Bias.NO
        assert _quote(0.52).bias == Bias.NEUTRAL
        assert _quote(0.48).bias == Bias.NEUTRAL
        assert _quote(0.5).bias == Bias.NEUTRAL

    def test_percentage_one_decimal(self):
        assert _quote(0.5254).midpoint_pct == 52.5

    def test_fetch_quote_uses_yes_token(self):
        cli = FakeCli()

        quote = fetch_quote(cli, _market())

        assert quote.token_id == "m795-yes"
        assert quote.midpoint == 0.55
        assert quote.spread == 0.02
        assert quote.book is None
        assert all(call[-1] == "m795-yes" for call in cli.calls)

    def test_fetch_quote_failures_use_defaults(self):
        cli = FakeCli(
            midpoint=cli_result(status=CliResultStatus.TIMEOUT, error_message="Timed out"),
            spread="no spread available",
        )

        quote = fetch_quote(cli, _market())

        assert quote.midpoint == 0.5
        assert quote.midpoint_raw is None
        assert quote.spread is None


class TestWording:

    def test_describe_offset(self):
        assert describe_offset(10) == "starts in 10 min"
        assert describe_offset(0) == "started just now"
        assert describe_offset(-5) == "started 5 min ago"

    def test_notice_for_upcoming_market(self):
        notice = format_notice(TrackingEventType.TRACKING_STARTED, _market(810, 800))

        assert notice.startswith("Now tracking: Bitcoin Up or Down")
        assert notice.endswith("(starts in 10 minutes)")

    def test_notice_for_running_market(self):
        notice = format_notice(TrackingEventType.TRACKING_STARTED, _market(795, 800))

        assert "starts in" not in notice

    def test_silent_events(self):
        assert format_notice(TrackingEventType.MARKET_REFRESHED, _market()) is None
        assert format_notice(TrackingEventType.SCAN_EMPTY, None) is None


# =============================================================================
# DISPLAY MODES
# =============================================================================


def _adapter(mode, cli=None):
    out = io.StringIO()
    adapter = DisplayAdapter(
        cli=cli or FakeCli(),
        clock=fixed_clock(13, 20),
        mode=mode,
        out=out,
        clear_screen=False,
    )
    return adapter, out


class TestCompactMode:

    def test_single_line(self, no_color):
        adapter, out = _adapter(OutputMode.COMPACT)

        adapter.render(_market())

        lines = out.getvalue().splitlines()
        assert len(lines) == 1
        assert "Bitcoin Up or Down - October 19, 1:15PM-1:30PM ET" in lines[0]
        assert "YES 55.0%" in lines[0]
        assert "▲ YES" in lines[0]
        assert "spread 0.020" in lines[0]
        assert lines[0].startswith("13:20:00 EDT")

    def test_notification_line(self, no_color):
        adapter, out = _adapter(OutputMode.COMPACT)

        adapter.notify(TrackingEvent(type=TrackingEventType.TRACKING_STARTED, market=_market(810)))

        assert out.getvalue().startswith(">> Now tracking:")

    def test_book_not_fetched(self):
        cli = FakeCli()
        adapter, _ = _adapter(OutputMode.COMPACT, cli=cli)

        adapter.render(_market())

        assert cli.calls_for("book") == []


class TestFullMode:

    def test_panel_contents(self, no_color):
        adapter, out = _adapter(OutputMode.FULL)

        adapter.render(_market(795, 800))

        text = out.getvalue()
        assert "Local:" in text
        assert "EDT" in text
        assert "1:15PM-1:30PM ET | started 5 min ago | 10 min left" in text
        assert "YES:     55.0%" in text
        assert "Order book:" in text
        assert "0.51  120.0" in text

    def test_notice_shown_in_panel(self, no_color):
        adapter, out = _adapter(OutputMode.FULL)
        market = _market(810, 800)

        adapter.notify(TrackingEvent(type=TrackingEventType.TRACKING_STARTED, market=market))
        assert out.getvalue() == ""

        adapter.render(market)
        assert "Now tracking:" in out.getvalue()
        assert "(starts in 10 minutes)" in out.getvalue()

    def test_upcoming_notice_cleared_by_refresh(self, no_color):
        adapter, out = _adapter(OutputMode.FULL)
        upcoming = _market(810, 800)
        adapter.notify(TrackingEvent(type=TrackingEventType.TRACKING_STARTED, market=upcoming))
        adapter.render(upcoming)

        adapter.clock._now.set(13, 40)
        running = TrackedMarket.from_scored(scored_at(810, 820), SelectionTier.RUNNING)
        first_panel = len(out.getvalue())
        adapter.notify(TrackingEvent(type=TrackingEventType.MARKET_REFRESHED, market=running))
        adapter.render(running)

        second = out.getvalue()[first_panel:]
        assert "1:30PM-1:45PM ET | started 10 min ago | 5 min left" in second
        assert "Now tracking:" not in second
        assert "starts in 10 minutes" not in second

    def test_scan_failed_notice_shown_once(self, no_color):
        adapter, out = _adapter(OutputMode.FULL)
        market = _market()

        adapter.notify(TrackingEvent(type=TrackingEventType.SCAN_FAILED, market=market))
        adapter.render(market)
        assert "Market scan failed" in out.getvalue()

        first_panel = len(out.getvalue())
        adapter.render(market)
        assert "Market scan failed" not in out.getvalue()[first_panel:]

    def test_past_window_shows_when_it_ended(self, no_color):
        adapter, out = _adapter(OutputMode.FULL)
        nearest = TrackedMarket.from_scored(scored_at(700, 800), SelectionTier.NEAREST)

        adapter.render(nearest)

        text = out.getvalue()
        assert "11:40AM-11:55AM ET | started 100 min ago | ended 85 min ago" in text
        assert "min left" not in text

    def test_upcoming_window_has_no_time_left(self, no_color):
        adapter, out = _adapter(OutputMode.FULL)

        adapter.render(_market(810, 800))

        text = out.getvalue()
        assert "1:30PM-1:45PM ET | starts in 10 min\n" in text
        assert "min left" not in text

    def test_missing_book(self, no_color):
        cli = FakeCli(book=cli_result(status=CliResultStatus.PROCESS_ERROR, error_message="boom"))
        adapter, out = _adapter(OutputMode.FULL, cli=cli)

        adapter.render(_market())

        assert "(unavailable)" in out.getvalue()

    def test_clear_screen(self):
        out = io.StringIO()
        adapter = DisplayAdapter(cli=FakeCli(), clock=fixed_clock(13, 20), out=out)

        adapter.render(_market())

        assert out.getvalue().startswith("\033[2J\033[H")


class TestJsonMode:

    def test_book_passed_through_unmodified(self):
        cli = FakeCli()
        adapter, out = _adapter(OutputMode.JSON, cli=cli)

        adapter.render(_market())

        assert out.getvalue() == DEFAULT_BOOK_JSON + "\n"
        assert cli.calls == [["-o", "json", "clob", "book", "m795-yes"]]

    def test_nothing_but_payloads_on_stdout(self):
        adapter, out = _adapter(OutputMode.JSON)

        adapter.notify(TrackingEvent(type=TrackingEventType.TRACKING_STARTED, market=_market()))
        adapter.waiting()
        adapter.closing(SessionStats())

        assert out.getvalue() == ""

    def test_failed_book_prints_nothing(self):
        cli = FakeCli(book_json=cli_result(status=CliResultStatus.TIMEOUT, error_message="t"))
        adapter, out = _adapter(OutputMode.JSON, cli=cli)

        adapter.render(_market())

        assert out.getvalue() == ""


class TestStatusMessages:

    def test_waiting(self, no_color):
        adapter, out = _adapter(OutputMode.COMPACT)

        adapter.waiting()

        assert "Waiting for an active market..." in out.getvalue()

    def test_closing(self, no_color):
        adapter, out = _adapter(OutputMode.COMPACT)
        stats = SessionStats(ticks=12, scans=2, rollovers=1)

        adapter.closing(stats)

        text = out.getvalue()
        assert "Tracker stopped" in text
        assert "Ticks:      12" in text
        assert "Rollovers:  1" in text
