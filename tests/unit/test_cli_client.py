# =============================================================================
# UNIT TESTS - Polymarket CLI Adapter
# =============================================================================
#
# subprocess.run is patched; no real CLI is executed.
#
# =============================================================================

import subprocess
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from collector.client import PolymarketCli  # noqa: E402
from shared.enums import CliResultStatus  # noqa: E402


def _completed(stdout="", stderr="", returncode=0):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def cli():
    return PolymarketCli(binary="polymarket", timeout=7)


class TestCommandLines:

    def test_search_command(self, cli):
        with patch("collector.client.subprocess.run", return_value=_completed("[]")) as run:
            cli.search_markets("Bitcoin Up or Down - October 19", limit=25)

        command = run.call_args[0][0]
        assert command == [
            "polymarket", "-o", "json", "markets", "search",
            "Bitcoin Up or Down - October 19", "--limit", "25",
        ]
        assert run.call_args.kwargs["timeout"] == 7
        assert run.call_args.kwargs["capture_output"] is True

    def test_price_commands(self, cli):
        with patch("collector.client.subprocess.run", return_value=_completed("0.5")) as run:
            cli.midpoint("tok")
            cli.spread("tok")
            cli.book("tok")
            cli.book("tok", as_json=True)

        commands = [c[0][0] for c in run.call_args_list]
        assert commands == [
            ["polymarket", "clob", "midpoint", "tok"],
            ["polymarket", "clob", "spread", "tok"],
            ["polymarket", "clob", "book", "tok"],
            ["polymarket", "-o", "json", "clob", "book", "tok"],
        ]

    def test_version_command(self, cli):
        with patch("collector.client.subprocess.run",
                   return_value=_completed("polymarket 0.1.4\n")) as run:
            result = cli.version()

        assert run.call_args[0][0] == ["polymarket", "--version"]
        assert result.stdout.strip() == "polymarket 0.1.4"


class TestResultStatus:

    def test_success(self, cli):
        with patch("collector.client.subprocess.run", return_value=_completed("Midpoint: 0.52")):
            result = cli.midpoint("tok")

        assert result.status == CliResultStatus.SUCCESS
        assert result.success
        assert result.return_code == 0
        assert result.duration_ms is not None

    def test_blank_output_is_empty(self, cli):
        with patch("collector.client.subprocess.run", return_value=_completed("  \n")):
            result = cli.midpoint("tok")

        assert result.status == CliResultStatus.EMPTY
        assert not result.success

    def test_nonzero_exit(self, cli):
        completed = _completed(stderr="Error: market not found\n", returncode=2)
        with patch("collector.client.subprocess.run", return_value=completed):
            result = cli.book("tok")

        assert result.status == CliResultStatus.PROCESS_ERROR
        assert result.return_code == 2
        assert result.error_message == "Error: market not found"

    def test_missing_binary(self, cli):
        with patch("collector.client.subprocess.run", side_effect=FileNotFoundError("polymarket")):
            result = cli.midpoint("tok")

        assert result.status == CliResultStatus.NOT_FOUND
        assert "polymarket" in result.error_message

    def test_timeout(self, cli):
        error = subprocess.TimeoutExpired(cmd=["polymarket"], timeout=7)
        with patch("collector.client.subprocess.run", side_effect=error):
            result = cli.search_markets("q")

        assert result.status == CliResultStatus.TIMEOUT
        assert "7" in result.error_message

    def test_os_error(self, cli):
        with patch("collector.client.subprocess.run", side_effect=PermissionError("denied")):
            result = cli.spread("tok")

        assert result.status == CliResultStatus.PROCESS_ERROR

    def test_to_dict_is_serializable(self, cli):
        with patch("collector.client.subprocess.run", return_value=MagicMock(
                returncode=0, stdout="0.5", stderr="")):
            data = cli.midpoint("tok").to_dict()

        assert data["status"] == "SUCCESS"
        assert data["command"] == ["polymarket", "clob", "midpoint", "tok"]
        assert data["timestamp"]
