# =============================================================================
# POLYMARKET WINDOW TRACKER
# Module: collector/client.py
# Purpose: Adapter for the Polymarket trading CLI (external collaborator)
# =============================================================================
#
# DESIGN:
# - All network access is delegated to the `polymarket` CLI binary
# - READ-ONLY: search, midpoint, spread, book. No order placement.
# - Every call returns a CliResult, it never raises into the loop
# - Every call has a timeout; NO retries (the next tick is the retry)
#
# COMMANDS:
#   polymarket -o json markets search <query> --limit <n>
#   polymarket clob midpoint <token>
#   polymarket clob spread <token>
#   polymarket [-o json] clob book <token>
#
# =============================================================================

import logging
import subprocess
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Dict, Any

from shared.enums import CliResultStatus

logger = logging.getLogger(__name__)

DEFAULT_BINARY = "polymarket"
DEFAULT_TIMEOUT = 20  # seconds


@dataclass
class CliResult:
    """
    Structured result of one CLI invocation.

    Every call returns this, regardless of success or failure.
    """
    status: CliResultStatus
    command: List[str]
    stdout: str = ""
    stderr: str = ""
    return_code: Optional[int] = None
    error_message: Optional[str] = None
    duration_ms: Optional[float] = None
    timestamp: str = ""

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = datetime.now(timezone.utc).isoformat()

    @property
    def success(self) -> bool:
        return self.status == CliResultStatus.SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "status": self.status.value,
            "command": self.command,
            "return_code": self.return_code,
            "error_message": self.error_message,
            "duration_ms": self.duration_ms,
            "timestamp": self.timestamp,
        }


class PolymarketCli:
    """
    Read-only client for the Polymarket CLI.

    Features:
    - Per-call timeout
    - Typed results instead of exceptions
    - Debug logging of every command line
    """

    def __init__(
        self,
        binary: str = DEFAULT_BINARY,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize the CLI adapter.

        Args:
            binary: Name on PATH or path of the CLI executable
            timeout: Per-call timeout in seconds
        """
        self.binary = binary
        self.timeout = timeout

    def search_markets(self, query: str, limit: int = 50) -> CliResult:
        """Full-text market search, JSON array on stdout."""
        return self._run(["-o", "json", "markets", "search", query, "--limit", str(limit)])

    def midpoint(self, token_id: str) -> CliResult:
        """Midpoint price for a token (text, may carry a label)."""
        return self._run(["clob", "midpoint", token_id])

    def spread(self, token_id: str) -> CliResult:
        """Bid/ask spread for a token (text, may carry a label)."""
        return self._run(["clob", "spread", token_id])

    def book(self, token_id: str, as_json: bool = False) -> CliResult:
        """Order book for a token, table text or JSON."""
        args = ["clob", "book", token_id]
        if as_json:
            args = ["-o", "json"] + args
        return self._run(args)

    def version(self) -> CliResult:
        return self._run(["--version"])

    def _run(self, args: List[str]) -> CliResult:
        """
        Execute the CLI with the given arguments.

        Args:
            args: Arguments after the binary name

        Returns:
            CliResult (never raises)
        """
        command = [self.binary] + args
        logger.debug(f"Running: {' '.join(command)}")
        start = time.monotonic()

        def elapsed() -> float:
            return round((time.monotonic() - start) * 1000, 1)

        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            logger.warning(f"CLI not found: {self.binary} ({e})")
            return CliResult(
                status=CliResultStatus.NOT_FOUND,
                command=command,
                error_message=f"Executable not found: {self.binary}",
                duration_ms=elapsed(),
            )
        except subprocess.TimeoutExpired:
            logger.warning(f"CLI timed out after {self.timeout}s: {' '.join(command)}")
            return CliResult(
                status=CliResultStatus.TIMEOUT,
                command=command,
                error_message=f"Timed out after {self.timeout}s",
                duration_ms=elapsed(),
            )
        except OSError as e:
            logger.warning(f"CLI could not be started: {e}")
            return CliResult(
                status=CliResultStatus.PROCESS_ERROR,
                command=command,
                error_message=str(e),
                duration_ms=elapsed(),
            )

        stdout = completed.stdout or ""
        stderr = completed.stderr or ""

        if completed.returncode != 0:
            message = stderr.strip() or stdout.strip() or f"exit status {completed.returncode}"
            logger.warning(
                f"CLI exited {completed.returncode}: {' '.join(args[:3])} | {message[:200]}"
            )
            return CliResult(
                status=CliResultStatus.PROCESS_ERROR,
                command=command,
                stdout=stdout,
                stderr=stderr,
                return_code=completed.returncode,
                error_message=message,
                duration_ms=elapsed(),
            )

        status = CliResultStatus.SUCCESS if stdout.strip() else CliResultStatus.EMPTY
        return CliResult(
            status=status,
            command=command,
            stdout=stdout,
            stderr=stderr,
            return_code=completed.returncode,
            error_message=None if stdout.strip() else "No output",
            duration_ms=elapsed(),
        )
