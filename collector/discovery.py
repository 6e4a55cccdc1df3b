# =============================================================================
# POLYMARKET WINDOW TRACKER
# Module: collector/discovery.py
# Purpose: One market-discovery scan, from search query to selection
# =============================================================================
#
# PIPELINE:
# 1. Build a search query scoped to today's reference-zone date
# 2. Search via the CLI
# 3. Decode + validate items (per-item quarantine)
# 4. Parse windows and score against "now"
# 5. Select (running -> upcoming -> nearest)
#
# The scan never raises: every outcome is a ScanResult.
#
# =============================================================================

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from collector.client import PolymarketCli
from collector.normalizer import MarketNormalizer, SearchDecodeError
from models.data_models import ScoredCandidate
from shared.enums import CliResultStatus, ScanStatus
from tracker.scoring import ReferenceClock, score_candidates
from tracker.selector import Selection, select_market

logger = logging.getLogger(__name__)

DEFAULT_QUERY_TEMPLATE = "{asset} Up or Down - {month} {day}"


def build_search_query(template: str, asset: str, today: date) -> str:
    """
    Fill the query template for the given reference-zone date.

    Placeholders: {asset}, {month} (full name), {day} (no padding), {year}.
    """
    return template.format(
        asset=asset,
        month=today.strftime("%B"),
        day=today.day,
        year=today.year,
    ).strip()


@dataclass
class ScanResult:
    """Statistics and outcome of one discovery scan."""
    status: ScanStatus
    query: str
    now_minute: int
    selection: Optional[Selection] = None
    scored: List[ScoredCandidate] = field(default_factory=list)
    total_fetched: int = 0
    total_rejected: int = 0
    total_scored: int = 0
    error_message: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == ScanStatus.SUCCESS


class MarketDiscovery:
    """
    Runs discovery scans.

    Coordinates:
    - CLI adapter for searching
    - Normalizer for schema validation
    - Scorer and selector for picking the live window
    """

    def __init__(
        self,
        cli: PolymarketCli,
        clock: ReferenceClock,
        asset: str = "Bitcoin",
        query_template: str = DEFAULT_QUERY_TEMPLATE,
        search_limit: int = 50,
    ):
        self.cli = cli
        self.clock = clock
        self.asset = asset
        self.query_template = query_template
        self.search_limit = search_limit
        self.normalizer = MarketNormalizer()

    def scan(self) -> ScanResult:
        """
        Execute one scan.

        Returns:
            ScanResult (SUCCESS with a selection, EMPTY, or ERROR)
        """
        query = build_search_query(self.query_template, self.asset, self.clock.today())
        now_minute = self.clock.minute_of_day()
        logger.info(f"Scanning: query='{query}' limit={self.search_limit} now_minute={now_minute}")

        response = self.cli.search_markets(query, limit=self.search_limit)
        if response.status == CliResultStatus.EMPTY:
            logger.warning(f"Search returned no output for '{query}'")
            return ScanResult(status=ScanStatus.EMPTY, query=query, now_minute=now_minute)

        if not response.success:
            logger.warning(f"Search failed ({response.status.value}): {response.error_message}")
            return ScanResult(
                status=ScanStatus.ERROR,
                query=query,
                now_minute=now_minute,
                error_message=response.error_message,
            )

        try:
            decoded = self.normalizer.decode(response.stdout)
        except SearchDecodeError as e:
            logger.warning(f"Malformed search response: {e}")
            return ScanResult(
                status=ScanStatus.ERROR,
                query=query,
                now_minute=now_minute,
                error_message=str(e),
            )

        scored = score_candidates(decoded.candidates, now_minute)
        selection = select_market(scored)

        result = ScanResult(
            status=ScanStatus.SUCCESS if selection else ScanStatus.EMPTY,
            query=query,
            now_minute=now_minute,
            selection=selection,
            scored=scored,
            total_fetched=decoded.total,
            total_rejected=len(decoded.rejected),
            total_scored=len(scored),
        )

        if selection is None:
            logger.warning(
                f"No active market: fetched={result.total_fetched} "
                f"rejected={result.total_rejected} eligible=0"
            )
        else:
            chosen = selection.scored
            logger.info(
                f"Selected {chosen.candidate.id} ({selection.tier.value}) "
                f"diff={chosen.diff_minutes}m | {chosen.candidate.question[:80]}"
            )
        return result
