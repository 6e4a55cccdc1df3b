# =============================================================================
# POLYMARKET WINDOW TRACKER
# Module: collector/__init__.py
# Purpose: Market discovery through the Polymarket CLI
# =============================================================================
#
# STRICT SEPARATION:
# This package only talks to the CLI and turns its output into validated
# records. It does NOT render anything and holds no loop state.
#
# DESIGN PRINCIPLES:
# - Fail-soft: every CLI call and every scan returns a typed result
# - Deterministic: same input => same selection
# - Per-item quarantine of malformed search results
#
# =============================================================================

from .client import PolymarketCli, CliResult
from .normalizer import MarketNormalizer, DecodedSearch, SearchDecodeError
from .discovery import MarketDiscovery, ScanResult, build_search_query

__all__ = [
    "PolymarketCli",
    "CliResult",
    "MarketNormalizer",
    "DecodedSearch",
    "SearchDecodeError",
    "MarketDiscovery",
    "ScanResult",
    "build_search_query",
]
