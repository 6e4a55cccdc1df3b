# =============================================================================
# POLYMARKET WINDOW TRACKER
# Module: collector/normalizer.py
# Purpose: Decode search output into validated MarketCandidate records
# =============================================================================
#
# INPUT SCHEMA (one item of the JSON array):
# {
#     "id": string | int,
#     "question": string,
#     "acceptingOrders": bool,
#     "clobTokenIds": "[\"<yes token>\", \"<no token>\"]"   (JSON-encoded)
# }
#
# DESIGN:
# - Per-item quarantine: a malformed item is rejected, the batch survives
# - Payload-level failure (not JSON, not a list) raises SearchDecodeError
# - Deterministic: same input => same output, input order preserved
#
# =============================================================================

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from models.data_models import MarketCandidate, RejectedItem

logger = logging.getLogger(__name__)


class SearchDecodeError(ValueError):
    """The search payload as a whole could not be decoded."""


@dataclass
class DecodedSearch:
    """Candidates that passed validation plus the quarantined items."""
    candidates: List[MarketCandidate] = field(default_factory=list)
    rejected: List[RejectedItem] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.candidates) + len(self.rejected)


class MarketNormalizer:
    """
    Turns raw search output into MarketCandidate records.

    Extracts only the fields the tracker needs.
    """

    ID_FIELDS = ("id", "market_id", "marketId")
    QUESTION_FIELDS = ("question", "title")
    ACCEPTING_FIELDS = ("acceptingOrders", "accepting_orders")
    TOKEN_FIELDS = ("clobTokenIds", "clob_token_ids")

    # Wrapper keys some endpoints use around the array
    WRAPPER_KEYS = ("data", "markets", "results")

    def decode(self, raw: str) -> DecodedSearch:
        """
        Decode the full stdout of a search call.

        Args:
            raw: JSON text

        Returns:
            DecodedSearch

        Raises:
            SearchDecodeError: If the payload is not a JSON array of objects
        """
        items = self._load_items(raw)
        result = DecodedSearch()

        for index, item in enumerate(items):
            candidate, reason = self.normalize(item)
            if candidate is not None:
                result.candidates.append(candidate)
                continue

            market_id = self._extract_market_id(item) if isinstance(item, dict) else None
            rejected = RejectedItem(index=index, reason=reason, market_id=market_id)
            result.rejected.append(rejected)
            logger.debug(f"Rejected search item #{index} ({market_id}): {reason}")

        if result.rejected:
            logger.info(
                f"Decoded {len(result.candidates)}/{result.total} search items "
                f"({len(result.rejected)} quarantined)"
            )
        return result

    def normalize(self, item: Any) -> Tuple[Optional[MarketCandidate], str]:
        """
        Normalize a single search item.

        Returns:
            (candidate, "") on success, (None, reason) on rejection
        """
        if not isinstance(item, dict):
            return None, f"item is {type(item).__name__}, expected object"

        market_id = self._extract_market_id(item)
        if not market_id:
            return None, "missing_market_id"

        question = self._first(item, self.QUESTION_FIELDS)
        if not isinstance(question, str) or not question.strip():
            return None, "missing_question"

        accepting = self._first(item, self.ACCEPTING_FIELDS)
        if not isinstance(accepting, bool):
            return None, "missing_accepting_orders"

        tokens, reason = self._extract_tokens(item)
        if tokens is None:
            return None, reason

        try:
            candidate = MarketCandidate(
                id=market_id,
                question=question.strip(),
                accepting_orders=accepting,
                yes_token=tokens[0],
                no_token=tokens[1],
            )
        except ValueError as e:
            return None, str(e)

        return candidate, ""

    def _load_items(self, raw: str) -> List[Any]:
        """Parse the payload and unwrap it to a list."""
        if raw is None or not raw.strip():
            return []

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            raise SearchDecodeError(f"Search output is not JSON: {e}") from e

        if isinstance(payload, list):
            return payload

        if isinstance(payload, dict):
            for key in self.WRAPPER_KEYS:
                if isinstance(payload.get(key), list):
                    return payload[key]

        raise SearchDecodeError(
            f"Search output is {type(payload).__name__}, expected a JSON array"
        )

    @staticmethod
    def _first(item: Dict[str, Any], names: Tuple[str, ...]) -> Any:
        for name in names:
            if name in item and item[name] is not None:
                return item[name]
        return None

    def _extract_market_id(self, item: Dict[str, Any]) -> Optional[str]:
        """Extract market ID from various possible field names."""
        value = self._first(item, self.ID_FIELDS)
        if isinstance(value, bool) or value is None:
            return None
        if isinstance(value, (str, int)):
            value = str(value).strip()
            return value or None
        return None

    def _extract_tokens(self, item: Dict[str, Any]) -> Tuple[Optional[List[str]], str]:
        """
        Extract [yes_token, no_token].

        The CLI passes clobTokenIds through as a JSON-encoded string;
        an already-decoded list is accepted too.
        """
        value = self._first(item, self.TOKEN_FIELDS)
        if value is None:
            return None, "missing_clob_token_ids"

        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError:
                return None, "clob_token_ids_not_json"

        if not isinstance(value, list) or len(value) != 2:
            return None, "clob_token_ids_not_pair"

        tokens = []
        for token in value:
            if isinstance(token, bool) or not isinstance(token, (str, int)):
                return None, "clob_token_id_invalid"
            token = str(token).strip()
            if not token:
                return None, "clob_token_id_empty"
            tokens.append(token)

        return tokens, ""
