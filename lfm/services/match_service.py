"""Match service: orchestrate lost-to-found matching against the record store.

This service handles bulk generation with run statistics, match lookups with
their items, review status updates and per-user match listings.
"""

from __future__ import annotations
import time
import logging
from dataclasses import dataclass
from typing import Dict, Any, List

from ..match.matching_engine import MatchingEngine
from ..match.quality import QualityAssessment, classify
from ..db import DatabaseInterface
from ..db.models import ItemKind, ItemRow, ItemStatus, MatchRow, MatchStatus
from ..config_types import MatchingConfig
from ..errors import NotFoundError
from ..utils.logging_helpers import format_tier_summary

logger = logging.getLogger(__name__)


class MatchResult:
    """Results from a bulk match operation."""

    def __init__(self):
        self.lost_items = 0
        self.found_items = 0
        self.created: List[MatchRow] = []
        self.total_matches = 0
        self.tier_counts: Dict[str, int] = {}
        self.duration_seconds = 0.0

    @property
    def matched(self) -> int:
        return len(self.created)


@dataclass
class MatchDetails:
    match: MatchRow
    lost_item: ItemRow
    found_item: ItemRow
    quality: QualityAssessment


def build_engine(db: DatabaseInterface, config: Dict[str, Any]) -> MatchingEngine:
    """Create a MatchingEngine from a full configuration dict."""
    matching_dict = config.get('matching', {})
    matching_config = MatchingConfig(
        min_similarity=float(matching_dict.get('min_similarity', 0.3)),
        diagnose_top_n=int(matching_dict.get('diagnose_top_n', 5)),
    )
    logging_dict = config.get('logging', {})
    return MatchingEngine(
        db,
        matching_config,
        progress_enabled=logging_dict.get('progress_enabled', True),
        progress_interval=int(logging_dict.get('progress_interval', 100)),
    )


def run_matching(db: DatabaseInterface, config: Dict[str, Any]) -> MatchResult:
    """Run bulk generation and gather statistics.

    Args:
        db: Record store instance
        config: Full configuration dict

    Returns:
        MatchResult with created matches and tier distribution
    """
    result = MatchResult()
    start = time.time()

    engine = build_engine(db, config)
    result.created = engine.generate_all()

    result.lost_items = db.count_items(kind=ItemKind.LOST, status=ItemStatus.ACTIVE)
    result.found_items = db.count_items(kind=ItemKind.FOUND, status=ItemStatus.ACTIVE)
    result.total_matches = db.count_matches()
    for match in result.created:
        tier = classify(match.similarity).tier.value
        result.tier_counts[tier] = result.tier_counts.get(tier, 0) + 1

    result.duration_seconds = time.time() - start

    if result.created:
        logger.info(f"  Quality: {format_tier_summary(result.tier_counts)}")

    db.set_meta('last_match_epoch', str(time.time()))
    db.commit()
    return result


def find_matches(db: DatabaseInterface, config: Dict[str, Any], item_id: str) -> List[MatchRow]:
    """Rank candidates for a lost or found item without persisting them."""
    return build_engine(db, config).find_matches_for_item(item_id)


def get_match_with_details(db: DatabaseInterface, match_id: str) -> MatchDetails:
    """Load a stored match together with both of its items.

    Raises:
        NotFoundError: If the match or either referenced item is missing
    """
    match = db.get_match_by_id(match_id)
    if match is None:
        raise NotFoundError(f"match not found: {match_id}")
    lost_item = db.get_item_by_id(match.lost_item_id)
    found_item = db.get_item_by_id(match.found_item_id)
    if lost_item is None or found_item is None:
        raise NotFoundError(f"match {match_id} references a missing item")
    return MatchDetails(
        match=match,
        lost_item=lost_item,
        found_item=found_item,
        quality=classify(match.similarity),
    )


def update_match_status(
    db: DatabaseInterface,
    match_id: str,
    status: MatchStatus | str,
    notes: str | None = None,
) -> MatchRow:
    """Record a review decision on a stored match.

    Existing notes are kept when ``notes`` is None.

    Raises:
        NotFoundError: If the match does not exist
        ValueError: If status is not a MatchStatus value
    """
    updated = db.update_match_status(match_id, MatchStatus(status), notes)
    if updated is None:
        raise NotFoundError(f"match not found: {match_id}")
    db.commit()
    logger.info(f"Match {match_id} -> {updated.status.value}")
    return updated


def get_user_matches(db: DatabaseInterface, user_id: str) -> List[MatchRow]:
    """Stored matches touching any item owned by the user, without duplicates."""
    seen = set()
    matches: List[MatchRow] = []
    for item in db.get_items_by_user(user_id):
        for match in db.get_matches_for_item(item.id):
            if match.id in seen:
                continue
            seen.add(match.id)
            matches.append(match)
    return matches


__all__ = [
    "MatchResult",
    "MatchDetails",
    "build_engine",
    "run_matching",
    "find_matches",
    "get_match_with_details",
    "update_match_status",
    "get_user_matches",
]
