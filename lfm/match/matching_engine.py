"""Matching engine for lost-to-found item matching.

This module provides the core matching engine that coordinates candidate
selection, pair scoring, ranking and result persistence.
"""

from __future__ import annotations
import time
import logging
from typing import List, Optional

from tenacity import retry, retry_if_exception_type, stop_after_attempt

from .scoring import ScoringConfig, evaluate_pair, DEFAULT_SCORING
from .candidate_selector import CandidateSelector
from ..db import DatabaseInterface
from ..db.models import ItemKind, ItemRow, ItemStatus, MatchRow, MatchStatus
from ..config_types import MatchingConfig
from ..errors import ConflictError, NotFoundError
from ..utils.logging_helpers import log_progress

logger = logging.getLogger(__name__)


class MatchingEngine:
    """Core matching engine for lost-to-found item matching.

    This class orchestrates the matching process:
    1. Resolves the source item and fetches the opposite-kind candidate pool
    2. Scores each (lost, found) pair with the scoring engine
    3. Keeps pairs strictly above min_similarity not already in the store
    4. Ranks by similarity, highest first
    5. Persists matches in bulk runs (generate_all)

    Ranking uses a stable sort, so equal similarities keep the order in which
    the store enumerated the candidates.

    Example usage:
        engine = MatchingEngine(db, MatchingConfig(min_similarity=0.3))
        ranked = engine.find_matches("lost-42")
        created = engine.generate_all()
    """

    def __init__(
        self,
        db: DatabaseInterface,
        matching_config: MatchingConfig | None = None,
        scoring_config: ScoringConfig = DEFAULT_SCORING,
        progress_enabled: bool = True,
        progress_interval: int = 100,
    ):
        """Initialize the matching engine.

        Args:
            db: Record store instance
            matching_config: MatchingConfig instance (defaults when None)
            scoring_config: Weights and thresholds for pair scoring
            progress_enabled: Enable progress logging for bulk runs (default: True)
            progress_interval: Log progress every N lost items (default: 100)
        """
        self.db = db
        self.selector = CandidateSelector(db)
        self.scoring_config = scoring_config
        matching_config = matching_config or MatchingConfig()
        self.min_similarity = matching_config.min_similarity
        self.progress_enabled = progress_enabled
        self.progress_interval = progress_interval

    # --- Discovery -----------------------------------------------------------

    def find_matches(self, lost_item_id: str) -> List[MatchRow]:
        """Rank active found items against a lost item.

        Raises:
            NotFoundError: If the id is unknown or not a lost item
        """
        source = self._resolve(lost_item_id, ItemKind.LOST)
        return self._find(source)

    def find_matches_for_found(self, found_item_id: str) -> List[MatchRow]:
        """Rank active lost items against a found item.

        Returned matches are still oriented (lost_item_id, found_item_id).

        Raises:
            NotFoundError: If the id is unknown or not a found item
        """
        source = self._resolve(found_item_id, ItemKind.FOUND)
        return self._find(source)

    def find_matches_for_item(self, item_id: str) -> List[MatchRow]:
        """Dispatch to the lost or found entry point based on the item's kind."""
        item = self.db.get_item_by_id(item_id)
        if item is None:
            raise NotFoundError(f"item not found: {item_id}")
        return self._find(item)

    def _resolve(self, item_id: str, kind: ItemKind) -> ItemRow:
        item = self.db.get_item_by_id(item_id)
        if item is None:
            raise NotFoundError(f"item not found: {item_id}")
        if item.kind is not kind:
            raise NotFoundError(f"item {item_id} is a {item.kind.value} item, expected {kind.value}")
        return item

    def _find(self, source: ItemRow) -> List[MatchRow]:
        pool = self.selector.candidate_pool(source)
        debug_logging = logger.isEnabledFor(logging.DEBUG)

        survivors = []
        for candidate in pool:
            if source.kind is ItemKind.LOST:
                lost, found = source, candidate
            else:
                lost, found = candidate, source
            breakdown = evaluate_pair(lost, found, self.scoring_config)

            if debug_logging:
                logger.debug(
                    f"lost={lost.id} vs found={found.id} "
                    f"similarity={breakdown.similarity:.3f} fields={list(breakdown.matched_fields)} "
                    f"notes={breakdown.notes}"
                )

            if breakdown.similarity > self.min_similarity:
                survivors.append((lost, found, breakdown))

        if not survivors:
            return []

        linked = self.selector.linked_item_ids(source.id)
        matches: List[MatchRow] = []
        for lost, found, breakdown in survivors:
            other_id = found.id if source.kind is ItemKind.LOST else lost.id
            if other_id in linked:
                logger.debug(f"skip {lost.id}/{found.id}: match already stored")
                continue
            matches.append(MatchRow(
                lost_item_id=lost.id,
                found_item_id=found.id,
                similarity=breakdown.similarity,
                matched_fields=breakdown.matched_fields,
                status=MatchStatus.PENDING,
            ))

        # Stable: ties keep candidate pool order
        matches.sort(key=lambda m: m.similarity, reverse=True)
        return matches

    # --- Bulk generation -----------------------------------------------------

    def generate_all(self) -> List[MatchRow]:
        """Find and persist matches for every active lost item.

        Idempotent across repeated runs because find_matches skips pairs the
        store already holds; no generator-level memoization is involved.

        Returns:
            Matches persisted by this run
        """
        start = time.time()
        lost_items = self.db.list_items(kind=ItemKind.LOST, status=ItemStatus.ACTIVE)

        if not lost_items:
            logger.debug("No active lost items to match")
            return []

        created: List[MatchRow] = []
        processed = 0
        last_progress_log = 0

        for lost in lost_items:
            processed += 1
            for candidate in self.find_matches(lost.id):
                saved = self._persist(candidate)
                if saved is not None:
                    created.append(saved)

            if self.progress_enabled and processed - last_progress_log >= self.progress_interval:
                log_progress(
                    processed=processed,
                    total=len(lost_items),
                    new=len(created),
                    elapsed_seconds=time.time() - start,
                    item_name="lost items",
                )
                last_progress_log = processed

        self.db.commit()

        duration = time.time() - start
        logger.info(
            f"✓ Created {len(created)} match(es) for {len(lost_items)} active lost item(s) in {duration:.2f}s"
        )
        return created

    @retry(
        stop=stop_after_attempt(2),
        retry=retry_if_exception_type(ConflictError),
        reraise=True,
    )
    def _persist(self, candidate: MatchRow) -> Optional[MatchRow]:
        """Create the match unless the pair appeared in the store meanwhile.

        A ConflictError from a concurrent writer is retried once; the retry
        re-checks the pair first and skips it when the other writer won.
        """
        if self.db.match_exists(candidate.lost_item_id, candidate.found_item_id):
            logger.debug(f"skip {candidate.lost_item_id}/{candidate.found_item_id}: stored concurrently")
            return None
        return self.db.add_match(
            candidate.lost_item_id,
            candidate.found_item_id,
            candidate.similarity,
            candidate.matched_fields,
            status=candidate.status,
        )


__all__ = ["MatchingEngine"]
