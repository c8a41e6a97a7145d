"""Candidate selection utilities for the matching engine.

This module builds the candidate pool for a source item and filters out
pairs the store already links, so the engine only scores and emits pairs
that could become new matches.
"""

from __future__ import annotations
from typing import List, Set

from ..db import DatabaseInterface
from ..db.models import ItemRow, ItemStatus


class CandidateSelector:
    """Helper for selecting candidate items for a source item.

    1. Pool selection: opposite kind, active status, excluding the source
    2. Dedup: drop candidates already linked to the source by a stored match

    Example usage:
        selector = CandidateSelector(db)
        pool = selector.candidate_pool(lost_item)
        linked = selector.linked_item_ids(lost_item.id)
    """

    def __init__(self, db: DatabaseInterface):
        self.db = db

    def candidate_pool(self, source: ItemRow) -> List[ItemRow]:
        """Active items of the opposite kind, in store enumeration order."""
        return [
            item for item in self.db.list_items(kind=source.kind.opposite, status=ItemStatus.ACTIVE)
            if item.id != source.id
        ]

    def linked_item_ids(self, source_id: str) -> Set[str]:
        """Ids that a stored match already pairs with the source, in either role."""
        linked: Set[str] = set()
        for match in self.db.get_matches_for_item(source_id):
            if match.lost_item_id == source_id:
                linked.add(match.found_item_id)
            elif match.found_item_id == source_id:
                linked.add(match.lost_item_id)
        return linked


__all__ = ['CandidateSelector']
