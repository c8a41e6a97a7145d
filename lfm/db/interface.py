from __future__ import annotations
"""Record-store interface abstraction for testability.

This interface defines the contract used by the matching engine and the
service layer. A concrete SQLite implementation (`Database`) and an in-memory
mock used in unit tests both implement this for dependency injection.

The matching core needs five operations: get_item_by_id, list_items,
get_matches_for_item, add_match and update_match_status. The remaining
methods serve the service layer and the CLI. Keep write operations explicit
(no generic execute) to preserve test clarity.
"""
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence

from .models import ItemRow, ItemKind, ItemStatus, MatchRow, MatchStatus


class DatabaseInterface(ABC):
    # --- Items ---
    @abstractmethod
    def upsert_item(self, item: ItemRow) -> ItemRow:
        """Create or replace an item; the store stamps created_at/updated_at."""
        ...

    @abstractmethod
    def get_item_by_id(self, item_id: str) -> Optional[ItemRow]: ...

    @abstractmethod
    def list_items(self, kind: ItemKind | None = None, status: ItemStatus | None = None) -> List[ItemRow]:
        """List items filtered by kind and/or status.

        Order is stable (insertion order) so match ranking ties are
        reproducible.
        """
        ...

    @abstractmethod
    def get_items_by_user(self, user_id: str) -> List[ItemRow]: ...

    @abstractmethod
    def count_items(self, kind: ItemKind | None = None, status: ItemStatus | None = None) -> int: ...

    # --- Matches ---
    @abstractmethod
    def get_matches_for_item(self, item_id: str) -> List[MatchRow]:
        """All stored matches where the item is either the lost or found side."""
        ...

    @abstractmethod
    def add_match(
        self,
        lost_item_id: str,
        found_item_id: str,
        similarity: float,
        matched_fields: Sequence[str],
        status: MatchStatus = MatchStatus.PENDING,
    ) -> MatchRow:
        """Persist a new match, assigning id and timestamps.

        Raises:
            NotFoundError: If either item does not exist
            InvalidInputError: If the items are not (lost, found) or the
                similarity is outside [0, 1]
            ConflictError: If a match for the unordered pair already exists
        """
        ...

    @abstractmethod
    def update_match_status(self, match_id: str, status: MatchStatus, notes: str | None = None) -> Optional[MatchRow]:
        """Change status (and notes when given). Returns None for unknown ids."""
        ...

    @abstractmethod
    def get_match_by_id(self, match_id: str) -> Optional[MatchRow]: ...

    @abstractmethod
    def get_all_matches(self) -> List[MatchRow]: ...

    @abstractmethod
    def count_matches(self) -> int: ...

    @abstractmethod
    def get_match_status_counts(self) -> Dict[str, int]:
        """Count of matches grouped by status value (e.g. {'pending': 3})."""
        ...

    def match_exists(self, item_a: str, item_b: str) -> bool:
        """True when a stored match links the two ids in either role."""
        return any(m.links(item_a, item_b) for m in self.get_matches_for_item(item_a))

    # --- Meta / lifecycle ---
    @abstractmethod
    def set_meta(self, key: str, value: str): ...

    @abstractmethod
    def get_meta(self, key: str) -> Optional[str]: ...

    @abstractmethod
    def commit(self): ...

    @abstractmethod
    def close(self): ...

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


__all__ = ["DatabaseInterface"]
