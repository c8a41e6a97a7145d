"""Error kinds raised by the matching core and the record store.

Callers distinguish "no match" (an empty result) from "bad input" (one of
these exceptions). NotFound and InvalidInput are never retried internally;
Conflict is retried once by the bulk generator before it surfaces.
"""


class MatchingError(Exception):
    """Base class for all lost-found-matcher errors."""


class NotFoundError(MatchingError, LookupError):
    """Source item missing, of the wrong kind, or unknown match id."""


class InvalidInputError(MatchingError, ValueError):
    """Malformed input such as out-of-range coordinates or scores."""


class ConflictError(MatchingError):
    """A match for the same lost/found pair already exists in the store."""

    def __init__(self, lost_item_id: str, found_item_id: str):
        super().__init__(f"match already exists for pair ({lost_item_id}, {found_item_id})")
        self.lost_item_id = lost_item_id
        self.found_item_id = found_item_id


__all__ = ["MatchingError", "NotFoundError", "InvalidInputError", "ConflictError"]
