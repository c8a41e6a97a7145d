from .interface import DatabaseInterface
from .sqlite_impl import Database
from .models import (
    Coordinates,
    ItemCategory,
    ItemKind,
    ItemRow,
    ItemStatus,
    Location,
    MatchRow,
    MatchStatus,
)

__all__ = [
    "DatabaseInterface",
    "Database",
    "Coordinates",
    "ItemCategory",
    "ItemKind",
    "ItemRow",
    "ItemStatus",
    "Location",
    "MatchRow",
    "MatchStatus",
]
