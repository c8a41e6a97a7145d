"""Domain model types for record-store entities.

These dataclasses provide type-safe representations of database rows,
improving IDE support, type checking, and making the data contracts explicit.
"""
from __future__ import annotations
import json
from dataclasses import dataclass, asdict, field
from enum import Enum
from typing import Optional, Dict, Any, Tuple

from ..match.geo import validate_coordinates
from ..errors import InvalidInputError


class ItemKind(str, Enum):
    LOST = "lost"
    FOUND = "found"

    @property
    def opposite(self) -> ItemKind:
        return ItemKind.FOUND if self is ItemKind.LOST else ItemKind.LOST


class ItemCategory(str, Enum):
    ELECTRONICS = "electronics"
    JEWELRY = "jewelry"
    CLOTHING = "clothing"
    BAGS = "bags"
    DOCUMENTS = "documents"
    KEYS = "keys"
    PETS = "pets"
    VEHICLES = "vehicles"
    SPORTS = "sports"
    BOOKS = "books"
    TOYS = "toys"
    OTHER = "other"


class ItemStatus(str, Enum):
    ACTIVE = "active"
    MATCHED = "matched"
    RESOLVED = "resolved"
    EXPIRED = "expired"
    REMOVED = "removed"


class MatchStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    CONTACTED = "contacted"


@dataclass(frozen=True)
class Coordinates:
    """Latitude/longitude pair in degrees, validated on construction."""
    latitude: float
    longitude: float

    def __post_init__(self):
        validate_coordinates(self.latitude, self.longitude)


@dataclass(frozen=True)
class Location:
    name: str = ""
    coordinates: Optional[Coordinates] = None


def _parse_tags(raw) -> Tuple[str, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, (list, tuple)):
        raise InvalidInputError(f"tags must be a list of strings: {raw!r}")
    for tag in raw:
        if not isinstance(tag, str):
            raise InvalidInputError(f"tag must be a string: {tag!r}")
    return tuple(raw)


@dataclass(frozen=True)
class ItemRow:
    """Represents a lost or found report from the items table."""
    id: str
    kind: ItemKind
    category: ItemCategory
    title: str
    description: str
    tags: Tuple[str, ...] = ()
    location: Location = field(default_factory=Location)
    status: ItemStatus = ItemStatus.ACTIVE
    user_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Flatten to a plain dict (enum values, location split into columns)."""
        coords = self.location.coordinates
        return {
            "id": self.id,
            "kind": self.kind.value,
            "category": self.category.value,
            "title": self.title,
            "description": self.description,
            "tags": list(self.tags),
            "location_name": self.location.name,
            "latitude": coords.latitude if coords else None,
            "longitude": coords.longitude if coords else None,
            "status": self.status.value,
            "user_id": self.user_id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ItemRow:
        """Build an ItemRow from a plain dict.

        Accepts either flat location columns (location_name, latitude,
        longitude) or a nested ``location`` object with ``name`` and optional
        ``coordinates`` ({latitude, longitude} or {lat, lng}).

        Raises:
            ValueError: On unknown enum values
            InvalidInputError: On out-of-range coordinates, or tags that are
                not a list of strings
        """
        location = data.get("location")
        if isinstance(location, dict):
            name = location.get("name") or ""
            raw = location.get("coordinates")
            coords = None
            if raw:
                coords = Coordinates(
                    latitude=float(raw["latitude"] if "latitude" in raw else raw["lat"]),
                    longitude=float(raw["longitude"] if "longitude" in raw else raw["lng"]),
                )
        else:
            name = data.get("location_name") or (location if isinstance(location, str) else "") or ""
            lat, lng = data.get("latitude"), data.get("longitude")
            coords = Coordinates(float(lat), float(lng)) if lat is not None and lng is not None else None

        return cls(
            id=str(data["id"]),
            kind=ItemKind(data.get("kind") or data["type"]),
            category=ItemCategory(data.get("category", "other")),
            title=data.get("title") or "",
            description=data.get("description") or "",
            tags=_parse_tags(data.get("tags")),
            location=Location(name=name, coordinates=coords),
            status=ItemStatus(data.get("status", "active")),
            user_id=data.get("user_id") or data.get("userId"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    @classmethod
    def from_row(cls, row) -> ItemRow:
        """Convert sqlite3.Row to ItemRow.

        Args:
            row: sqlite3.Row object with item columns

        Returns:
            ItemRow instance
        """
        data = dict(row)
        data["tags"] = json.loads(row["tags"] or "[]")
        return cls.from_dict(data)


@dataclass
class MatchRow:
    """Represents a lost/found correspondence from the matches table.

    Candidates produced by the matching engine are unpersisted: id,
    created_at and last_updated stay None until the store assigns them.
    """
    lost_item_id: str
    found_item_id: str
    similarity: float
    matched_fields: Tuple[str, ...] = ()
    status: MatchStatus = MatchStatus.PENDING
    notes: Optional[str] = None
    id: Optional[str] = None
    created_at: Optional[str] = None
    last_updated: Optional[str] = None

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    def links(self, item_a: str, item_b: str) -> bool:
        """True when this match joins the two ids, in either role."""
        return {self.lost_item_id, self.found_item_id} == {item_a, item_b}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for output and serialization."""
        data = asdict(self)
        data["matched_fields"] = list(self.matched_fields)
        data["status"] = self.status.value
        return data

    @classmethod
    def from_row(cls, row) -> MatchRow:
        """Convert sqlite3.Row to MatchRow.

        Args:
            row: sqlite3.Row object with match columns

        Returns:
            MatchRow instance
        """
        return cls(
            id=row['id'],
            lost_item_id=row['lost_item_id'],
            found_item_id=row['found_item_id'],
            similarity=row['similarity'],
            matched_fields=tuple(json.loads(row['matched_fields'] or "[]")),
            status=MatchStatus(row['status']),
            notes=row['notes'],
            created_at=row['created_at'],
            last_updated=row['last_updated'],
        )
