from __future__ import annotations
import pytest

from lfm.db.models import Coordinates, ItemCategory, ItemKind, ItemRow, ItemStatus, Location
from .mock_database import MockDatabase


def make_item(item_id: str, kind: str = "lost", **overrides) -> ItemRow:
    """Build an ItemRow with sensible defaults; coords=(lat, lng) is a shortcut."""
    coords = overrides.pop("coords", None)
    location_name = overrides.pop("location_name", "Central Station")
    base = dict(
        id=item_id,
        kind=ItemKind(kind),
        category=ItemCategory.ELECTRONICS,
        title="Black leather wallet",
        description="Lost near the ticket machines",
        tags=("wallet", "black"),
        location=Location(
            name=location_name,
            coordinates=Coordinates(*coords) if coords else None,
        ),
        status=ItemStatus.ACTIVE,
    )
    for key in ("category", "status"):
        if key in overrides and isinstance(overrides[key], str):
            overrides[key] = {"category": ItemCategory, "status": ItemStatus}[key](overrides[key])
    if "tags" in overrides:
        overrides["tags"] = tuple(overrides["tags"])
    base.update(overrides)
    return ItemRow(**base)


@pytest.fixture
def mock_db():
    return MockDatabase()


@pytest.fixture
def sample_lost():
    return make_item(
        "lost-1",
        "lost",
        category="electronics",
        title="iPhone 15 Pro in Blue Case",
        description="Left my phone on the bench at the park entrance",
        tags=["iphone", "blue case"],
        location_name="Riverside Park",
    )


@pytest.fixture
def sample_found():
    return make_item(
        "found-1",
        "found",
        category="electronics",
        title="Found iPhone blue case",
        description="Phone found on a bench near the park entrance",
        tags=["iphone", "blue"],
        location_name="Riverside Park, north gate",
    )
