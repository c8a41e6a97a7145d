"""Great-circle distance between two latitude/longitude points."""

from __future__ import annotations
import math
from typing import Tuple

from ..errors import InvalidInputError

EARTH_RADIUS_KM = 6371.0


def validate_coordinates(latitude: float, longitude: float) -> None:
    """Reject non-finite or out-of-range coordinates.

    Raises:
        InvalidInputError: If latitude is outside [-90, 90], longitude is
            outside [-180, 180], or either value is NaN/infinite
    """
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise InvalidInputError(f"coordinates must be finite: ({latitude}, {longitude})")
    if not -90.0 <= latitude <= 90.0:
        raise InvalidInputError(f"latitude out of range [-90, 90]: {latitude}")
    if not -180.0 <= longitude <= 180.0:
        raise InvalidInputError(f"longitude out of range [-180, 180]: {longitude}")


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Haversine distance in kilometres between two points given in degrees."""
    validate_coordinates(lat1, lng1)
    validate_coordinates(lat2, lng2)

    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) * math.sin(d_lat / 2)
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2))
        * math.sin(d_lng / 2) * math.sin(d_lng / 2)
    )
    # Rounding can push a slightly past 1 for antipodal points
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance_km(p1, p2) -> float:
    """Distance between two points exposing ``latitude``/``longitude``.

    Plain ``(lat, lng)`` tuples or lists are accepted as well.
    """
    lat1, lng1 = _as_pair(p1)
    lat2, lng2 = _as_pair(p2)
    return haversine_km(lat1, lng1, lat2, lng2)


def _as_pair(point) -> Tuple[float, float]:
    if isinstance(point, (tuple, list)):
        return float(point[0]), float(point[1])
    return float(point.latitude), float(point.longitude)


__all__ = ["EARTH_RADIUS_KM", "validate_coordinates", "haversine_km", "distance_km"]
