"""Geofence helpers for ``"lat,lng"`` location strings."""
from __future__ import annotations

import math
from typing import NamedTuple, Optional

from ..core.constants import EARTH_RADIUS_M, GEOFENCE_RADIUS_M
from ..core.exceptions import MalformedLocation


class Point(NamedTuple):
    lat: float
    lng: float


def parse_location(value: Optional[str]) -> Optional[Point]:
    """Parse ``"lat,lng"`` into a Point.

    Returns None for empty input, a wrong number of components, or any
    component that is not a finite number.
    """
    if not value or not value.strip():
        return None

    parts = value.split(",")
    if len(parts) != 2:
        return None

    try:
        lat = float(parts[0])
        lng = float(parts[1])
    except ValueError:
        return None

    if not (math.isfinite(lat) and math.isfinite(lng)):
        return None
    return Point(lat, lng)


def require_location(value: Optional[str], field_name: str = "location") -> Point:
    point = parse_location(value)
    if point is None:
        raise MalformedLocation(f"{field_name} must be 'lat,lng', got {value!r}")
    return point


def format_location(point: Point) -> str:
    return f"{point.lat},{point.lng}"


def distance_meters(a: Point, b: Point) -> float:
    """Great-circle distance between two points using the Haversine formula."""
    lat1_rad = math.radians(a.lat)
    lat2_rad = math.radians(b.lat)
    delta_lat = math.radians(b.lat - a.lat)
    delta_lng = math.radians(b.lng - a.lng)

    h = (math.sin(delta_lat / 2) ** 2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) *
         math.sin(delta_lng / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))

    return EARTH_RADIUS_M * c


def is_outside(point: Point, reference: Point, radius_meters: float = GEOFENCE_RADIUS_M) -> bool:
    return distance_meters(point, reference) > radius_meters
