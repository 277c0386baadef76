from __future__ import annotations

import math

from trip_planner.services.types import Coordinate

EARTH_RADIUS_KM = 6371.0
JITTER_DEGREES = 0.00001


def haversine_km(a: Coordinate, b: Coordinate) -> float:
    lat1_rad = math.radians(a.latitude)
    lon1_rad = math.radians(a.longitude)
    lat2_rad = math.radians(b.latitude)
    lon2_rad = math.radians(b.longitude)

    dlat = lat2_rad - lat1_rad
    dlon = lon2_rad - lon1_rad

    h = (
        math.sin(dlat / 2.0) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2.0) ** 2
    )
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(max(0.0, 1 - h)))
    return EARTH_RADIUS_KM * c


def is_finite_coordinate(point: Coordinate) -> bool:
    return math.isfinite(point.latitude) and math.isfinite(point.longitude)


def jitter_coordinate(point: Coordinate, station_id: str) -> Coordinate:
    """Offset a marker by a small amount derived from the station id.

    Stations sharing the exact same coordinates would otherwise render as a
    single marker. The offset depends only on the id, so repeated calls give
    the same position.
    """
    id_hash = sum(ord(char) for char in station_id)
    offset = (id_hash % 10 - 5) * JITTER_DEGREES
    return Coordinate(latitude=point.latitude + offset, longitude=point.longitude + offset)
