from __future__ import annotations

from collections.abc import Sequence

from trip_planner.services.geo import haversine_km
from trip_planner.services.types import Coordinate, WalkResult


def point_at_distance(
    polyline: Sequence[Coordinate],
    target_distance_km: float,
    start_index: int = 0,
    start_km: float = 0.0,
) -> WalkResult:
    """Return the first polyline vertex at or beyond ``target_distance_km``.

    ``start_km`` is the distance already accumulated up to ``start_index``,
    which lets a caller resume from a previous ``WalkResult`` instead of
    re-walking the route from its first point. The returned coordinate is a
    vertex of the polyline, never a point interpolated inside a segment. When
    the target lies beyond the end of the polyline the last vertex is
    returned.
    """
    if not polyline:
        raise ValueError("Cannot walk an empty polyline")
    if start_index < 0:
        raise ValueError("start_index must not be negative")

    last_index = len(polyline) - 1
    index = min(start_index, last_index)
    accumulated_km = start_km

    while accumulated_km < target_distance_km and index < last_index:
        accumulated_km += haversine_km(polyline[index], polyline[index + 1])
        index += 1

    return WalkResult(
        coordinate=polyline[index],
        reached_index=index,
        accumulated_km=accumulated_km,
    )


def interpolate_linear(origin: Coordinate, destination: Coordinate, fraction: float) -> Coordinate:
    return Coordinate(
        latitude=origin.latitude + fraction * (destination.latitude - origin.latitude),
        longitude=origin.longitude + fraction * (destination.longitude - origin.longitude),
    )
