from __future__ import annotations

from collections.abc import Iterable, Sequence

from trip_planner.services.geo import haversine_km
from trip_planner.services.types import Coordinate, Station


def reachable_from(
    position: Coordinate, stations: Iterable[Station], max_range_km: float
) -> list[Station]:
    return [
        station
        for station in stations
        if haversine_km(position, station.position) <= max_range_km
    ]


def select_nearest(target: Coordinate, candidates: Sequence[Station]) -> Station | None:
    best_station: Station | None = None
    best_distance = float("inf")

    for station in candidates:
        distance = haversine_km(target, station.position)
        # Strict comparison keeps the earliest candidate on ties.
        if best_station is None or distance < best_distance:
            best_station = station
            best_distance = distance

    return best_station
