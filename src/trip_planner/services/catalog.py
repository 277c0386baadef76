from __future__ import annotations

import math
from collections.abc import Iterable

from trip_planner.models import ChargingStation
from trip_planner.services.geo import jitter_coordinate
from trip_planner.services.types import Coordinate, Station


class StationCatalog:
    def load(self, compatible_charger_types: Iterable[str] | None = None) -> list[Station]:
        wanted_types = frozenset(compatible_charger_types or ())

        rows = ChargingStation.objects.filter(
            latitude__isnull=False,
            longitude__isnull=False,
        ).only(
            "id",
            "station_id",
            "name",
            "latitude",
            "longitude",
            "status",
            "charger_types",
        )

        stations: list[Station] = []
        for row in rows.order_by("id").iterator(chunk_size=1000):
            if not self._has_usable_position(row.latitude, row.longitude):
                continue
            station = row.to_station()
            if wanted_types and not station.charger_types & wanted_types:
                continue
            stations.append(station)

        return stations

    def markers(self) -> list[tuple[Station, Coordinate]]:
        """Pair each station with the position its map marker should use.

        The first station at a given position keeps it; later ones sharing the
        same coordinates (to 5 decimal places) get a small id-derived offset.
        """
        seen_positions: set[tuple[float, float]] = set()
        markers: list[tuple[Station, Coordinate]] = []
        for station in self.load():
            key = (round(station.latitude, 5), round(station.longitude, 5))
            position = station.position
            if key in seen_positions:
                position = jitter_coordinate(position, station.id)
            seen_positions.add(key)
            markers.append((station, position))
        return markers

    @staticmethod
    def _has_usable_position(latitude: float | None, longitude: float | None) -> bool:
        if latitude is None or longitude is None:
            return False
        if not (math.isfinite(latitude) and math.isfinite(longitude)):
            return False
        return not (latitude == 0 and longitude == 0)
