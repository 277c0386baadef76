from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from trip_planner.exceptions import InvalidPlanInputError
from trip_planner.services.budget import NO_STOP_FRACTION, compute_budget
from trip_planner.services.geo import is_finite_coordinate
from trip_planner.services.route_walker import interpolate_linear, point_at_distance
from trip_planner.services.station_selection import reachable_from, select_nearest
from trip_planner.services.types import Coordinate, PlanResult, RouteInput, Station

logger = logging.getLogger(__name__)

NO_AVAILABLE_STATIONS_WARNING = "no available charging stations for route planning"


def coverage_gap_warning(stop_number: int) -> str:
    return f"coverage gap near stop {stop_number}"


def plan_charging_stops(
    route: RouteInput,
    stations: Sequence[Station],
    vehicle_range_km: float,
) -> PlanResult:
    """Pick charging stops along ``route`` greedily, one per needed stop.

    Each stop is the available station closest to the evenly spaced ideal
    point on the route, among stations within ``NO_STOP_FRACTION`` of the
    range from the previous stop. A stop with no reachable station becomes a
    coverage gap warning and the search for the next stop starts from the
    same position. Only invalid inputs raise.
    """
    _validate_inputs(route, vehicle_range_km)

    budget = compute_budget(route.total_distance_km, vehicle_range_km)
    if budget.stops_needed == 0:
        return PlanResult()

    available_stations = [station for station in stations if station.is_available]
    if not available_stations:
        logger.warning("No available stations among %d catalog entries", len(stations))
        return PlanResult(warnings=(NO_AVAILABLE_STATIONS_WARNING,))

    max_leg_km = vehicle_range_km * NO_STOP_FRACTION
    segment_count = budget.stops_needed + 1
    ideal_spacing_km = route.total_distance_km / segment_count

    current_position = route.origin
    walk_index = 0
    walked_km = 0.0
    stops: list[Station] = []
    warnings: list[str] = []

    for stop_index in range(budget.stops_needed):
        target_distance_km = ideal_spacing_km * (stop_index + 1)

        if route.polyline:
            walk = point_at_distance(route.polyline, target_distance_km, walk_index, walked_km)
            walk_index = walk.reached_index
            walked_km = walk.accumulated_km
            target_point = walk.coordinate
        else:
            target_point = interpolate_linear(
                route.origin, route.destination, (stop_index + 1) / segment_count
            )

        reachable = reachable_from(current_position, available_stations, max_leg_km)
        chosen = select_nearest(target_point, reachable)
        if chosen is None:
            logger.warning(
                "No station within %.1f km for stop %d of %d",
                max_leg_km,
                stop_index + 1,
                budget.stops_needed,
            )
            warnings.append(coverage_gap_warning(stop_index + 1))
            continue

        stops.append(chosen)
        current_position = chosen.position

    logger.debug(
        "Planned %d of %d stops over %.1f km",
        len(stops),
        budget.stops_needed,
        route.total_distance_km,
    )
    return PlanResult(stops=tuple(stops), warnings=tuple(warnings))


def _validate_inputs(route: RouteInput, vehicle_range_km: float) -> None:
    if not math.isfinite(vehicle_range_km) or vehicle_range_km < 0:
        raise InvalidPlanInputError("Vehicle range must be a finite, non-negative number")
    if not math.isfinite(route.total_distance_km) or route.total_distance_km < 0:
        raise InvalidPlanInputError("Route distance must be a finite, non-negative number")

    points: list[Coordinate] = [route.origin, route.destination, *route.polyline]
    if not all(is_finite_coordinate(point) for point in points):
        raise InvalidPlanInputError("Route coordinates must be finite numbers")
