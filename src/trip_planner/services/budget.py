from __future__ import annotations

import math

from trip_planner.services.types import RangeBudget

# The two margins are independent: stops are spaced at 70% of range while a
# leg may still reach up to 80% of range from the current position.
NO_STOP_FRACTION = 0.8
INTER_STOP_FRACTION = 0.7


def compute_budget(total_distance_km: float, vehicle_range_km: float) -> RangeBudget:
    no_stop_threshold_km = vehicle_range_km * NO_STOP_FRACTION
    inter_stop_threshold_km = vehicle_range_km * INTER_STOP_FRACTION

    if vehicle_range_km <= 0 or total_distance_km <= no_stop_threshold_km:
        return RangeBudget(
            stops_needed=0,
            no_stop_threshold_km=no_stop_threshold_km,
            inter_stop_threshold_km=inter_stop_threshold_km,
        )

    stops_needed = max(0, math.ceil(total_distance_km / inter_stop_threshold_km) - 1)
    return RangeBudget(
        stops_needed=stops_needed,
        no_stop_threshold_km=no_stop_threshold_km,
        inter_stop_threshold_km=inter_stop_threshold_km,
    )
