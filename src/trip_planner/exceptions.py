class TripPlannerError(Exception):
    """Base exception for trip planning errors."""


class ExternalServiceError(TripPlannerError):
    """Raised when an upstream API call fails."""


class InvalidLocationError(TripPlannerError):
    """Raised when an input location cannot be resolved."""


class NoRouteFoundError(TripPlannerError):
    """Raised when a drivable route cannot be generated."""


class InvalidPlanInputError(TripPlannerError):
    """Raised when distances, range or coordinates are negative or not finite."""


class StaleRequestError(TripPlannerError):
    """Raised when a newer planning request superseded the one in flight."""
