"""
Purpose: Failure taxonomy for the map screen.
What it does:
Every error carries the alert title/message shown to the user, so the tracker
can surface any of them the same way. Which ones are actually surfaced and
which are only logged or raised is decided in tracking.tracker.
"""

from typing import Optional


class TrackingError(Exception):
    """Base class. title/message are what the alert would show."""
    title = "Error"
    message = "Something went wrong"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class GeocodeError(TrackingError):
    """Address could not be resolved (no match or geocoder failure)."""
    title = "Place is not found"

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class ServicesDisabledError(TrackingError):
    title = "Location Services are Disabled"
    message = "To enable it go: Settings -> Privacy -> Location Services and turn On"


class PermissionDeniedError(TrackingError):
    title = "Your location is not Available"
    message = "To give permissions Go to: Settings -> MyPlaces -> Location"


class NoDestinationError(TrackingError):
    """
    Programming error: a route was requested before the place was resolved.
    Raised to the caller, never shown as an alert.
    """
    message = "Destination is not found"


class NoRouteFoundError(TrackingError):
    message = "Direction is not available"


class RoutingTransportError(TrackingError):
    """Routing service could not be reached. Logged only."""
    message = "Routing request failed"

    def __init__(self, cause: Exception):
        super().__init__(f"Routing request failed: {cause}")
        self.cause = cause


class LocationUnavailableError(TrackingError):
    message = "Current location is not found"
