#Expose the map screen pieces:
#Tracker (the "one object" entry point)
#Session state
#Events / commands it emits
#Error taxonomy

from .tracker import PlaceTracker
from .session import MapMode, TrackingSession
from .events import RecenterCommand, ResolvedAnnotation, RouteComputed
from .policy import TrackingPolicy, default_tracking_policy
from .errors import (
    GeocodeError,
    LocationUnavailableError,
    NoDestinationError,
    NoRouteFoundError,
    PermissionDeniedError,
    RoutingTransportError,
    ServicesDisabledError,
    TrackingError,
)

__all__ = [
    "PlaceTracker",
    "MapMode",
    "TrackingSession",
    "RecenterCommand",
    "ResolvedAnnotation",
    "RouteComputed",
    "TrackingPolicy",
    "default_tracking_policy",
    "GeocodeError",
    "LocationUnavailableError",
    "NoDestinationError",
    "NoRouteFoundError",
    "PermissionDeniedError",
    "RoutingTransportError",
    "ServicesDisabledError",
    "TrackingError",
]
