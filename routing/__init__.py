#Marks routing as a package.
#Re-exports the public adapters and value types so other modules import from
#routing without knowing internal file names.
#No business logic.

from .models import Coordinate, GeocodeMatch, Route, RouteHandle, RouteRequest, TransportMode
from .osrm_client import OSRMClient, OSRMError
from .nominatim_client import NominatimClient, NominatimError
from .geofence import haversine_m, outside_radius, bounding_box

__all__ = [
    "Coordinate",
    "GeocodeMatch",
    "Route",
    "RouteHandle",
    "RouteRequest",
    "TransportMode",
    "OSRMClient",
    "OSRMError",
    "NominatimClient",
    "NominatimError",
    "haversine_m",
    "outside_radius",
    "bounding_box",
]
