#Purpose: Straight-line geofencing math for the map screen.
#Answers "has the user moved far enough to matter?" without touching the network.
#Typical responsibilities:
#great-circle (haversine) distance between two coordinates in meters
#radius check used by the re-centering threshold (e.g. 50 m)
#bounding box of route polylines for the fitted-bounds command
#Output: plain floats / coordinates, never map commands.

from typing import Iterable, Optional, Tuple #for type annotations
from routing.models import Coordinate
import math

EARTH_RADIUS_M = 6_371_000.0 #mean earth radius used by haversine


def haversine_m(a: Coordinate, b: Coordinate) -> float:
    """
    Great-circle distance between two coordinates in meters.
    """
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    delta_lat = lat2 - lat1
    delta_lon = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(delta_lon / 2) ** 2
    )
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(h)))


def outside_radius(anchor: Coordinate, point: Coordinate, radius_m: float) -> bool:
    """
    True when point lies strictly farther than radius_m from anchor.
    A point exactly on the boundary is still inside.
    """
    return haversine_m(anchor, point) > radius_m


def bounding_box(points: Iterable[Coordinate]) -> Optional[Tuple[Coordinate, Coordinate]]:
    """
    (south_west, north_east) corners enclosing every point, or None for no points.
    """
    pts = list(points)
    #defensive : empty polyline edge case
    if not pts:
        return None

    south = min(p.latitude for p in pts)
    north = max(p.latitude for p in pts)
    west = min(p.longitude for p in pts)
    east = max(p.longitude for p in pts)
    return Coordinate(south, west), Coordinate(north, east)


def offset_m(origin: Coordinate, north_m: float, east_m: float) -> Coordinate:
    """
    Move a coordinate by a small north/east offset in meters (flat-earth approximation,
    fine for the few hundred meters a GPS trail covers between fixes).
    """
    d_lat = north_m / EARTH_RADIUS_M
    d_lon = east_m / (EARTH_RADIUS_M * math.cos(math.radians(origin.latitude)))
    return Coordinate(
        origin.latitude + math.degrees(d_lat),
        origin.longitude + math.degrees(d_lon),
    )
