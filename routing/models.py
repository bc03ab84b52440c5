"""
Purpose: Value types shared by the routing and geocoding adapters.
What it does:
- Coordinate (lat, lon) used everywhere inside the app
- GeocodeMatch (one geocoder hit for an address string)
- RouteRequest / Route (what we ask the routing service and what it gives back)
- RouteHandle (the cancellable token for one in-flight route request)

Rule: No HTTP calls, no tracking logic. Models only.
"""
from __future__ import annotations

import threading
import uuid
from concurrent.futures import Future
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float


class TransportMode(str, Enum):
    """
    Maps onto the OSRM profile segment of the URL.
    Only driving is requested by the app today.
    """
    DRIVING = "driving"


@dataclass(frozen=True)
class GeocodeMatch:
    coordinate: Coordinate
    display_name: str


@dataclass(frozen=True)
class RouteRequest:
    origin: Coordinate
    destination: Coordinate
    transport_mode: TransportMode = TransportMode.DRIVING
    allow_alternates: bool = True


@dataclass(frozen=True)
class Route:
    """
    One route returned by the routing service.
    polyline is ordered from origin to destination.
    """
    polyline: List[Coordinate]
    distance_m: float
    eta_s: float

    @property
    def distance_km(self) -> float:
        return self.distance_m / 1000


@dataclass(eq=False)
class RouteHandle:
    """
    Token for one in-flight route request.

    cancel() is idempotent. Once cancelled the client will not deliver
    the completion for this handle, even if the HTTP call already returned.
    """
    request: RouteRequest
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    future: Optional[Future] = None
    _cancelled: threading.Event = field(default_factory=threading.Event, repr=False)

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        self._cancelled.set()
        if self.future is not None:
            self.future.cancel()
