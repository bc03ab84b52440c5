"""
Purpose: State for one map screen (a tracking session).
What it does:
- Remembers which place is shown and its resolved coordinate (destination)
- Holds the single in-flight route handle and the generation counters that
  let late callbacks recognise they are stale
- Holds the last map centre and the authorization phase

Every read-modify-write of these fields happens under `lock`.
The tracker owns the transitions; this module only stores state.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from places.models import Place
from routing.models import Coordinate, RouteHandle
from .state_machines.authorization_state import AuthorizationStatus, TrackingPhase


class MapMode(str, Enum):
    """
    SHOW_PLACE: the screen opened to show a saved place.
    PICK_ADDRESS: the screen opened to pick an address; follows the user straight away.
    """
    SHOW_PLACE = "showPlace"
    PICK_ADDRESS = "getAddress"


@dataclass
class TrackingSession:
    place: Optional[Place] = None
    mode: MapMode = MapMode.SHOW_PLACE

    destination: Optional[Coordinate] = None
    last_center: Optional[Coordinate] = None

    pending_route: Optional[RouteHandle] = None
    route_generation: int = 0
    completed_route_generation: int = 0
    geocode_generation: int = 0

    alert_timer: Optional[threading.Timer] = field(default=None, repr=False, compare=False)

    authorization_state: AuthorizationStatus = AuthorizationStatus.UNDETERMINED
    phase: TrackingPhase = TrackingPhase.IDLE
    streaming: bool = False

    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    @property
    def closed(self) -> bool:
        return self.phase == TrackingPhase.CLOSED

    def next_route_generation(self) -> int:
        self.route_generation += 1
        return self.route_generation

    def next_geocode_generation(self) -> int:
        self.geocode_generation += 1
        return self.geocode_generation
