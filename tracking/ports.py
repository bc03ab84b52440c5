"""
Purpose: The collaborators the tracker talks to, and simple in-process versions of them.
What it does:
- GeocodingClient / RoutingClient / LocationSource / MapPresenter protocols
  (the HTTP implementations of the first two live in routing/)
- ReplayLocationSource: feeds a recorded GPS trail (CSV via pandas) to the tracker
- LoggingMapPresenter: renders nothing, logs and records every map command

Rule: No tracking decisions here. These objects only carry calls in and out.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Protocol, Sequence, Tuple

import pandas as pd

from routing.models import Coordinate, RouteHandle, RouteRequest
from routing.nominatim_client import GeocodeCompletion
from routing.osrm_client import RouteCompletion
from .state_machines.authorization_state import AuthorizationStatus

logger = logging.getLogger(__name__)

FixCallback = Callable[[Coordinate], None]
AuthorizationCallback = Callable[[AuthorizationStatus], None]


class GeocodingClient(Protocol):
    def geocode(self, address: str, completion: GeocodeCompletion) -> None: ...


class RoutingClient(Protocol):
    def route(self, request: RouteRequest, completion: RouteCompletion) -> RouteHandle: ...

    def cancel(self, handle: RouteHandle) -> None: ...


class LocationSource(Protocol):
    def services_enabled(self) -> bool: ...

    def authorization_status(self) -> AuthorizationStatus: ...

    def request_authorization(self) -> None: ...

    def start_updates(self, on_fix: FixCallback) -> None: ...

    def stop_updates(self) -> None: ...

    def current_fix(self) -> Optional[Coordinate]: ...

    def set_authorization_listener(self, listener: Optional[AuthorizationCallback]) -> None: ...


class MapPresenter(Protocol):
    def show_annotation(self, coordinate: Coordinate, title: str, subtitle: Optional[str]) -> None: ...

    def show_user_marker(self, visible: bool) -> None: ...

    def set_region(self, center: Coordinate, span_m: float) -> None: ...

    def draw_polyline(self, points: Sequence[Coordinate]) -> None: ...

    def clear_overlays(self) -> None: ...

    def fit_bounds(self, points: Sequence[Coordinate]) -> None: ...

    def show_alert(self, title: str, message: str) -> None: ...


class ReplayLocationSource:
    """
    A LocationSource that replays a fixed list of fixes.

    Authorization is simulated: request_authorization() switches to
    `grant_status` and reports it to the registered listener, the same way
    the platform calls back after the permission dialog.
    """
    def __init__(
        self,
        fixes: Sequence[Coordinate],
        *,
        status: AuthorizationStatus = AuthorizationStatus.AUTHORIZED_WHEN_IN_USE,
        grant_status: AuthorizationStatus = AuthorizationStatus.AUTHORIZED_WHEN_IN_USE,
        enabled: bool = True,
    ):
        self.fixes = list(fixes)
        self.status = status
        self.grant_status = grant_status
        self.enabled = enabled
        self.authorization_requests = 0
        self._on_fix: Optional[FixCallback] = None
        self._listener: Optional[AuthorizationCallback] = None
        self._last_fix: Optional[Coordinate] = self.fixes[0] if self.fixes else None

    @classmethod
    def from_csv(cls, path: str, **kwargs) -> ReplayLocationSource:
        """
        Load a trail with `lat` and `lon` columns.
        """
        df = pd.read_csv(path)
        fixes = [Coordinate(float(row["lat"]), float(row["lon"])) for _, row in df.iterrows()]
        return cls(fixes, **kwargs)

    @property
    def streaming(self) -> bool:
        return self._on_fix is not None

    def services_enabled(self) -> bool:
        return self.enabled

    def authorization_status(self) -> AuthorizationStatus:
        return self.status

    def request_authorization(self) -> None:
        self.authorization_requests += 1
        self.change_authorization(self.grant_status)

    def change_authorization(self, status: AuthorizationStatus) -> None:
        self.status = status
        if self._listener is not None:
            self._listener(status)

    def set_authorization_listener(self, listener: Optional[AuthorizationCallback]) -> None:
        self._listener = listener

    def start_updates(self, on_fix: FixCallback) -> None:
        self._on_fix = on_fix

    def stop_updates(self) -> None:
        self._on_fix = None

    def current_fix(self) -> Optional[Coordinate]:
        return self._last_fix

    def replay(self) -> int:
        """
        Push every fix to the subscriber, in order. Stops early if updates are stopped.
        Returns the number of fixes delivered.
        """
        delivered = 0
        for fix in self.fixes:
            if self._on_fix is None:
                break
            self._last_fix = fix
            self._on_fix(fix)
            delivered += 1
        return delivered


class LoggingMapPresenter:
    """
    Headless presenter: every command is logged and appended to `commands`
    as (name, args) so a run can be inspected afterwards.
    """
    def __init__(self):
        self.commands: List[Tuple[str, tuple]] = []

    def _record(self, name: str, *args) -> None:
        self.commands.append((name, args))

    def show_annotation(self, coordinate, title, subtitle):
        logger.info("Annotation %s (%s) at %.6f,%.6f", title, subtitle, coordinate.latitude, coordinate.longitude)
        self._record("show_annotation", coordinate, title, subtitle)

    def show_user_marker(self, visible):
        logger.info("User marker %s", "shown" if visible else "hidden")
        self._record("show_user_marker", visible)

    def set_region(self, center, span_m):
        logger.info("Region centred on %.6f,%.6f (%.0f m)", center.latitude, center.longitude, span_m)
        self._record("set_region", center, span_m)

    def draw_polyline(self, points):
        logger.info("Polyline with %d points", len(points))
        self._record("draw_polyline", list(points))

    def clear_overlays(self):
        self._record("clear_overlays")

    def fit_bounds(self, points):
        self._record("fit_bounds", list(points))

    def show_alert(self, title, message):
        logger.warning("Alert: %s: %s", title, message)
        self._record("show_alert", title, message)
