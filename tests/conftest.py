from typing import List, Optional, Tuple

import pytest

from places.models import Place
from routing.geofence import offset_m
from routing.models import Coordinate, GeocodeMatch, Route, RouteHandle, RouteRequest
from tracking.policy import TrackingPolicy
from tracking.ports import LoggingMapPresenter, ReplayLocationSource
from tracking.state_machines.authorization_state import AuthorizationStatus
from tracking.tracker import PlaceTracker


class FakeGeocoder:
    """Holds every geocode call so the test decides when (and how) it completes."""
    def __init__(self):
        self.calls: List[Tuple[str, object]] = []

    def geocode(self, address, completion):
        self.calls.append((address, completion))

    def complete(self, index=-1, matches=None, error=None):
        _, completion = self.calls[index]
        completion(matches or [], error)


class FakeRouter:
    """Records route/cancel calls in one ordered log; completions are fired by the test."""
    def __init__(self):
        self.handles: List[RouteHandle] = []
        self.completions = {}
        self.log: List[Tuple[str, str]] = []

    def route(self, request: RouteRequest, completion) -> RouteHandle:
        handle = RouteHandle(request=request)
        self.handles.append(handle)
        self.completions[handle.id] = completion
        self.log.append(("route", handle.id))
        return handle

    def cancel(self, handle: RouteHandle) -> None:
        handle.cancel()
        self.log.append(("cancel", handle.id))

    def complete(self, handle: RouteHandle, routes: Optional[List[Route]] = None, error=None):
        self.log.append(("complete", handle.id))
        self.completions[handle.id](routes or [], error)


@pytest.fixture
def origin():
    return Coordinate(0.0, 0.0)


@pytest.fixture
def place():
    return Place.new("Bonsai", address="Moscow", category="Restaurant")


@pytest.fixture
def moscow():
    return Coordinate(55.755826, 37.6173)


@pytest.fixture
def geocoder():
    return FakeGeocoder()


@pytest.fixture
def router():
    return FakeRouter()


@pytest.fixture
def presenter():
    return LoggingMapPresenter()


@pytest.fixture
def location_source(origin):
    return ReplayLocationSource(
        [origin, offset_m(origin, 60, 0), offset_m(origin, 70, 0)],
        status=AuthorizationStatus.AUTHORIZED_WHEN_IN_USE,
    )


@pytest.fixture
def tracker(geocoder, router, location_source, presenter):
    return PlaceTracker(
        geocoder=geocoder,
        router=router,
        location_source=location_source,
        presenter=presenter,
        policy=TrackingPolicy(alert_delay_s=0),
    )


@pytest.fixture
def resolved_session(tracker, geocoder, place, moscow):
    """A session whose place already has a destination."""
    session = tracker.open_session(place)
    tracker.resolve_place(session, place)
    geocoder.complete(matches=[GeocodeMatch(moscow, "Moscow, Russia")])
    return session


def commands_named(presenter, name):
    return [args for command, args in presenter.commands if command == name]
