import threading

from routing.models import Coordinate, RouteHandle, RouteRequest
from scripts.run_tracking_simulation import wait_for_route
from tracking.session import TrackingSession


def make_handle():
    point = Coordinate(0.0, 0.0)
    return RouteHandle(request=RouteRequest(origin=point, destination=point))


def test_wait_returns_when_routes_drawn():
    session = TrackingSession(pending_route=make_handle())
    routed = threading.Event()
    routed.set()

    assert wait_for_route(session, routed, wait_seconds=5)


def test_wait_returns_early_when_request_failed():
    # a no-route alert or transport error clears pending_route without routes
    session = TrackingSession(pending_route=None)

    assert wait_for_route(session, threading.Event(), wait_seconds=5, poll_seconds=0.01)


def test_wait_times_out_while_request_pending():
    session = TrackingSession(pending_route=make_handle())

    assert not wait_for_route(session, threading.Event(), wait_seconds=0.05, poll_seconds=0.01)
