import argparse
import logging
import threading
import time

from places.store import PlaceStore
from routing.nominatim_client import NominatimClient
from routing.osrm_client import OSRMClient
from tracking.ports import LoggingMapPresenter, ReplayLocationSource
from tracking.policy import TrackingPolicy
from tracking.tracker import PlaceTracker


def wait_for_route(session, routed, wait_seconds, poll_seconds=0.2):
    """
    Wait until routes are drawn or the request finished some other way
    (no-route alert, transport error). The tracker clears pending_route
    on every completion, so polling it covers the failure paths too.
    Returns False only on timeout.
    """
    deadline = time.monotonic() + wait_seconds
    while time.monotonic() < deadline:
        if routed.wait(poll_seconds):
            return True
        if session.pending_route is None:
            return True
    return False


def run_simulation(place_name=None, places_path="places.csv", trail_path="mock_trail.csv", wait_seconds=15.0):
    store = PlaceStore(places_path)
    places = store.load_all()
    if not places:
        print(f"No places in '{places_path}'. Run scripts/generate_mock_places.py first.")
        return

    place = next((p for p in places if p.name == place_name), places[0])
    print(f"Tracking '{place.name}' ({place.address})")

    presenter = LoggingMapPresenter()
    location_source = ReplayLocationSource.from_csv(trail_path)
    tracker = PlaceTracker(
        geocoder=NominatimClient(),
        router=OSRMClient(timeout=10),
        location_source=location_source,
        presenter=presenter,
        policy=TrackingPolicy(alert_delay_s=0),
    )
    session = tracker.open_session(place)

    # 1. Resolve the place and wait for the geocoder
    resolved = threading.Event()
    tracker.resolve_place(session, place, on_resolved=lambda outcome: resolved.set())
    if not resolved.wait(wait_seconds):
        print("Geocoder did not answer in time.")
        tracker.teardown(session)
        return

    # 2. Ask for permission and start streaming
    tracker.begin_tracking(session)

    # 3. Route from the first fix, then replay the trail
    if session.destination is not None:
        routed = threading.Event()
        handle = tracker.request_route(session, on_routes=lambda events: routed.set())
        if handle is not None and not wait_for_route(session, routed, wait_seconds):
            print("Routing did not answer in time.")

    delivered = location_source.replay()
    tracker.teardown(session)

    recenters = sum(1 for name, _ in presenter.commands if name == "set_region")
    polylines = sum(1 for name, _ in presenter.commands if name == "draw_polyline")
    print(f"\nReplayed {delivered} fixes: {recenters} recenters, {polylines} routes drawn.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Replay a GPS trail against one saved place.")
    parser.add_argument("--place", default=None)
    parser.add_argument("--places", default="places.csv")
    parser.add_argument("--trail", default="mock_trail.csv")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    run_simulation(place_name=args.place, places_path=args.places, trail_path=args.trail)
