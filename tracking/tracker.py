"""
Purpose: The map screen's decision engine (the "glue").
What it does:
Takes a place and a stream of GPS fixes, and decides when to geocode the place,
when to (re)issue a route request and cancel the old one, and when the map should
follow the user. Everything it decides is pushed to the MapPresenter.

Geocoding and routing answer asynchronously. Each request is tagged with the
session's generation counter; a callback whose generation is no longer current
(superseded, or the session was torn down) is dropped.
"""

from __future__ import annotations

import logging
import threading
from functools import partial
from typing import Callable, List, Optional, Union

from places.models import Place
from routing.geofence import bounding_box, outside_radius
from routing.models import Coordinate, GeocodeMatch, Route, RouteHandle, RouteRequest
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
from .events import RecenterCommand, ResolvedAnnotation, RouteComputed
from .policy import TrackingPolicy, default_tracking_policy
from .ports import GeocodingClient, LocationSource, MapPresenter, RoutingClient
from .session import MapMode, TrackingSession
from .state_machines.authorization_state import (
    AuthorizationStatus,
    TrackingPhase,
    transition_on_authorization,
    transition_on_services_disabled,
)

logger = logging.getLogger(__name__)

GeocodeOutcome = Union[ResolvedAnnotation, GeocodeError]


class PlaceTracker:
    """
    Mediates one place's geocoding, the user's live position and route (re)computation.

    Typical lifecycle:
        session = tracker.open_session(place)
        tracker.resolve_place(session, place)
        tracker.begin_tracking(session)
        tracker.request_route(session)
        ...fixes arrive through handle_fix...
        tracker.teardown(session)
    """
    def __init__(
        self,
        geocoder: GeocodingClient,
        router: RoutingClient,
        location_source: LocationSource,
        presenter: MapPresenter,
        policy: Optional[TrackingPolicy] = None,
    ):
        self.geocoder = geocoder
        self.router = router
        self.location_source = location_source
        self.presenter = presenter
        self.policy = policy or default_tracking_policy()
        # session whose callback is registered on the location source
        self._listening_session: Optional[TrackingSession] = None

    def open_session(self, place: Optional[Place] = None, mode: MapMode = MapMode.SHOW_PLACE) -> TrackingSession:
        return TrackingSession(place=place, mode=mode)

    # ------------------------------------------------------------------
    # Geocode resolution
    # ------------------------------------------------------------------

    def resolve_place(
        self,
        session: TrackingSession,
        place: Place,
        on_resolved: Optional[Callable[[GeocodeOutcome], None]] = None,
    ) -> None:
        """
        Geocode the place's address and pin it on the map.

        Always issues a new geocoder request. Switching to another place drops
        the previous destination at once, so no route can target the old place.
        """
        with session.lock:
            if session.closed:
                logger.debug("resolve_place on closed session ignored")
                return
            if session.place != place:
                session.destination = None
            session.place = place
            generation = session.next_geocode_generation()

        if not place.address:
            self._on_geocode_complete(session, place, generation, on_resolved, [], None)
            return

        self.geocoder.geocode(
            place.address,
            partial(self._on_geocode_complete, session, place, generation, on_resolved),
        )

    def _on_geocode_complete(
        self,
        session: TrackingSession,
        place: Place,
        generation: int,
        on_resolved: Optional[Callable[[GeocodeOutcome], None]],
        matches: List[GeocodeMatch],
        error: Optional[Exception],
    ) -> None:
        with session.lock:
            if session.closed or generation != session.geocode_generation:
                logger.debug("Discarding stale geocode result for %s", place.name)
                return

            outcome: GeocodeOutcome
            if not place.address:
                outcome = GeocodeError(f"{place.name} has no address")
            elif error is not None:
                outcome = GeocodeError(f"Could not geocode {place.address!r}: {error}")
            elif not matches:
                outcome = GeocodeError(f"No match for {place.address!r}")
            else:
                coordinate = matches[0].coordinate
                session.destination = coordinate
                outcome = ResolvedAnnotation(coordinate=coordinate, title=place.name, subtitle=place.category)

            if isinstance(outcome, GeocodeError):
                logger.warning("Geocoding failed for %s: %s", place.name, outcome.reason)
                self._alert(outcome)
            else:
                self.presenter.show_annotation(outcome.coordinate, outcome.title, outcome.subtitle)

        if on_resolved is not None:
            on_resolved(outcome)

    # ------------------------------------------------------------------
    # Authorization
    # ------------------------------------------------------------------

    def begin_tracking(self, session: TrackingSession) -> None:
        """
        Check location services and permission, then start following the user
        if we are allowed to.
        """
        with session.lock:
            if session.closed:
                logger.debug("begin_tracking on closed session ignored")
                return

            self.location_source.set_authorization_listener(
                lambda status: self.on_authorization_changed(session, status)
            )
            self._listening_session = session

            if not self.location_source.services_enabled():
                session.phase = transition_on_services_disabled(session.phase)
                logger.info("Location services disabled; tracking halted")
                self._alert_later(session, ServicesDisabledError())
                return

            self._apply_authorization(session, self.location_source.authorization_status())

    def on_authorization_changed(self, session: TrackingSession, status: AuthorizationStatus) -> None:
        """
        Entry point for the location source's authorization callback.
        """
        with session.lock:
            if session.closed:
                logger.debug("Authorization change to %s after teardown ignored", status.value)
                return
            self._apply_authorization(session, status)

    def _apply_authorization(self, session: TrackingSession, status: AuthorizationStatus) -> None:
        previous = session.authorization_state
        previous_phase = session.phase
        session.authorization_state = status
        session.phase = transition_on_authorization(session.phase, status)
        if session.phase != previous_phase:
            self._cancel_alert(session)
        logger.debug("Authorization %s -> %s (phase %s)", previous.value, status.value, session.phase.value)

        if session.phase == TrackingPhase.STREAMING:
            if not session.streaming:
                self.location_source.start_updates(partial(self.handle_fix, session))
                session.streaming = True
            self.presenter.show_user_marker(True)
            if session.mode == MapMode.PICK_ADDRESS:
                self._show_user_location(session)
            return

        if session.streaming:
            self._stop_streaming(session)
            self.presenter.show_user_marker(False)

        if status == AuthorizationStatus.UNDETERMINED:
            self.location_source.request_authorization()
        elif status == AuthorizationStatus.DENIED:
            # one alert per denial, not per repeated report
            if previous != AuthorizationStatus.DENIED:
                self._alert_later(session, PermissionDeniedError())
        else:
            logger.info("Location access restricted; tracking blocked")

    def _show_user_location(self, session: TrackingSession) -> None:
        fix = self.location_source.current_fix()
        if fix is not None:
            self.presenter.set_region(fix, self.policy.region_span_m)

    # ------------------------------------------------------------------
    # Route lifecycle
    # ------------------------------------------------------------------

    def request_route(
        self,
        session: TrackingSession,
        current_fix: Optional[Coordinate] = None,
        on_routes: Optional[Callable[[List[RouteComputed]], None]] = None,
    ) -> Optional[RouteHandle]:
        """
        Ask for routes from the user's position to the resolved place.

        Supersedes any route request still in flight for this session: the old
        handle is cancelled and its late result will be dropped.

        Raises NoDestinationError if the place has not been resolved yet.
        """
        with session.lock:
            if session.closed:
                logger.debug("request_route on closed session ignored")
                return None
            if session.destination is None:
                raise NoDestinationError()

            origin = current_fix or self.location_source.current_fix()
            if origin is None:
                self._alert(LocationUnavailableError())
                return None

            request = RouteRequest(
                origin=origin,
                destination=session.destination,
                transport_mode=self.policy.transport_mode,
                allow_alternates=self.policy.allow_alternates,
            )

            self._cancel_pending(session)
            self.presenter.clear_overlays()
            generation = session.next_route_generation()

            handle = self.router.route(
                request,
                partial(self._on_route_complete, session, generation, on_routes),
            )
            # the completion may already have run on this thread
            if session.completed_route_generation < generation:
                session.pending_route = handle
            return handle

    def _on_route_complete(
        self,
        session: TrackingSession,
        generation: int,
        on_routes: Optional[Callable[[List[RouteComputed]], None]],
        routes: List[Route],
        error: Optional[Exception],
    ) -> None:
        events: List[RouteComputed] = []
        with session.lock:
            if session.closed or generation != session.route_generation:
                logger.debug(
                    "Discarding stale route result (generation %d, current %d)",
                    generation, session.route_generation,
                )
                return

            session.pending_route = None
            session.completed_route_generation = generation

            if error is not None:
                logger.warning("%s", RoutingTransportError(error))
                return

            if not routes:
                self._alert(NoRouteFoundError())
                return

            points: List[Coordinate] = []
            for route in routes:
                self.presenter.draw_polyline(route.polyline)
                logger.info("Distance to place: %.1f km, travel time: %.0f s", route.distance_km, route.eta_s)
                points.extend(route.polyline)
                events.append(RouteComputed(route=route, generation=generation))

            box = bounding_box(points)
            if box is not None:
                self.presenter.fit_bounds(list(box))

        if on_routes is not None:
            on_routes(events)

    def _cancel_pending(self, session: TrackingSession) -> None:
        if session.pending_route is not None:
            logger.debug("Cancelling route request %s", session.pending_route.id)
            self.router.cancel(session.pending_route)
            session.pending_route = None

    # ------------------------------------------------------------------
    # Re-centering
    # ------------------------------------------------------------------

    def on_position_fix(
        self,
        session: TrackingSession,
        fix: Coordinate,
        map_center: Optional[Coordinate] = None,
    ) -> Optional[RecenterCommand]:
        """
        Decide whether the map should follow the user to `fix`.

        The first fix of a session only primes last_center. After that the map
        moves once the user is more than the threshold away from the reference
        point (last_center, or `map_center` when the caller knows the visible centre).
        """
        with session.lock:
            if session.closed:
                return None

            if session.last_center is None:
                session.last_center = fix
                return None

            reference = map_center or session.last_center
            if not outside_radius(reference, fix, self.policy.recenter_threshold_m):
                return None

            session.last_center = fix
            return RecenterCommand(center=fix, span_m=self.policy.region_span_m)

    def handle_fix(self, session: TrackingSession, fix: Coordinate) -> Optional[RecenterCommand]:
        """
        Location source callback: run the threshold check and move the map if needed.
        """
        command = self.on_position_fix(session, fix)
        if command is not None:
            self.presenter.set_region(command.center, command.span_m)
        return command

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def teardown(self, session: TrackingSession) -> None:
        """
        Close the session: cancel the route in flight and stop location updates.
        Safe to call more than once.
        """
        with session.lock:
            if session.closed:
                return

            self._cancel_pending(session)
            self._cancel_alert(session)
            if session.streaming:
                self._stop_streaming(session)
            if self._listening_session is session:
                self.location_source.set_authorization_listener(None)
                self._listening_session = None

            session.phase = TrackingPhase.CLOSED
            # anything still in flight is now stale
            session.next_route_generation()
            session.next_geocode_generation()
            logger.debug("Tracking session closed")

    def _stop_streaming(self, session: TrackingSession) -> None:
        self.location_source.stop_updates()
        session.streaming = False

    # ------------------------------------------------------------------
    # Alerts
    # ------------------------------------------------------------------

    def _alert(self, error: TrackingError) -> None:
        self.presenter.show_alert(error.title, error.message)

    def _alert_later(self, session: TrackingSession, error: TrackingError) -> None:
        """
        Show an alert after policy.alert_delay_s so it does not fight the first layout.
        """
        delay = self.policy.alert_delay_s
        if delay <= 0:
            self._alert(error)
            return

        scheduled_phase = session.phase

        def _fire() -> None:
            with session.lock:
                if session.alert_timer is not timer:
                    return
                session.alert_timer = None
                # the alert only makes sense in the phase that raised it
                if session.phase != scheduled_phase:
                    return
                self._alert(error)

        self._cancel_alert(session)
        timer = threading.Timer(delay, _fire)
        timer.daemon = True
        session.alert_timer = timer
        timer.start()

    def _cancel_alert(self, session: TrackingSession) -> None:
        if session.alert_timer is not None:
            session.alert_timer.cancel()
            session.alert_timer = None
