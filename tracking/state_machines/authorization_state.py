from enum import Enum


class AuthorizationStatus(str, Enum):
    """
    What the location source reports about our permission to read the user's position.
    """
    UNDETERMINED = "undetermined"
    AUTHORIZED_WHEN_IN_USE = "authorizedWhenInUse"
    AUTHORIZED_ALWAYS = "authorizedAlways"
    DENIED = "denied"
    RESTRICTED = "restricted"

    @property
    def is_authorized(self) -> bool:
        return self in (AuthorizationStatus.AUTHORIZED_WHEN_IN_USE, AuthorizationStatus.AUTHORIZED_ALWAYS)


class TrackingPhase(str, Enum):
    """
    Where a tracking session is in its lifecycle.
    """
    IDLE = "idle"
    DISABLED = "disabled"
    AWAITING_AUTHORIZATION = "awaitingAuthorization"
    STREAMING = "streaming"
    BLOCKED = "blocked"
    CLOSED = "closed"


class AuthorizationStateException(Exception):
    """Raised when an invalid phase transition is attempted."""
    pass


def phase_for_status(status: AuthorizationStatus) -> TrackingPhase:
    """
    Maps an authorization report onto the phase the session should be in.
    """
    if status.is_authorized:
        return TrackingPhase.STREAMING
    if status in (AuthorizationStatus.DENIED, AuthorizationStatus.RESTRICTED):
        return TrackingPhase.BLOCKED
    return TrackingPhase.AWAITING_AUTHORIZATION


def transition_on_authorization(current: TrackingPhase, status: AuthorizationStatus) -> TrackingPhase:
    """
    Called for every authorization report (the initial check and each external callback).
    BLOCKED is not terminal: a later report from the settings screen is reprocessed.
    Only CLOSED refuses further transitions.
    """
    if current == TrackingPhase.CLOSED:
        raise AuthorizationStateException(f"Cannot apply {status.value} to a closed session")

    return phase_for_status(status)


def transition_on_services_disabled(current: TrackingPhase) -> TrackingPhase:
    if current == TrackingPhase.CLOSED:
        raise AuthorizationStateException("Cannot disable services on a closed session")
    return TrackingPhase.DISABLED
