from .authorization_state import (
    AuthorizationStateException,
    AuthorizationStatus,
    TrackingPhase,
    phase_for_status,
    transition_on_authorization,
    transition_on_services_disabled,
)

__all__ = [
    "AuthorizationStateException",
    "AuthorizationStatus",
    "TrackingPhase",
    "phase_for_status",
    "transition_on_authorization",
    "transition_on_services_disabled",
]
