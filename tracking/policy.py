"""
Purpose: Central configuration for the map screen's tracking behaviour.
What it does:

Stores all tunable thresholds for re-centering, region size and alerts:

RECENTER_THRESHOLD_M = 50
REGION_SPAN_M = 1000
ALERT_DELAY_S = 1.0

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations
from dataclasses import dataclass

from routing.models import TransportMode


@dataclass(frozen=True)
class TrackingPolicy:
    """
    Central configuration for one tracker instance.
    """

    # --- Re-centering ---
    # The map only follows the user once they moved farther than this from
    # the last centre. Smaller values make the map chase GPS jitter.
    recenter_threshold_m: float = 50.0

    # Width/height of the region shown around the user or a recenter point.
    region_span_m: float = 1000.0

    # --- Alerts ---
    # Delay before the "services disabled" alert so it does not interrupt
    # the first layout of the screen. 0 shows it immediately.
    alert_delay_s: float = 1.0

    # --- Routing ---
    transport_mode: TransportMode = TransportMode.DRIVING
    allow_alternates: bool = True

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        if self.recenter_threshold_m <= 0:
            raise ValueError("recenter_threshold_m must be > 0")

        if self.region_span_m <= 0:
            raise ValueError("region_span_m must be > 0")

        if self.alert_delay_s < 0:
            raise ValueError("alert_delay_s must be >= 0")


def default_tracking_policy() -> TrackingPolicy:
    """
    Convenience factory for the default policy.
    """
    p = TrackingPolicy()
    p.validate()
    return p
