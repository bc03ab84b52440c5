"""
Purpose: What the tracker hands back to its callers.
- ResolvedAnnotation: a geocoded place ready to pin on the map
- RecenterCommand: move the visible region to a new centre
- RouteComputed: one route ready to draw
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from routing.models import Coordinate, Route


@dataclass(frozen=True)
class ResolvedAnnotation:
    coordinate: Coordinate
    title: str
    subtitle: Optional[str] = None


@dataclass(frozen=True)
class RecenterCommand:
    center: Coordinate
    span_m: float


@dataclass(frozen=True)
class RouteComputed:
    route: Route
    generation: int
