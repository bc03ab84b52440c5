"""Forward geocoding adapter using OpenStreetMap Nominatim.

Turns a free-text address ("Moscow", "Tverskaya 7, Moscow") into candidate
coordinates. Same shape as the OSRM client: a blocking ``search`` plus an
asynchronous ``geocode`` that calls back from a worker thread.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Callable, List, Optional

import requests
from dotenv import load_dotenv

from routing.models import Coordinate, GeocodeMatch

load_dotenv()
NOMINATIM_BASE_URL = os.getenv("NOMINATIM_BASE_URL", "https://nominatim.openstreetmap.org")
NOMINATIM_USER_AGENT = os.getenv("NOMINATIM_USER_AGENT")
FALLBACK_UA = "place-tracker/0.1 (contact: example@example.com)"

logger = logging.getLogger(__name__)

if NOMINATIM_USER_AGENT is None:
    logger.warning(
        "NOMINATIM_USER_AGENT not set in environment; using fallback UA. "
        "This may violate Nominatim usage policy."
    )

GeocodeCompletion = Callable[[List[GeocodeMatch], Optional[Exception]], None]


class NominatimError(Exception):
    """Raised when Nominatim answers with something we cannot parse."""
    pass


class NominatimClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 5.0,
        limit: int = 5,
        executor: Optional[Executor] = None,
    ):
        base = base_url or NOMINATIM_BASE_URL
        if base.endswith("/search"):
            base = base.rsplit("/", 1)[0]
        self.base_url = base.rstrip("/")
        self.timeout = timeout
        self.limit = limit
        self.executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="nominatim")
        self._session = requests.Session()
        self._session.headers["User-Agent"] = NOMINATIM_USER_AGENT or FALLBACK_UA

    def search(self, address: str) -> List[GeocodeMatch]:
        """Geocode an address, best match first. Empty list when nothing matches."""
        params = {
            "format": "jsonv2",
            "q": address,
            "limit": str(self.limit),
        }
        resp = self._session.get(f"{self.base_url}/search", params=params, timeout=self.timeout)
        resp.raise_for_status()

        try:
            data = resp.json()
        except ValueError as exc:
            raise NominatimError(f"Nominatim returned invalid JSON for {address!r}") from exc
        if not isinstance(data, list):
            raise NominatimError(f"Unexpected Nominatim payload for {address!r}")

        matches: List[GeocodeMatch] = []
        for item in data:
            try:
                coordinate = Coordinate(float(item["lat"]), float(item["lon"]))
            except (KeyError, TypeError, ValueError):
                logger.debug("Skipping Nominatim item without coordinates: %s", item)
                continue
            matches.append(
                GeocodeMatch(coordinate=coordinate, display_name=item.get("display_name") or address)
            )
        return matches

    def geocode(self, address: str, completion: GeocodeCompletion) -> None:
        """Run ``search`` on the executor and hand the outcome to ``completion``."""

        def _run() -> None:
            try:
                matches, error = self.search(address), None
            except (requests.RequestException, NominatimError) as exc:
                logger.warning("Nominatim geocode error for %r: %s", address, exc)
                matches, error = [], exc
            completion(matches, error)

        self.executor.submit(_run)
