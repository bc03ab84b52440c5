#Purpose: The OSRM “adapter/client”.
#Sole responsibility: talk to OSRM via HTTP and return normalized outputs.
#Encapsulates OSRM-specific details:
#coordinate formatting (lon,lat)
#URL construction (/route)
#timeouts and error handling
#parsing response JSON into Route objects (polyline + distance + ETA)
#running requests off the caller's thread and honouring cancellation
#It should not contain tracking rules or map presentation.


from dotenv import load_dotenv
import logging
import os
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Callable, List, Optional
import requests

from routing.models import Coordinate, Route, RouteHandle, RouteRequest

# Read OSRM base URL from environment
# Example in .env:
# BASE_URL=http://router.project-osrm.org
load_dotenv()
BASE_URL = os.getenv("BASE_URL")

logger = logging.getLogger(__name__)

#completion receives (routes, error); exactly one of them is meaningful
RouteCompletion = Callable[[List[Route], Optional[Exception]], None]


class OSRMError(Exception):
    """Custom exception for OSRM client errors."""
    pass


class OSRMClient:
    """
    OSRM Adapter / Client

    Sole responsibility:
    - Talk to OSRM via HTTP
    - Convert internal Coordinate → OSRM (lon,lat)
    - Return normalized Route objects

    route() is the asynchronous entry point used by the tracker: it returns a
    RouteHandle immediately and calls the completion from a worker thread.
    compute_routes() is the blocking call underneath it.
    """
    def __init__(self,
                 base_url: Optional[str] = None,
                 timeout: int = 5,
                 executor: Optional[Executor] = None):
        self.base_url = (base_url or BASE_URL or "").rstrip("/")
        self.timeout = timeout #the time to wait for a response from OSRM before giving up
        self.executor = executor or ThreadPoolExecutor(max_workers=2, thread_name_prefix="osrm")

        if not self.base_url:
            raise ValueError("OSRM base URL not set. Please set it in the .env file.")

    #----------------
    # Internal helpers
    #----------------
    def format_coordinates(self, coords: List[Coordinate]) -> str:
        """Convert list of Coordinate to OSRM format 'lon,lat;lon,lat;...'"""
        return ';'.join(f"{c.longitude},{c.latitude}" for c in coords)

    def _parse_route(self, raw: dict) -> Route:
        geometry = raw.get("geometry") or {}
        #geojson geometry is a list of [lon, lat] pairs
        polyline = [
            Coordinate(latitude=float(lat), longitude=float(lon))
            for lon, lat in geometry.get("coordinates", [])
        ]
        return Route(
            polyline=polyline,
            distance_m=float(raw["distance"]),
            eta_s=float(raw["duration"]),
        )

    #----------------
    # Public methods
    #----------------
    def compute_routes(self, request: RouteRequest) -> List[Route]:
        """
        calls the OSRM /route endpoint for origin -> destination and
        returns every route OSRM offers (the main one first, then alternatives).

        An OSRM "NoRoute" answer is a valid empty result, not an error.
        """
        coordinates = self.format_coordinates([request.origin, request.destination])
        url = f"{self.base_url}/route/v1/{request.transport_mode.value}/{coordinates}"

        response = requests.get(
            url,
            params={
                "overview": "full", # we draw the polyline, so we need the full geometry
                "geometries": "geojson",
                "alternatives": "true" if request.allow_alternates else "false",
            },
            timeout=self.timeout,
        )

        data = response.json()

        code = data.get("code")
        if code == "NoRoute":
            return []
        if code != "Ok":
            raise OSRMError(f"OSRM error: {data.get('message', 'Unknown error')}")

        return [self._parse_route(raw) for raw in data.get("routes", [])]

    def route(self, request: RouteRequest, completion: RouteCompletion) -> RouteHandle:
        """
        Submit a route request and return its handle straight away.
        The completion is skipped entirely if the handle gets cancelled first.
        """
        handle = RouteHandle(request=request)

        def _run() -> None:
            if handle.cancelled:
                return
            try:
                routes, error = self.compute_routes(request), None
            except (requests.RequestException, OSRMError, ValueError, KeyError) as exc:
                routes, error = [], exc

            if handle.cancelled:
                logger.debug("Dropping result of cancelled route request %s", handle.id)
                return
            completion(routes, error)

        handle.future = self.executor.submit(_run)
        return handle

    def cancel(self, handle: RouteHandle) -> None:
        handle.cancel()
