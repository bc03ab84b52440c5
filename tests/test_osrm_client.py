import threading
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock, patch

import pytest
import requests

from routing.models import Coordinate, RouteRequest
from routing.osrm_client import OSRMClient, OSRMError


@pytest.fixture
def request_berlin():
    return RouteRequest(
        origin=Coordinate(52.517037, 13.388860),
        destination=Coordinate(52.529407, 13.397634),
    )


def osrm_response(payload):
    response = MagicMock()
    response.json.return_value = payload
    return response


OK_PAYLOAD = {
    "code": "Ok",
    "routes": [
        {
            "distance": 1886.3,
            "duration": 260.5,
            "geometry": {"type": "LineString", "coordinates": [[13.38886, 52.517037], [13.397634, 52.529407]]},
        },
        {
            "distance": 2100.0,
            "duration": 300.0,
            "geometry": {"type": "LineString", "coordinates": [[13.38886, 52.517037], [13.39, 52.52], [13.397634, 52.529407]]},
        },
    ],
}


def test_requires_base_url():
    with patch("routing.osrm_client.BASE_URL", None):
        with pytest.raises(ValueError):
            OSRMClient()


def test_format_coordinates_is_lon_lat():
    client = OSRMClient(base_url="http://osrm.test")
    assert client.format_coordinates([Coordinate(1.5, 2.5), Coordinate(3.0, 4.0)]) == "2.5,1.5;4.0,3.0"


@patch("routing.osrm_client.requests.get")
def test_compute_routes_parses_all_routes(mock_get, request_berlin):
    mock_get.return_value = osrm_response(OK_PAYLOAD)
    client = OSRMClient(base_url="http://osrm.test/")

    routes = client.compute_routes(request_berlin)

    url = mock_get.call_args[0][0]
    params = mock_get.call_args[1]["params"]
    assert url == "http://osrm.test/route/v1/driving/13.38886,52.517037;13.397634,52.529407"
    assert params["alternatives"] == "true"
    assert params["geometries"] == "geojson"

    assert len(routes) == 2
    assert routes[0].distance_m == 1886.3
    assert routes[0].eta_s == 260.5
    assert routes[0].polyline[0] == Coordinate(52.517037, 13.38886)
    assert len(routes[1].polyline) == 3


@patch("routing.osrm_client.requests.get")
def test_no_route_is_empty_result(mock_get, request_berlin):
    mock_get.return_value = osrm_response({"code": "NoRoute", "message": "Impossible route"})

    assert OSRMClient(base_url="http://osrm.test").compute_routes(request_berlin) == []


@patch("routing.osrm_client.requests.get")
def test_other_codes_raise(mock_get, request_berlin):
    mock_get.return_value = osrm_response({"code": "InvalidQuery", "message": "bad"})

    with pytest.raises(OSRMError):
        OSRMClient(base_url="http://osrm.test").compute_routes(request_berlin)


@patch("routing.osrm_client.requests.get")
def test_route_delivers_completion(mock_get, request_berlin):
    mock_get.return_value = osrm_response(OK_PAYLOAD)
    client = OSRMClient(base_url="http://osrm.test", executor=ThreadPoolExecutor(max_workers=1))
    received = []

    handle = client.route(request_berlin, lambda routes, error: received.append((routes, error)))
    handle.future.result(timeout=5)

    routes, error = received[0]
    assert error is None
    assert len(routes) == 2


@patch("routing.osrm_client.requests.get")
def test_route_passes_transport_errors_to_completion(mock_get, request_berlin):
    mock_get.side_effect = requests.ConnectionError("refused")
    client = OSRMClient(base_url="http://osrm.test", executor=ThreadPoolExecutor(max_workers=1))
    received = []

    handle = client.route(request_berlin, lambda routes, error: received.append((routes, error)))
    handle.future.result(timeout=5)

    routes, error = received[0]
    assert routes == []
    assert isinstance(error, requests.ConnectionError)


@patch("routing.osrm_client.requests.get")
def test_cancelled_handle_never_completes(mock_get, request_berlin):
    mock_get.return_value = osrm_response(OK_PAYLOAD)
    executor = ThreadPoolExecutor(max_workers=1)
    client = OSRMClient(base_url="http://osrm.test", executor=executor)
    received = []

    # keep the only worker busy so the route request is still queued
    gate = threading.Event()
    blocker = executor.submit(gate.wait)

    handle = client.route(request_berlin, lambda routes, error: received.append(routes))
    client.cancel(handle)
    gate.set()
    blocker.result(timeout=5)
    executor.shutdown(wait=True)

    assert handle.cancelled
    assert received == []
    mock_get.assert_not_called()
