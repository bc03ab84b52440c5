from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock, patch

import pytest
import requests

from routing.models import Coordinate
from routing.nominatim_client import NominatimClient, NominatimError


def nominatim_response(payload):
    resp = MagicMock()
    resp.json.return_value = payload
    resp.raise_for_status.return_value = None
    return resp


def test_search_returns_matches_in_order():
    client = NominatimClient(base_url="http://nominatim.test/search")
    payload = [
        {"lat": "55.7504461", "lon": "37.6174943", "display_name": "Moscow, Central Federal District, Russia"},
        {"lat": "46.7323875", "lon": "-117.0001651", "display_name": "Moscow, Latah County, Idaho"},
    ]

    with patch.object(client._session, "get", return_value=nominatim_response(payload)) as mock_get:
        matches = client.search("Moscow")

    assert mock_get.call_args[0][0] == "http://nominatim.test/search"
    assert mock_get.call_args[1]["params"]["q"] == "Moscow"
    assert [m.coordinate for m in matches] == [
        Coordinate(55.7504461, 37.6174943),
        Coordinate(46.7323875, -117.0001651),
    ]
    assert matches[0].display_name.startswith("Moscow")


def test_search_skips_items_without_coordinates():
    client = NominatimClient(base_url="http://nominatim.test")
    payload = [{"display_name": "broken"}, {"lat": "1", "lon": "2"}]

    with patch.object(client._session, "get", return_value=nominatim_response(payload)):
        matches = client.search("anything")

    assert len(matches) == 1
    assert matches[0].display_name == "anything"


def test_search_rejects_unexpected_payload():
    client = NominatimClient(base_url="http://nominatim.test")

    with patch.object(client._session, "get", return_value=nominatim_response({"error": "nope"})):
        with pytest.raises(NominatimError):
            client.search("Moscow")


def test_geocode_reports_errors_through_completion():
    client = NominatimClient(base_url="http://nominatim.test", executor=ThreadPoolExecutor(max_workers=1))
    received = []

    with patch.object(client._session, "get", side_effect=requests.Timeout("slow")):
        client.geocode("Moscow", lambda matches, error: received.append((matches, error)))
        client.executor.shutdown(wait=True)

    matches, error = received[0]
    assert matches == []
    assert isinstance(error, requests.Timeout)
