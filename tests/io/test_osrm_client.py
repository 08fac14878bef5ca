"""Tests for the OSRM road-routing client, against a fake aiohttp session."""

import asyncio
import json

import aiohttp
import pytest

from delivery_sim.domain.entities.geography import GeoPoint
from delivery_sim.io import osrm_client
from delivery_sim.io.osrm_client import fetch_road_route, parse_route, route_url

START = GeoPoint(48.8075, 2.3484)
END = GeoPoint(48.7925, 2.3634)


class FakeResponse:
    def __init__(self, status: int = 200, payload=None, exc: Exception | None = None):
        self.status = status
        self.payload = payload
        self.exc = exc

    async def json(self, content_type="application/json"):
        if self.exc:
            raise self.exc
        return self.payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False


class FakeSession:
    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None):
        self.response = response
        self.error = error
        self.calls: list[tuple[str, dict]] = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error:
            raise self.error
        return self.response

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False


def osrm_payload(coords):
    return {"code": "Ok", "routes": [{"geometry": {"type": "LineString", "coordinates": coords}}]}


def test_route_url_uses_lng_lat_order():
    url = route_url(START, END, base_url="https://osrm.example/", profile="driving")
    assert url == "https://osrm.example/route/v1/driving/2.3484,48.8075;2.3634,48.7925"


@pytest.mark.asyncio
async def test_maps_lng_lat_pairs_in_order():
    coords = [[2.3484, 48.8075], [2.35, 48.80], [2.3634, 48.7925]]
    session = FakeSession(FakeResponse(payload=osrm_payload(coords)))

    route = await fetch_road_route(START, END, session=session)

    assert route == (
        GeoPoint(48.8075, 2.3484),
        GeoPoint(48.80, 2.35),
        GeoPoint(48.7925, 2.3634),
    )
    url, kwargs = session.calls[0]
    assert url.endswith("/route/v1/driving/2.3484,48.8075;2.3634,48.7925")
    assert kwargs["params"] == {"overview": "full", "geometries": "geojson"}
    assert kwargs["headers"] == {"Accept": "application/json"}


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [400, 404, 429, 500, 503])
async def test_non_2xx_status_yields_none(status):
    session = FakeSession(FakeResponse(status=status, payload=osrm_payload([[0, 0], [1, 1]])))
    assert await fetch_road_route(START, END, session=session) is None


@pytest.mark.asyncio
@pytest.mark.parametrize("coords", [[], [[2.35, 48.8]]])
async def test_fewer_than_two_coordinates_yields_none(coords):
    session = FakeSession(FakeResponse(payload=osrm_payload(coords)))
    assert await fetch_road_route(START, END, session=session) is None


@pytest.mark.asyncio
async def test_unparsable_body_yields_none():
    session = FakeSession(FakeResponse(exc=json.JSONDecodeError("Expecting value", "<html>", 0)))
    assert await fetch_road_route(START, END, session=session) is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error", [aiohttp.ClientConnectionError("refused"), asyncio.TimeoutError()]
)
async def test_transport_errors_yield_none(error):
    session = FakeSession(error=error)
    assert await fetch_road_route(START, END, session=session) is None


@pytest.mark.asyncio
async def test_opens_its_own_session_when_none_given(monkeypatch):
    fake = FakeSession(FakeResponse(payload=osrm_payload([[2.0, 48.0], [2.1, 48.1]])))
    monkeypatch.setattr(osrm_client.aiohttp, "ClientSession", lambda: fake)

    route = await fetch_road_route(START, END, base_url="http://localhost:5000", profile="cycling")

    assert route == (GeoPoint(48.0, 2.0), GeoPoint(48.1, 2.1))
    assert fake.calls[0][0].startswith("http://localhost:5000/route/v1/cycling/")


@pytest.mark.parametrize(
    "data",
    [
        None,
        {},
        {"routes": []},
        {"routes": [{}]},
        {"routes": [{"geometry": {}}]},
        {"routes": [{"geometry": {"coordinates": "nope"}}]},
        {"routes": [{"geometry": {"coordinates": [[1.0], [2.0]]}}]},
    ],
)
def test_parse_route_rejects_malformed_payloads(data):
    assert parse_route(data) is None
