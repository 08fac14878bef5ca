"""OSRM road-routing client.

Talks to an OSRM ``/route`` endpoint and normalizes the GeoJSON geometry into a
Route. Every failure mode is reported as ``None`` so callers can fall back to a
synthetic route.
"""

import asyncio
import logging
from typing import TYPE_CHECKING

import aiohttp

from delivery_sim.domain.entities.geography import GeoPoint, Route

if TYPE_CHECKING:
    from aiohttp import ClientSession

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://router.project-osrm.org"


def route_url(start: GeoPoint, end: GeoPoint, *, base_url: str, profile: str) -> str:
    # OSRM wants lng,lat pairs
    coords = f"{start.lng},{start.lat};{end.lng},{end.lat}"
    return f"{base_url.rstrip('/')}/route/v1/{profile}/{coords}"


def parse_route(data) -> Route | None:
    """Extract ``routes[0].geometry.coordinates`` as GeoPoints, or None if unusable."""
    try:
        coords = data["routes"][0]["geometry"]["coordinates"]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(coords, list) or len(coords) < 2:
        return None
    try:
        return tuple(GeoPoint.from_lnglat(pair) for pair in coords)
    except (TypeError, ValueError):
        return None


async def _get_route(
    session: "ClientSession", url: str
) -> Route | None:
    async with session.get(
        url,
        params={"overview": "full", "geometries": "geojson"},
        headers={"Accept": "application/json"},
    ) as response:
        if not 200 <= response.status < 300:
            logger.info("OSRM returned status %s for %s", response.status, url)
            return None
        try:
            data = await response.json(content_type=None)
        except ValueError as e:
            logger.info("OSRM response is not JSON: %s", e)
            return None
    return parse_route(data)


async def fetch_road_route(
    start: GeoPoint,
    end: GeoPoint,
    *,
    session: "ClientSession | None" = None,
    base_url: str = DEFAULT_BASE_URL,
    profile: str = "driving",
) -> Route | None:
    """
    Fetch a driving route between two points.

    Single attempt, no retry and no timeout beyond the client default. Returns None on
    a non-2xx status, an unparsable body, fewer than two coordinates, or a transport error.
    """
    url = route_url(start, end, base_url=base_url, profile=profile)
    try:
        if session is not None:
            return await _get_route(session, url)
        async with aiohttp.ClientSession() as own:
            return await _get_route(own, url)
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.warning("OSRM request failed for %s: %s", url, e)
        return None
