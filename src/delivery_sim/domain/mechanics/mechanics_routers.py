import logging
import math

import numpy as np

from delivery_sim.app.protocols import RoutePlanner
from delivery_sim.domain.entities.geography import GeoPoint, Route
from delivery_sim.domain.mechanics.mechanics_geodesy import interpolate
from delivery_sim.io.osrm_client import fetch_road_route

logger = logging.getLogger(__name__)

STEPS = 25
OFFSET_DEG = 0.015  # ~1.5-1.7 km from the destination
OFFSET_JITTER_DEG = 0.008
WOBBLE_AMPLITUDE_DEG = 0.0015
WOBBLE_FREQUENCY = 3


def _offset(rng: np.random.Generator) -> float:
    return (rng.random() - 0.5) * OFFSET_JITTER_DEG + OFFSET_DEG


def generate_route(
    dest_lat: float, dest_lng: float, rng: np.random.Generator | None = None
) -> Route:
    """
    Synthesize a street-looking route from a random start ~2 km away to the destination.

    The straight start->dest line is cut into STEPS+1 waypoints and each one is pushed
    off the line by an S-curve wobble that decays to zero at the destination. Even
    waypoints move mostly in latitude, odd ones mostly in longitude.
    """
    rng = rng if rng is not None else np.random.default_rng()
    off_lat = _offset(rng)
    off_lng = _offset(rng)

    start = GeoPoint(dest_lat + off_lat, dest_lng - off_lng)
    end = GeoPoint(dest_lat, dest_lng)

    route: list[GeoPoint] = []
    for i in range(STEPS + 1):
        t = i / STEPS
        base = interpolate(start, end, t)
        wobble = math.sin(t * math.pi * WOBBLE_FREQUENCY) * WOBBLE_AMPLITUDE_DEG * (1 - t)
        if i % 2 == 0:
            route.append(GeoPoint(base.lat + wobble, base.lng - 0.5 * wobble))
        else:
            route.append(GeoPoint(base.lat - 0.5 * wobble, base.lng + wobble))
    # interpolation drift must never leave us short of the door
    route[-1] = end
    return tuple(route)


class SyntheticRoutePlanner(RoutePlanner):
    def __init__(self, rng: np.random.Generator):
        self.rng = rng

    async def plan(self, dest: GeoPoint) -> Route:
        return generate_route(dest.lat, dest.lng, self.rng)


class RoadRoutePlanner(RoutePlanner):
    """Road geometry from an OSRM server, starting where the synthetic route would."""

    def __init__(self, rng: np.random.Generator, *, base_url: str, profile: str, session=None):
        self.rng = rng
        self.base_url, self.profile, self.session = base_url, profile, session

    async def plan(self, dest: GeoPoint) -> Route:
        synthetic = generate_route(dest.lat, dest.lng, self.rng)
        road = await fetch_road_route(
            synthetic[0],
            dest,
            session=self.session,
            base_url=self.base_url,
            profile=self.profile,
        )
        if road is None:
            logger.warning("road route unavailable, using synthetic route")
            return synthetic
        if road[-1] != dest:
            road = (*road, dest)
        return road
