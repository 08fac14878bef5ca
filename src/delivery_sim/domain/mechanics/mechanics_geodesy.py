import math
from collections.abc import Sequence

from delivery_sim.domain.entities.geography import GeoPoint

EARTH_RADIUS_M = 6_371_000.0


def interpolate(p1: GeoPoint, p2: GeoPoint, t: float) -> GeoPoint:
    # t is not clamped: values outside [0, 1] extrapolate
    return GeoPoint(
        lat=p1.lat + (p2.lat - p1.lat) * t,
        lng=p1.lng + (p2.lng - p1.lng) * t,
    )


def bearing(p1: GeoPoint, p2: GeoPoint) -> float:
    """Initial great-circle bearing from p1 to p2, degrees in [0, 360)."""
    lat1, lat2 = math.radians(p1.lat), math.radians(p2.lat)
    dlng = math.radians(p2.lng - p1.lng)
    y = math.sin(dlng) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(dlng)
    return (math.degrees(math.atan2(y, x)) + 360.0) % 360.0


def distance_m(p1: GeoPoint, p2: GeoPoint) -> float:
    """Haversine distance in meters."""
    lat1, lat2 = math.radians(p1.lat), math.radians(p2.lat)
    dlat = lat2 - lat1
    dlng = math.radians(p2.lng - p1.lng)
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def cumulative_m(route: Sequence[GeoPoint]) -> list[float]:
    cum = [0.0]
    for a, b in zip(route, route[1:]):
        cum.append(cum[-1] + distance_m(a, b))
    return cum


def path_length_m(route: Sequence[GeoPoint]) -> float:
    return cumulative_m(route)[-1]
