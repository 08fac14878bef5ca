from dataclasses import dataclass


# Core geometry types used by mechanics
@dataclass(frozen=True)
class GeoPoint:
    lat: float  # WGS84 degrees
    lng: float

    @classmethod
    def from_lnglat(cls, pair) -> "GeoPoint":
        lng, lat = pair
        return cls(lat=float(lat), lng=float(lng))


# first = start, last = destination; never empty
Route = tuple[GeoPoint, ...]
