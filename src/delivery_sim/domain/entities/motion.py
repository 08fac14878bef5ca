from bisect import bisect_right
from dataclasses import dataclass, field

from delivery_sim.domain.entities.geography import GeoPoint, Route
from delivery_sim.domain.mechanics.mechanics_geodesy import bearing, cumulative_m, interpolate


@dataclass
class RouteMotion:
    """
    Driver position along a route as a function of sim time.

    Progress runs linearly from `frac0` at `start_t` to 1.0 at `end_t`. A delay is
    modelled by re-anchoring at the current progress and pushing `end_t` back.
    """

    route: Route
    start_t: float
    end_t: float
    frac0: float = 0.0
    cum_m: list[float] = field(default_factory=list)

    def __post_init__(self):
        if not self.cum_m:
            self.cum_m = cumulative_m(self.route)

    @property
    def total_length_m(self) -> float:
        return self.cum_m[-1]

    def frac(self, t: float) -> float:
        if t <= self.start_t:
            return self.frac0
        if t >= self.end_t:
            return 1.0
        return self.frac0 + (1.0 - self.frac0) * (t - self.start_t) / (self.end_t - self.start_t)

    def _locate(self, t: float) -> tuple[int, float]:
        """Segment index and in-segment fraction for time t."""
        if len(self.route) == 1 or self.total_length_m == 0:
            return 0, 0.0
        d = self.frac(t) * self.total_length_m
        i = min(bisect_right(self.cum_m, d) - 1, len(self.route) - 2)
        seg = self.cum_m[i + 1] - self.cum_m[i]
        return i, 0.0 if seg == 0 else (d - self.cum_m[i]) / seg

    def pos(self, t: float) -> GeoPoint:
        if t >= self.end_t:
            return self.route[-1]
        i, s = self._locate(t)
        if len(self.route) == 1:
            return self.route[0]
        return interpolate(self.route[i], self.route[i + 1], s)

    def heading(self, t: float) -> float:
        if len(self.route) == 1:
            return 0.0
        i, _ = self._locate(t)
        return bearing(self.route[i], self.route[i + 1])

    def remaining_s(self, t: float) -> float:
        return max(0.0, self.end_t - t)

    def remaining_m(self, t: float) -> float:
        return (1.0 - self.frac(t)) * self.total_length_m

    def delayed(self, now: float, extra_s: float) -> "RouteMotion":
        return RouteMotion(
            route=self.route,
            start_t=now,
            end_t=self.end_t + extra_s,
            frac0=self.frac(now),
            cum_m=self.cum_m,
        )
