# domain/entities/driver.py
from dataclasses import dataclass

from delivery_sim.domain.entities.geography import GeoPoint
from delivery_sim.domain.entities.motion import RouteMotion


@dataclass
class Driver:
    loc: GeoPoint
    heading: float = 0.0
    state: str = "idle"  # "idle" | "en_route" | "on_call" | "arrived"
    plan_id: int = 0  # bumped whenever the arrival time moves
    motion: RouteMotion | None = None

    def pos_at(self, t: float) -> GeoPoint:
        return self.motion.pos(t) if self.motion else self.loc

    def move_to(self, t: float) -> None:
        if self.motion is None:
            return
        self.loc = self.motion.pos(t)
        self.heading = self.motion.heading(t)

    def eta_s(self, t: float) -> float:
        return self.motion.remaining_s(t) if self.motion else 0.0

    def snap_to_plan_end(self) -> None:
        self.loc = self.motion.route[-1] if self.motion else self.loc
