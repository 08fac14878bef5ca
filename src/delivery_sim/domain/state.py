# delivery_sim/domain/state.py
from dataclasses import dataclass, field
from typing import Literal

from delivery_sim.domain.entities.driver import Driver
from delivery_sim.domain.entities.geography import GeoPoint, Route
from delivery_sim.domain.scheduling.schedule import Schedule

Sender = Literal["driver", "customer", "system"]


@dataclass(frozen=True)
class ChatMessage:
    t: float
    sender: Sender
    text: str


@dataclass
class DeliveryState:
    trip_id: int
    dest: GeoPoint
    route: Route
    schedule: Schedule
    driver: Driver
    planned_duration_s: float  # before any delay
    started_t: float | None = None
    arrived_t: float | None = None
    delay_total_s: float = 0.0
    call_reason: str | None = None  # set while the simulated call is ringing
    chat: list[ChatMessage] = field(default_factory=list)

    @property
    def arrived(self) -> bool:
        return self.arrived_t is not None

    def say(self, t: float, sender: Sender, text: str) -> ChatMessage:
        msg = ChatMessage(t=t, sender=sender, text=text)
        self.chat.append(msg)
        return msg

    def eta_s(self, t: float) -> float:
        return 0.0 if self.arrived else self.driver.eta_s(t)
