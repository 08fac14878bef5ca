# domain/scheduling/schedule.py
"""
Scripted driver events, fired by elapsed simulation time rather than route progress.

Every trip gets exactly one event per category, each anchored at a fixed fraction of
the planned trip duration plus a small positive jitter.
"""

import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, replace
from typing import ClassVar, Literal

import numpy as np

from delivery_sim.domain.scheduling.pools import (
    ARRIVING_MESSAGES,
    CALL_REASONS,
    DELAYS,
    GREETINGS,
    LATE_MESSAGES,
)

EventType = Literal["message", "delay", "call"]
Category = Literal["greeting", "delay", "call", "late", "arriving"]


@dataclass(kw_only=True)
class ScheduledEvent:
    at: int  # seconds after trip start
    category: Category
    id: int = -1  # dense index, assigned once sorted
    fired: bool = False

    type: ClassVar[EventType]

    def mark_fired(self) -> bool:
        """Flip `fired` once; False if it was already set."""
        if self.fired:
            return False
        self.fired = True
        return True


@dataclass(kw_only=True)
class MessageEvent(ScheduledEvent):
    type: ClassVar[EventType] = "message"
    text: str


@dataclass(kw_only=True)
class DelayEvent(ScheduledEvent):
    type: ClassVar[EventType] = "delay"
    text: str
    delay_added: int  # seconds pushed onto the arrival
    progress: float  # at / total duration


@dataclass(kw_only=True)
class CallEvent(ScheduledEvent):
    type: ClassVar[EventType] = "call"
    reason: str


@dataclass(frozen=True)
class Schedule:
    """Time-sorted events for one trip. Only the `fired` flags ever change."""

    events: tuple[ScheduledEvent, ...]
    total_duration_s: float

    def __iter__(self) -> Iterator[ScheduledEvent]:
        return iter(self.events)

    def __len__(self) -> int:
        return len(self.events)

    def __getitem__(self, i: int) -> ScheduledEvent:
        return self.events[i]

    @property
    def pending(self) -> list[ScheduledEvent]:
        return [e for e in self.events if not e.fired]

    def due(self, elapsed_s: float) -> list[ScheduledEvent]:
        """Fire (and return) every unfired event whose time has been reached."""
        return [e for e in self.events if e.at <= elapsed_s and e.mark_fired()]


def _round(x: float) -> int:
    # half-up, not banker's rounding
    return math.floor(x + 0.5)


def _at(total: float, fraction: float, jitter_s: int, rng: np.random.Generator) -> int:
    return _round(total * fraction) + _round(rng.random() * jitter_s)


def _pick(rng: np.random.Generator, pool: Sequence):
    return pool[int(rng.integers(0, len(pool)))]


def build_schedule(total_duration_s: float, rng: np.random.Generator | None = None) -> Schedule:
    rng = rng if rng is not None else np.random.default_rng()
    total = total_duration_s
    events: list[ScheduledEvent] = []

    # 1) greeting, ~12%
    events.append(
        MessageEvent(at=_at(total, 0.12, 5, rng), category="greeting", text=_pick(rng, GREETINGS))
    )

    # 2) delay, ~32%
    text, delay_added = _pick(rng, DELAYS)
    delay_at = _at(total, 0.32, 10, rng)
    events.append(
        DelayEvent(
            at=delay_at,
            category="delay",
            text=text,
            delay_added=delay_added,
            progress=delay_at / total,
        )
    )

    # 3) call, ~52%
    events.append(
        CallEvent(at=_at(total, 0.52, 8, rng), category="call", reason=_pick(rng, CALL_REASONS))
    )

    # 4) running late, ~72%
    events.append(
        MessageEvent(at=_at(total, 0.72, 8, rng), category="late", text=_pick(rng, LATE_MESSAGES))
    )

    # 5) arriving, ~88%
    events.append(
        MessageEvent(
            at=_at(total, 0.88, 5, rng), category="arriving", text=_pick(rng, ARRIVING_MESSAGES)
        )
    )

    # sorted() is stable: ties keep the category order above
    ordered = sorted(events, key=lambda e: e.at)
    return Schedule(
        events=tuple(replace(e, id=i, fired=False) for i, e in enumerate(ordered)),
        total_duration_s=total,
    )
