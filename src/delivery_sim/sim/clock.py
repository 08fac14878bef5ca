# sim/clock.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

MIN = 60.0


def minutes(x: float) -> float:
    return x * MIN


@dataclass(frozen=True)
class SimClock:
    epoch: datetime  # wall-time of t=0, i.e. when the driver sets off

    @classmethod
    def utc_epoch(cls, y: int, m: int, d: int, hh=0, mm=0, ss=0) -> SimClock:
        return cls(datetime(y, m, d, hh, mm, ss, tzinfo=UTC))

    @classmethod
    def starting_now(cls) -> SimClock:
        return cls(datetime.now(UTC).replace(microsecond=0))

    # wall -> sim seconds
    def to_sim(self, dt: datetime) -> float:
        delta = dt - self.epoch if dt.tzinfo else (dt.replace(tzinfo=UTC) - self.epoch)
        return delta.total_seconds()

    # sim seconds -> wall
    def to_wall(self, t: float) -> datetime:
        return self.epoch + timedelta(seconds=t)

    def hhmm(self, t: float) -> str:
        """Chat-bubble timestamp."""
        return self.to_wall(t).strftime("%H:%M")
