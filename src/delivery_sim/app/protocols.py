from typing import Protocol, runtime_checkable

from delivery_sim.domain.entities.geography import GeoPoint, Route


# ------------- Mechanics --------------------
@runtime_checkable
class RoutePlanner(Protocol):
    """
    Responsibilities:
      • Produce the route a driver follows to reach `dest`.
      • Always end on `dest` exactly.
    Planners may do network I/O, hence async.
    """

    async def plan(self, dest: GeoPoint) -> Route: ...


@runtime_checkable
class ReplyPolicy(Protocol):
    """Turn a customer's free-text message into the driver's answer."""

    def reply(self, text: str) -> str: ...
