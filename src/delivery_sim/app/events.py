# app/events.py
from dataclasses import dataclass

from delivery_sim.sim.event import BaseEvent


# Trip lifecycle
@dataclass(order=True)
class DeliveryStarted(BaseEvent):
    trip_id: int


@dataclass(order=True)
class PositionTick(BaseEvent):
    trip_id: int


@dataclass(order=True)
class DeliveryArrived(BaseEvent):
    trip_id: int
    plan_id: int  # versioning to make stale arrivals harmless after a delay


# Scripted driver events (index into the trip's Schedule)
@dataclass(order=True)
class DriverEventDue(BaseEvent):
    trip_id: int
    event_id: int


@dataclass(order=True)
class CallEnded(BaseEvent):
    trip_id: int


# Chat
@dataclass(order=True)
class CustomerMessage(BaseEvent):
    trip_id: int
    text: str


@dataclass(order=True)
class DriverReply(BaseEvent):
    trip_id: int
    text: str
