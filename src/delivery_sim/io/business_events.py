# delivery_sim/io/business_events.py

from dataclasses import dataclass


# Base type for analytics events (not scheduled in the kernel!)
@dataclass
class BizEvent:
    run_id: str
    t: float  # simulation time
    trip_id: int
    name: str  # stable event name


@dataclass
class DeliveryStartedBiz(BizEvent):
    route_points: int
    route_length_m: float
    planned_duration_s: float


@dataclass
class DriverMessageBiz(BizEvent):
    event_id: int
    category: str
    text: str


@dataclass
class DelayAnnouncedBiz(BizEvent):
    event_id: int
    delay_added_s: float
    progress: float
    new_eta_s: float


@dataclass
class DriverCallBiz(BizEvent):
    event_id: int
    reason: str


@dataclass
class ChatExchangeBiz(BizEvent):
    sender: str
    text: str


@dataclass
class DeliveredBiz(BizEvent):
    total_s: float
    delay_total_s: float
