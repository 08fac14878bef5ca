# delivery_sim/app/controllers/delivery.py

from delivery_sim.app.events import (
    CallEnded,
    DeliveryArrived,
    DeliveryStarted,
    DriverEventDue,
    PositionTick,
)
from delivery_sim.domain.entities.motion import RouteMotion
from delivery_sim.domain.scheduling.schedule import CallEvent, DelayEvent, MessageEvent
from delivery_sim.domain.state import DeliveryState
from delivery_sim.io.business_events import (
    DelayAnnouncedBiz,
    DeliveredBiz,
    DeliveryStartedBiz,
    DriverCallBiz,
    DriverMessageBiz,
)
from delivery_sim.io.recorder import Recorder
from delivery_sim.sim.event import BaseEvent


class DeliveryHandler:
    """
    Drives one delivery: moves the driver along the route and plays the schedule.

    Sole writer of the schedule's `fired` flags.
    """

    def __init__(
        self,
        state: DeliveryState,
        *,
        tick_s: float = 1.0,
        call_duration_s: float = 20.0,
        recorder: Recorder | None = None,
        run_id: str = "local",
    ):
        self.state = state
        self.tick_s = tick_s
        self.call_duration_s = call_duration_s
        self.recorder = recorder
        self.run_id = run_id

    def _biz(self, cls, t: float, **fields) -> None:
        if self.recorder:
            name = cls.__name__.removesuffix("Biz")
            self.recorder.emit(
                cls(run_id=self.run_id, t=t, trip_id=self.state.trip_id, name=name, **fields)
            )

    def on_delivery_started(self, ev: DeliveryStarted) -> list[BaseEvent]:
        s, d = self.state, self.state.driver
        if s.started_t is not None:
            return []
        s.started_t = ev.t
        d.motion = RouteMotion(route=s.route, start_t=ev.t, end_t=ev.t + s.planned_duration_s)
        d.state = "en_route"
        d.move_to(ev.t)
        self._biz(
            DeliveryStartedBiz,
            ev.t,
            route_points=len(s.route),
            route_length_m=d.motion.total_length_m,
            planned_duration_s=s.planned_duration_s,
        )

        out: list[BaseEvent] = [PositionTick(t=ev.t + self.tick_s, trip_id=s.trip_id)]
        out += [DriverEventDue(t=ev.t + e.at, trip_id=s.trip_id, event_id=e.id) for e in s.schedule]
        out.append(DeliveryArrived(t=d.motion.end_t, trip_id=s.trip_id, plan_id=d.plan_id))
        return out

    def on_position_tick(self, ev: PositionTick) -> list[BaseEvent]:
        if self.state.arrived:
            return []
        self.state.driver.move_to(ev.t)
        return [PositionTick(t=ev.t + self.tick_s, trip_id=ev.trip_id)]

    def on_driver_event_due(self, ev: DriverEventDue) -> list[BaseEvent]:
        s = self.state
        if s.arrived:
            return []  # the script stops at the door
        e = s.schedule[ev.event_id]
        if not e.mark_fired():
            return []

        if isinstance(e, DelayEvent):
            return self._apply_delay(ev.t, e)
        if isinstance(e, CallEvent):
            s.call_reason = e.reason
            s.driver.state = "on_call"
            s.say(ev.t, "system", f"📞 {e.reason}")
            self._biz(DriverCallBiz, ev.t, event_id=e.id, reason=e.reason)
            return [CallEnded(t=ev.t + self.call_duration_s, trip_id=s.trip_id)]
        if isinstance(e, MessageEvent):
            s.say(ev.t, "driver", e.text)
            self._biz(DriverMessageBiz, ev.t, event_id=e.id, category=e.category, text=e.text)
            return []
        raise TypeError(e)

    def _apply_delay(self, now: float, e: DelayEvent) -> list[BaseEvent]:
        s, d = self.state, self.state.driver
        d.motion = d.motion.delayed(now, e.delay_added)
        d.plan_id += 1
        s.delay_total_s += e.delay_added
        s.say(now, "driver", e.text)
        self._biz(
            DelayAnnouncedBiz,
            now,
            event_id=e.id,
            delay_added_s=e.delay_added,
            progress=e.progress,
            new_eta_s=d.eta_s(now),
        )
        return [DeliveryArrived(t=d.motion.end_t, trip_id=s.trip_id, plan_id=d.plan_id)]

    def on_call_ended(self, ev: CallEnded) -> list[BaseEvent]:
        s = self.state
        s.call_reason = None
        if s.driver.state == "on_call":
            s.driver.state = "en_route"
        return []

    def on_delivery_arrived(self, ev: DeliveryArrived) -> list[BaseEvent]:
        s, d = self.state, self.state.driver
        if ev.plan_id != d.plan_id or s.arrived:
            return []  # superseded by a delay
        s.arrived_t = ev.t
        d.snap_to_plan_end()
        d.state = "arrived"
        s.call_reason = None
        self._biz(
            DeliveredBiz,
            ev.t,
            total_s=ev.t - (s.started_t or 0.0),
            delay_total_s=s.delay_total_s,
        )
        return []
