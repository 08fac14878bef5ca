# delivery_sim/app/wiring.py
from delivery_sim.app.controllers.chat import ChatHandler
from delivery_sim.app.controllers.delivery import DeliveryHandler
from delivery_sim.app.events import (
    CallEnded,
    CustomerMessage,
    DeliveryArrived,
    DeliveryStarted,
    DriverEventDue,
    DriverReply,
    PositionTick,
)
from delivery_sim.sim.kernel import Kernel


def wire(kernel: Kernel, *, delivery: DeliveryHandler, chat: ChatHandler | None = None) -> None:
    k = kernel

    # trip lifecycle
    k.on(DeliveryStarted, delivery.on_delivery_started)
    k.on(PositionTick, delivery.on_position_tick)
    k.on(DeliveryArrived, delivery.on_delivery_arrived)  # stale plan_id => no-op

    # scripted events
    k.on(DriverEventDue, delivery.on_driver_event_due)
    k.on(CallEnded, delivery.on_call_ended)

    if chat:
        k.on(CustomerMessage, chat.on_customer_message)
        k.on(DriverReply, chat.on_driver_reply)
