# delivery_sim/app/controllers/chat.py
from delivery_sim.app.events import CustomerMessage, DriverReply
from delivery_sim.app.protocols import ReplyPolicy
from delivery_sim.domain.state import DeliveryState
from delivery_sim.io.business_events import ChatExchangeBiz
from delivery_sim.io.recorder import Recorder


class ChatHandler:
    def __init__(
        self,
        state: DeliveryState,
        replies: ReplyPolicy,
        *,
        reply_delay_s: float = 2.0,
        recorder: Recorder | None = None,
        run_id: str = "local",
    ):
        self.state = state
        self.replies = replies
        self.reply_delay_s = reply_delay_s
        self.recorder = recorder
        self.run_id = run_id

    def _biz(self, t: float, sender: str, text: str) -> None:
        if self.recorder:
            self.recorder.emit(
                ChatExchangeBiz(
                    run_id=self.run_id,
                    t=t,
                    trip_id=self.state.trip_id,
                    name="ChatExchange",
                    sender=sender,
                    text=text,
                )
            )

    def on_customer_message(self, ev: CustomerMessage):
        self.state.say(ev.t, "customer", ev.text)
        self._biz(ev.t, "customer", ev.text)
        return [
            DriverReply(
                t=ev.t + self.reply_delay_s,
                trip_id=ev.trip_id,
                text=self.replies.reply(ev.text),
            )
        ]

    def on_driver_reply(self, ev: DriverReply):
        self.state.say(ev.t, "driver", ev.text)
        self._biz(ev.t, "driver", ev.text)
        return []
