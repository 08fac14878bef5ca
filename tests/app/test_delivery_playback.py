import pytest

from delivery_sim.app.build import build
from delivery_sim.app.events import DeliveryArrived, DriverEventDue
from delivery_sim.domain.scheduling.schedule import CallEvent, DelayEvent
from delivery_sim.io.recorder import MemorySink, Recorder
from delivery_sim.sim.hooks import NoopHooks

CFG = {
    "name": "playback",
    "run_id": "p-1",
    "sim": {"epoch": [2025, 6, 1, 9, 0, 0], "seed": 7, "tick_s": 1.0},
    "trip": {"dest": (48.7925, 2.3634), "duration_s": 400, "call_duration_s": 15},
    "chat": {"reply_delay_s": 3.0},
}


@pytest.fixture
def sink() -> MemorySink:
    return MemorySink()


@pytest.fixture
def app(sink):
    return build(CFG, use_logging=False, recorder=Recorder(sink))


def _by_category(app):
    return {e.category: e for e in app.state.schedule}


def test_every_scripted_event_fires_once_in_time_order(app, sink):
    app.run()
    assert all(e.fired for e in app.state.schedule)
    driver_lines = [m for m in app.state.chat if m.sender == "driver"]
    # greeting, delay, late, arriving
    assert len(driver_lines) == 4
    times = [m.t for m in app.state.chat]
    assert times == sorted(times)
    assert sink.names()[0] == "DeliveryStarted"
    assert sink.names()[-1] == "Delivered"
    assert sink.names().count("DriverMessage") == 3


def test_nothing_fires_before_its_time(app):
    greeting = _by_category(app)["greeting"]
    app.run(until=greeting.at - 0.5)
    assert not any(e.fired for e in app.state.schedule)
    app.run(until=greeting.at)
    assert greeting.fired
    assert app.state.chat[-1].text == greeting.text


def test_delay_pushes_arrival_back(app, sink):
    delay = _by_category(app)["delay"]
    assert isinstance(delay, DelayEvent)

    app.run(until=delay.at)
    assert app.state.driver.plan_id == 1
    assert app.state.driver.motion.end_t == 400 + delay.delay_added

    app.run()
    assert app.state.arrived_t == pytest.approx(400 + delay.delay_added)
    assert app.state.delay_total_s == delay.delay_added
    (announced,) = [ev for ev in sink.events if ev.name == "DelayAnnounced"]
    assert announced.progress == pytest.approx(delay.at / 400)
    (delivered,) = [ev for ev in sink.events if ev.name == "Delivered"]
    assert delivered.total_s == pytest.approx(400 + delay.delay_added)


def test_driver_is_on_call_while_it_rings(app):
    call = _by_category(app)["call"]
    assert isinstance(call, CallEvent)
    app.run(until=call.at)
    assert app.state.call_reason == call.reason
    assert app.state.driver.state == "on_call"
    app.run(until=call.at + 15)
    assert app.state.call_reason is None
    assert app.state.driver.state == "en_route"


def test_driver_moves_toward_destination(app):
    from delivery_sim.domain.mechanics.mechanics_geodesy import distance_m

    dest = app.state.dest
    app.run(until=1.0)
    d0 = distance_m(app.state.driver.loc, dest)
    app.run(until=200.0)
    d1 = distance_m(app.state.driver.loc, dest)
    assert d1 < d0
    assert app.eta_label().endswith("min")


def test_customer_message_gets_auto_reply(app):
    app.send("Quel est le code svp", at=10.0)
    app.run(until=20.0)
    texts = [(m.sender, m.text, m.t) for m in app.state.chat]
    assert ("customer", "Quel est le code svp", 10.0) in texts
    assert ("driver", "Noté, merci !", 13.0) in texts


def test_quick_reply_is_sent(app):
    app.quick_reply(4, at=5.0)  # "Je descends"
    app.run(until=10.0)
    assert [m.text for m in app.state.chat if m.t in (5.0, 8.0)] == [
        "Je descends",
        "Parfait, je vous attends en bas !",
    ]


def test_message_in_the_past_is_refused(app):
    app.run(until=100.0)
    with pytest.raises(ValueError):
        app.send("merci", at=50.0)
    with pytest.raises(ValueError):
        app.quick_reply(0, at=99.0)
    app.run()
    assert app.state.arrived
    assert all(m.sender != "customer" for m in app.state.chat)


def test_events_after_arrival_are_dropped():
    cfg = {**CFG, "trip": {**CFG["trip"], "duration_s": 2}}
    app = build(cfg, use_logging=False, recorder=Recorder(MemorySink()))
    late = [e for e in app.state.schedule if e.at > 2]
    app.run()
    assert app.state.arrived
    # scheduled after the door was reached, never shown
    for e in late:
        if e.at > app.state.arrived_t:
            assert not e.fired


def test_stale_arrival_is_ignored(app):
    handler = app.delivery
    app.run(until=1.0)
    app.state.driver.plan_id = 3
    assert handler.on_delivery_arrived(DeliveryArrived(t=5.0, trip_id=0, plan_id=0)) == []
    assert not app.state.arrived


def test_event_fired_twice_is_noop(app):
    app.run(until=1.0)
    ev = DriverEventDue(t=1.0, trip_id=0, event_id=0)
    first = app.delivery.on_driver_event_due(ev)
    again = app.delivery.on_driver_event_due(ev)
    assert again == []
    assert app.state.schedule[0].fired
    assert isinstance(first, list)


def test_hooks_see_business_events():
    class Names(NoopHooks):
        def __init__(self):
            self.names = []

        def dispatch_start(self, ev, **_):
            self.names.append(type(ev).__name__)

    app = build(CFG, use_logging=False, recorder=Recorder(MemorySink()))
    hooks = Names()
    app.kernel._hooks = hooks
    app.run()
    assert hooks.names[0] == "DeliveryStarted"
    assert hooks.names.count("DriverEventDue") == 5
