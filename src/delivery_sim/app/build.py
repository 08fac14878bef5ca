# delivery_sim/app/build.py
from collections.abc import Mapping
from dataclasses import dataclass

from delivery_sim.app.controllers.chat import ChatHandler
from delivery_sim.app.controllers.delivery import DeliveryHandler
from delivery_sim.app.events import CustomerMessage, DeliveryStarted
from delivery_sim.app.formatting import format_eta
from delivery_sim.app.wiring import wire
from delivery_sim.config.models import ScenarioModel
from delivery_sim.domain.entities.driver import Driver
from delivery_sim.domain.entities.geography import GeoPoint, Route
from delivery_sim.domain.mechanics.mechanics_geodesy import path_length_m
from delivery_sim.domain.mechanics.mechanics_routers import generate_route
from delivery_sim.domain.scheduling.pools import QUICK_REPLIES
from delivery_sim.domain.scheduling.schedule import build_schedule
from delivery_sim.domain.state import DeliveryState
from delivery_sim.io.kernel_logging import KernelLogging  # JSON logs
from delivery_sim.io.recorder import JsonlSink, Recorder
from delivery_sim.runtime.registries import make_reply_policy, make_route_planner
from delivery_sim.sim.clock import SimClock
from delivery_sim.sim.hooks import NoopHooks
from delivery_sim.sim.kernel import Kernel
from delivery_sim.sim.rng import RNGRegistry


@dataclass
class App:
    kernel: Kernel
    clock: SimClock
    rng: RNGRegistry
    state: DeliveryState
    delivery: DeliveryHandler
    chat: ChatHandler
    recorder: Recorder

    def run(self, until: float | None = None) -> int:
        return self.kernel.run(until=until)

    def send(self, text: str, at: float | None = None) -> None:
        """Queue a customer chat message (now, unless `at` is given)."""
        t = self.kernel.now if at is None else at
        if t < self.kernel.now:
            raise ValueError(f"cannot send a message in the past: {t} < {self.kernel.now}")
        self.kernel.schedule(CustomerMessage(t=t, trip_id=self.state.trip_id, text=text))

    def quick_reply(self, index: int, at: float | None = None) -> None:
        self.send(QUICK_REPLIES[index], at=at)

    def eta_label(self) -> str:
        return format_eta(self.state.eta_s(self.kernel.now))


def _validate(cfg: ScenarioModel | Mapping) -> ScenarioModel:
    return cfg if isinstance(cfg, ScenarioModel) else ScenarioModel.model_validate(cfg)


def _registry(model: ScenarioModel) -> RNGRegistry:
    return RNGRegistry(model.sim.seed, scenario=model.name, session=model.trip.trip_id)


def build(
    cfg: ScenarioModel | Mapping,
    *,
    route: Route | None = None,
    use_logging: bool = True,
    recorder: Recorder | None = None,
) -> App:
    """
    Assemble a ready-to-run delivery. Without `route`, a synthetic one is generated
    regardless of `cfg.route` (use `build_async` for road routing).
    """
    # 0) Validate config
    model = _validate(cfg)
    trip = model.trip
    dest = GeoPoint(*trip.dest)

    # 1) Clock & RNG
    clock = SimClock.utc_epoch(*model.sim.epoch) if model.sim.epoch else SimClock.starting_now()
    rng_registry = _registry(model)

    # 2) Route & schedule
    if route is None:
        route = generate_route(dest.lat, dest.lng, rng_registry.substream("route", trip.trip_id))
    duration_s = trip.duration_s or path_length_m(route) / trip.speed_mps
    if duration_s <= 0:
        raise ValueError("route has zero length and no trip.duration_s was given")
    schedule = build_schedule(duration_s, rng_registry.substream("schedule", trip.trip_id))

    state = DeliveryState(
        trip_id=trip.trip_id,
        dest=dest,
        route=route,
        schedule=schedule,
        driver=Driver(loc=route[0]),
        planned_duration_s=duration_s,
    )

    # 3) Kernel (with hooks)
    recorder = recorder or Recorder(JsonlSink())
    hooks = (
        KernelLogging(
            run_id=model.run_id,
            clock=clock,
            level=model.log.level,
            debug=model.log.debug,
            sample_every=model.log.sample_every,
        )
        if use_logging
        else NoopHooks()
    )
    kernel = Kernel(hooks=hooks)

    # 4) Handlers (inject deps explicitly)
    delivery = DeliveryHandler(
        state,
        tick_s=model.sim.tick_s,
        call_duration_s=trip.call_duration_s,
        recorder=recorder,
        run_id=model.run_id,
    )
    chat = ChatHandler(
        state,
        make_reply_policy(model.chat.policy),
        reply_delay_s=model.chat.reply_delay_s,
        recorder=recorder,
        run_id=model.run_id,
    )

    # 5) Wiring & seed
    wire(kernel, delivery=delivery, chat=chat)
    kernel.schedule(DeliveryStarted(t=0.0, trip_id=trip.trip_id))

    return App(kernel, clock, rng_registry, state, delivery, chat, recorder)


async def build_async(
    cfg: ScenarioModel | Mapping,
    *,
    session=None,
    use_logging: bool = True,
    recorder: Recorder | None = None,
) -> App:
    """Like `build`, but resolves the route through the configured planner first."""
    model = _validate(cfg)
    rng = _registry(model).substream("route", model.trip.trip_id)
    planner = make_route_planner(model.route, deps={"rng": rng, "session": session})
    route = await planner.plan(GeoPoint(*model.trip.dest))
    return build(model, route=route, use_logging=use_logging, recorder=recorder)
