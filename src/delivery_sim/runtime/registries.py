# runtime/registries.py
from collections.abc import Callable
from typing import Any

from delivery_sim.app.protocols import ReplyPolicy, RoutePlanner
from delivery_sim.config.models import (
    ReplyPolicyRulesModel,
    ReplyPolicyUnion,
    RoutePlannerRoadModel,
    RoutePlannerSyntheticModel,
    RoutePlannerUnion,
)
from delivery_sim.domain.mechanics.mechanics_routers import RoadRoutePlanner, SyntheticRoutePlanner
from delivery_sim.domain.scheduling.replies import RuleBasedReplies

RoutePlannerFactory = Callable[[RoutePlannerUnion, dict[str, Any]], RoutePlanner]
ReplyPolicyFactory = Callable[[ReplyPolicyUnion, dict[str, Any]], ReplyPolicy]

_route_planner_registry: dict[str, RoutePlannerFactory] = {}
_reply_policy_registry: dict[str, ReplyPolicyFactory] = {}


# ------------------- Route planners ---------------------------


def register_route_planner(kind: str):
    def deco(fn: RoutePlannerFactory):
        _route_planner_registry[kind] = fn
        return fn

    return deco


def make_route_planner(cfg: RoutePlannerUnion, *, deps: dict[str, Any]) -> RoutePlanner:
    """deps: 'rng' (required), 'session' (optional aiohttp.ClientSession)."""
    try:
        factory = _route_planner_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown route planner kind {cfg.kind!r}")
    return factory(cfg, deps)


@register_route_planner("synthetic")
def _make_synthetic(cfg: RoutePlannerSyntheticModel, deps):
    return SyntheticRoutePlanner(deps["rng"])


@register_route_planner("road")
def _make_road(cfg: RoutePlannerRoadModel, deps):
    return RoadRoutePlanner(
        deps["rng"], base_url=cfg.base_url, profile=cfg.profile, session=deps.get("session")
    )


# ------------------- Reply policies ---------------------------


def register_reply_policy(kind: str):
    def deco(fn: ReplyPolicyFactory):
        _reply_policy_registry[kind] = fn
        return fn

    return deco


def make_reply_policy(cfg: ReplyPolicyUnion, *, deps: dict[str, Any] | None = None) -> ReplyPolicy:
    try:
        factory = _reply_policy_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown reply policy kind {cfg.kind!r}")
    return factory(cfg, deps or {})


@register_reply_policy("rules")
def _make_rules(cfg: ReplyPolicyRulesModel, deps):
    return RuleBasedReplies()
