import json

import pytest
from pydantic import ValidationError

from delivery_sim.config.models import (
    RoutePlannerRoadModel,
    RoutePlannerSyntheticModel,
    ScenarioModel,
)
from delivery_sim.io.config import load_scenario
from delivery_sim.io.osrm_client import DEFAULT_BASE_URL
from delivery_sim.runtime.registries import make_reply_policy, make_route_planner

BASE = {
    "name": "cfg",
    "run_id": "c-1",
    "sim": {"seed": 3},
    "trip": {"dest": (48.7925, 2.3634)},
}


def test_defaults():
    m = ScenarioModel.model_validate(BASE)
    assert isinstance(m.route, RoutePlannerSyntheticModel)
    assert m.trip.duration_s is None
    assert m.trip.speed_mps == 8.94
    assert m.sim.tick_s == 1.0
    assert m.chat.reply_delay_s == 2.0
    assert m.log.level == "INFO"


def test_road_planner_is_selected_by_kind():
    m = ScenarioModel.model_validate({**BASE, "route": {"kind": "road"}})
    assert isinstance(m.route, RoutePlannerRoadModel)
    assert m.route.base_url == DEFAULT_BASE_URL
    assert m.route.profile == "driving"


def test_road_base_url_is_normalized():
    m = RoutePlannerRoadModel(base_url="http://localhost:5000/")
    assert m.base_url == "http://localhost:5000"


@pytest.mark.parametrize(
    "patch",
    [
        {"route": {"kind": "teleport"}},
        {"route": {"kind": "road", "base_url": "ftp://osrm"}},
        {"trip": {"dest": (91.0, 2.0)}},
        {"trip": {"dest": (48.0, 2.0), "duration_s": 0}},
        {"trip": {"dest": (48.0, 2.0), "call_duration_s": -1}},
        {"sim": {"seed": 1, "tick_s": 0}},
        {"unknown": True},
    ],
)
def test_bad_config_is_rejected(patch):
    with pytest.raises(ValidationError):
        ScenarioModel.model_validate({**BASE, **patch})


def test_load_scenario_from_json(tmp_path):
    path = tmp_path / "scenario.json"
    path.write_text(json.dumps({**BASE, "trip": {"dest": [48.0, 2.0], "duration_s": 90}}))
    m = load_scenario(path)
    assert m.trip.dest == (48.0, 2.0)
    assert m.trip.duration_s == 90


def test_factories_build_from_config():
    import numpy as np

    from delivery_sim.domain.mechanics.mechanics_routers import (
        RoadRoutePlanner,
        SyntheticRoutePlanner,
    )

    rng = np.random.default_rng(0)
    assert isinstance(
        make_route_planner(RoutePlannerSyntheticModel(), deps={"rng": rng}), SyntheticRoutePlanner
    )
    road = make_route_planner(RoutePlannerRoadModel(profile="cycling"), deps={"rng": rng})
    assert isinstance(road, RoadRoutePlanner)
    assert road.profile == "cycling"
    assert road.session is None

    m = ScenarioModel.model_validate(BASE)
    assert make_reply_policy(m.chat.policy).reply("merci") == "Pas de souci ! 👍"
