# src/delivery_sim/io/config.py
import json
from pathlib import Path

from delivery_sim.config.models import ScenarioModel


def load_scenario(path: str | Path) -> ScenarioModel:
    """Read a scenario from a JSON file; raises pydantic.ValidationError on bad content."""
    with open(path, encoding="utf-8") as f:
        return ScenarioModel.model_validate(json.load(f))
