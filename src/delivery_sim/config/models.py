from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from delivery_sim.io.osrm_client import DEFAULT_BASE_URL


class SimModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    epoch: tuple[int, int, int, int, int, int] | None = None  # None => now
    seed: int
    tick_s: float = Field(default=1.0, gt=0)  # driver position refresh


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    sample_every: int = 1


# ----------------- ROUTE PLANNERS ---------------------


class RoutePlannerSyntheticModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["synthetic"] = "synthetic"


class RoutePlannerRoadModel(BaseModel):
    """OSRM road geometry; falls back to a synthetic route when unavailable."""

    model_config = ConfigDict(extra="forbid")
    kind: Literal["road"] = "road"
    base_url: str = DEFAULT_BASE_URL
    profile: Literal["driving", "walking", "cycling"] = "driving"

    @field_validator("base_url")
    @classmethod
    def _http_only(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must be an http(s) URL")
        return v.rstrip("/")


RoutePlannerUnion = Annotated[
    RoutePlannerSyntheticModel | RoutePlannerRoadModel,
    Field(discriminator="kind"),
]

# ------------------ REPLY POLICIES -----------------------------


class ReplyPolicyRulesModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["rules"] = "rules"


ReplyPolicyUnion = Annotated[ReplyPolicyRulesModel, Field(discriminator="kind")]


# ------------------------------------------------------------------


class TripModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    trip_id: int = 0
    dest: tuple[float, float]  # (lat, lng)
    duration_s: float | None = Field(default=None, gt=0)  # None => route length / speed
    speed_mps: float = Field(default=8.94, gt=0)
    call_duration_s: float = 20.0

    @field_validator("dest")
    @classmethod
    def _wgs84(cls, v: tuple[float, float]) -> tuple[float, float]:
        lat, lng = v
        if not -90.0 <= lat <= 90.0 or not -180.0 <= lng <= 180.0:
            raise ValueError(f"dest {v} is not a valid (lat, lng)")
        return v

    @field_validator("call_duration_s")
    @classmethod
    def _nonneg(cls, v: float, info: ValidationInfo) -> float:
        if v < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return v


class ChatModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    reply_delay_s: float = Field(default=2.0, ge=0)
    policy: ReplyPolicyUnion = Field(default_factory=ReplyPolicyRulesModel)


class ScenarioModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str
    run_id: str
    sim: SimModel
    log: LogModel = LogModel()
    route: RoutePlannerUnion = Field(default_factory=RoutePlannerSyntheticModel)
    trip: TripModel
    chat: ChatModel = ChatModel()
