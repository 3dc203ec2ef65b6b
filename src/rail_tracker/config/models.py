from typing import Annotated, Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False


class NetworkModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    pair_separator: str = Field(default="_", min_length=1)
    timezone: str = "Europe/Amsterdam"

    @field_validator("timezone")
    @classmethod
    def _known_zone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown timezone {v!r}") from exc
        return v


class ToleranceModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    offset_km: float = 1e-6
    fraction: float = 1e-9
    distance_km: float = 1e-6

    @field_validator("offset_km", "fraction", "distance_km")
    @classmethod
    def _nonneg(cls, v: float, info: ValidationInfo) -> float:
        if v < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return v


# ----------------- STATIONARY POLICIES ---------------------


class StationaryDwellModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["dwell"] = "dwell"


class StationaryAnchorModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["anchor"] = "anchor"
    prefer: Literal["previous", "next"] = "previous"


StationaryPolicyUnion = Annotated[
    StationaryDwellModel | StationaryAnchorModel,
    Field(discriminator="kind"),
]


class PassagesModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    window_ms: float = Field(default=2 * 3600 * 1000, gt=0)  # timetable look-ahead


# ------------------------------------------------------------------


class EngineModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "rail"
    log: LogModel = LogModel()
    network: NetworkModel = NetworkModel()
    tolerance: ToleranceModel = ToleranceModel()
    stationary: StationaryPolicyUnion = Field(default_factory=StationaryDwellModel)
    passages: PassagesModel = PassagesModel()
