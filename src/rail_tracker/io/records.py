# io/records.py
"""Shapes handed over by the network-fetch layer, validated with pydantic."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from rail_tracker.domain.entities.geography import Coordinate
from rail_tracker.domain.entities.schedule import StopKind


def _stringify(v: Any) -> Any:
    # ids/codes arrive as numbers from some feeds
    return str(v) if isinstance(v, int) and not isinstance(v, bool) else v


class CoordinateRecord(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

    def to_coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)


class SegmentRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")
    from_location: str
    to_location: str
    coordinates: list[CoordinateRecord]

    @field_validator("from_location", "to_location", mode="before")
    @classmethod
    def _codes(cls, v):
        return _stringify(v)


class LocationRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")
    code: str
    display_name: str
    coordinate: CoordinateRecord
    rank: int = 0

    @field_validator("code", mode="before")
    @classmethod
    def _code(cls, v):
        return _stringify(v)


class LegRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")
    start_time: float
    end_time: float
    is_moving: bool
    from_location: str | None = None
    to_location: str | None = None
    waypoint_codes: list[str] = Field(default_factory=list)
    location_code: str | None = None
    dwell_kind: StopKind = StopKind.UNKNOWN
    platform_arrival: str | None = None
    platform_departure: str | None = None

    @field_validator("dwell_kind", mode="before")
    @classmethod
    def _kind(cls, v):
        # accept enum names ("ARRIVAL") and feed keys ("StopShort") as well as ints
        if isinstance(v, str):
            if v.upper() in StopKind.__members__:
                return StopKind[v.upper()]
            return StopKind.from_record_keys([v])
        return v

    @field_validator(
        "from_location", "to_location", "location_code", "platform_arrival", "platform_departure",
        mode="before",
    )
    @classmethod
    def _codes(cls, v):
        return _stringify(v)

    @field_validator("waypoint_codes", mode="before")
    @classmethod
    def _waypoints(cls, v):
        return [_stringify(c) for c in v] if isinstance(v, list) else v

    @model_validator(mode="after")
    def _check_shape(self):
        if self.end_time < self.start_time:
            raise ValueError(f"leg ends ({self.end_time}) before it starts ({self.start_time})")
        if self.is_moving:
            if not self.from_location or not self.to_location:
                raise ValueError("moving leg needs from_location and to_location")
        elif not self.location_code:
            raise ValueError("stationary leg needs location_code")
        if self.platform_departure is not None and self.platform_arrival is None:
            raise ValueError("platform_departure given without platform_arrival")
        return self


class ScheduleRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")
    id: str
    line: str | None = None
    operator: str | None = None
    legs: list[LegRecord] = Field(min_length=1)

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, v):
        return _stringify(v)


class RouteHop(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)
    from_location: str
    to_location: str
    ride_id: str

    @field_validator("from_location", "to_location", "ride_id", mode="before")
    @classmethod
    def _codes(cls, v):
        return _stringify(v)
