# domain/entities/schedule.py
from __future__ import annotations

from bisect import bisect_right
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import IntEnum

from rail_tracker.domain.entities.geography import Coordinate
from rail_tracker.domain.entities.network import DirectedSegment
from rail_tracker.domain.errors import InvalidRideError
from rail_tracker.sim.clock import format_day_offset


class StopKind(IntEnum):
    UNKNOWN = 0
    WAYPOINT = 1
    SHORT = 2
    LONG = 3
    DEPARTURE = 4
    ARRIVAL = 5

    @classmethod
    def from_record_keys(cls, keys: Iterable[str]) -> StopKind:
        """Map the tagged-object keys used by schedule feeds to a kind."""
        keys = set(keys)
        for key, kind in (
            ("Departure", cls.DEPARTURE),
            ("StopShort", cls.SHORT),
            ("StopLong", cls.LONG),
            ("Arrival", cls.ARRIVAL),
        ):
            if key in keys:
                return kind
        raise ValueError(f"Unknown stop kind keys: {sorted(keys)}")


@dataclass(frozen=True)
class PlatformInfo:
    arrival: str
    departure: str | None = None

    @property
    def label(self) -> str:
        return self.arrival

    def display(self) -> str:
        if self.departure is None or self.departure == self.arrival:
            return self.arrival
        return f"{self.arrival}->{self.departure}"


@dataclass(frozen=True)
class StationaryLeg:
    start_time: float
    end_time: float
    location: str
    coordinate: Coordinate
    dwell_kind: StopKind = StopKind.UNKNOWN
    platform: PlatformInfo | None = None


@dataclass(frozen=True)
class MovingLeg:
    start_time: float
    end_time: float
    from_location: str
    to_location: str
    segments: tuple[DirectedSegment, ...]
    total_distance: float = field(init=False)

    def __post_init__(self):
        segments = tuple(self.segments)
        for prev, nxt in zip(segments, segments[1:]):
            if prev.last_location.lower() != nxt.first_location.lower():
                raise InvalidRideError(
                    f"leg {self.from_location}->{self.to_location}: segment ending at "
                    f"{prev.last_location!r} followed by one starting at {nxt.first_location!r}"
                )
        object.__setattr__(self, "segments", segments)
        object.__setattr__(self, "total_distance", sum(s.length for s in segments))


Leg = StationaryLeg | MovingLeg


@dataclass(frozen=True)
class Stop:
    location: str
    arrival_time: float
    departure_time: float
    dwell_kind: StopKind
    platform: PlatformInfo | None = None

    def display_time(self) -> str:
        if self.dwell_kind == StopKind.ARRIVAL:
            return format_day_offset(self.arrival_time)
        if self.dwell_kind == StopKind.WAYPOINT:
            return ""
        if self.dwell_kind == StopKind.UNKNOWN:
            raise ValueError(f"Stop at {self.location!r} has no known kind")
        return format_day_offset(self.departure_time)

    def display_platform(self) -> str:
        return self.platform.display() if self.platform else ""


@dataclass(frozen=True)
class Ride:
    """
    A vehicle's full itinerary: time-ordered, contiguous legs.

    start/end times, stops and the leg start index are derived once here.
    """

    id: str
    legs: tuple[Leg, ...]
    line: str | None = None
    operator: str | None = None
    start_time: float = field(init=False)
    end_time: float = field(init=False)
    stops: tuple[Stop, ...] = field(init=False, repr=False)
    _leg_starts: tuple[float, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        legs = tuple(self.legs)
        if not legs:
            raise InvalidRideError(f"ride {self.id!r} has no legs")
        for i, leg in enumerate(legs):
            if leg.end_time < leg.start_time:
                raise InvalidRideError(f"ride {self.id!r} leg {i} ends before it starts")
            if i and leg.start_time != legs[i - 1].end_time:
                raise InvalidRideError(
                    f"ride {self.id!r} leg {i} starts at {leg.start_time}, "
                    f"previous ended at {legs[i - 1].end_time}"
                )
        stops = tuple(
            Stop(
                location=leg.location,
                arrival_time=leg.start_time,
                departure_time=leg.end_time,
                dwell_kind=leg.dwell_kind,
                platform=leg.platform,
            )
            for leg in legs
            if isinstance(leg, StationaryLeg)
        )
        object.__setattr__(self, "legs", legs)
        object.__setattr__(self, "start_time", legs[0].start_time)
        object.__setattr__(self, "end_time", legs[-1].end_time)
        object.__setattr__(self, "stops", stops)
        object.__setattr__(self, "_leg_starts", tuple(leg.start_time for leg in legs))

    def last_leg_starting_at_or_before(self, t: float) -> int:
        return bisect_right(self._leg_starts, t) - 1

    def stop_index(self, location: str, start: int = 0) -> int | None:
        code = location.lower()
        for i in range(start, len(self.stops)):
            if self.stops[i].location.lower() == code:
                return i
        return None

    def stationary_leg_indices(self) -> Sequence[int]:
        return [i for i, leg in enumerate(self.legs) if isinstance(leg, StationaryLeg)]
