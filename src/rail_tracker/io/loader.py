# io/loader.py
"""Turn validated input records into the immutable domain model."""

import time
from collections.abc import Iterable, Mapping

from rail_tracker.domain.entities.network import Location, Segment, SegmentRegistry, pair_code
from rail_tracker.domain.entities.schedule import (
    Leg,
    MovingLeg,
    PlatformInfo,
    Ride,
    StationaryLeg,
)
from rail_tracker.domain.errors import RefreshTimeoutError, UnknownLocationError
from rail_tracker.io.records import LegRecord, LocationRecord, ScheduleRecord, SegmentRecord


def build_registry(records: Iterable[SegmentRecord], *, separator: str = "_") -> SegmentRegistry:
    registry = SegmentRegistry(separator)
    for rec in records:
        registry.add(
            Segment.from_coordinates(
                rec.from_location,
                rec.to_location,
                (c.to_coordinate() for c in rec.coordinates),
            )
        )
    return registry


def build_locations(records: Iterable[LocationRecord]) -> dict[str, Location]:
    return {
        rec.code.lower(): Location(rec.code, rec.display_name, rec.coordinate.to_coordinate(), rec.rank)
        for rec in records
    }


def _moving_leg(rec: LegRecord, registry: SegmentRegistry) -> MovingLeg:
    codes = [rec.from_location, *rec.waypoint_codes, rec.to_location]
    segments = tuple(
        registry.directed(pair_code(a, b, registry.separator)) for a, b in zip(codes, codes[1:])
    )
    return MovingLeg(rec.start_time, rec.end_time, rec.from_location, rec.to_location, segments)


def _stationary_leg(rec: LegRecord, locations: Mapping[str, Location]) -> StationaryLeg:
    loc = locations.get(rec.location_code.lower())
    if loc is None:
        raise UnknownLocationError(rec.location_code)
    platform = None
    if rec.platform_arrival is not None:
        platform = PlatformInfo(rec.platform_arrival, rec.platform_departure)
    return StationaryLeg(
        rec.start_time, rec.end_time, loc.code, loc.coordinate, rec.dwell_kind, platform
    )


def build_ride(
    rec: ScheduleRecord, registry: SegmentRegistry, locations: Mapping[str, Location]
) -> Ride:
    legs: list[Leg] = [
        _moving_leg(leg, registry) if leg.is_moving else _stationary_leg(leg, locations)
        for leg in rec.legs
    ]
    return Ride(rec.id, tuple(legs), line=rec.line, operator=rec.operator)


def build_rides(
    records: Iterable[ScheduleRecord],
    registry: SegmentRegistry,
    locations: Mapping[str, Location],
    *,
    deadline: float | None = None,
) -> list[Ride]:
    """`deadline` is a time.monotonic() value; passing it aborts the whole build."""
    rides = []
    for rec in records:
        if deadline is not None and time.monotonic() > deadline:
            raise RefreshTimeoutError(f"ride build exceeded deadline after {len(rides)} rides")
        rides.append(build_ride(rec, registry, locations))
    return rides
