# domain/mechanics/mechanics_resolver.py
"""
Ride position resolution.

Every query is stateless: the active leg is found from the timestamp, moving
legs map elapsed time -> distance -> (segment, offset) -> coordinate.
"""

from rail_tracker.app.protocols import StationaryPolicy
from rail_tracker.domain.entities.geography import OFFSET_TOLERANCE_KM, Position2D
from rail_tracker.domain.entities.network import TrackPosition
from rail_tracker.domain.entities.schedule import Leg, MovingLeg, Ride
from rail_tracker.domain.errors import (
    FractionOutOfRangeError,
    SegmentNotFoundForDistanceError,
    TimeOutOfRangeError,
)
from rail_tracker.domain.mechanics.mechanics_stationary import DwellPinPolicy

FRACTION_TOLERANCE = 1e-9
DISTANCE_TOLERANCE_KM = 1e-6

_DEFAULT_POLICY = DwellPinPolicy()


def is_active(ride: Ride, t: float) -> bool:
    return ride.start_time <= t < ride.end_time


def active_leg_index(ride: Ride, t: float) -> int:
    # half-open: t == ride.end_time is out of range
    if not is_active(ride, t):
        raise TimeOutOfRangeError(
            f"t={t} outside ride {ride.id!r} [{ride.start_time}, {ride.end_time})"
        )
    # last leg starting at or before t; zero-length legs before it are skipped
    return ride.last_leg_starting_at_or_before(t)


def active_leg(ride: Ride, t: float) -> Leg:
    return ride.legs[active_leg_index(ride, t)]


def leg_fraction(leg: MovingLeg, t: float, *, tolerance: float = FRACTION_TOLERANCE) -> float:
    duration = leg.end_time - leg.start_time
    fraction = (t - leg.start_time) / duration if duration > 0 else 0.0
    if fraction < -tolerance or fraction > 1.0 + tolerance:
        raise FractionOutOfRangeError(f"fraction {fraction} for t={t} outside [0, 1]")
    return min(max(fraction, 0.0), 1.0)


def locate_distance(
    leg: MovingLeg, distance: float, *, tolerance: float = DISTANCE_TOLERANCE_KM
) -> TrackPosition:
    """First segment whose [running, running + length] contains `distance`."""
    running = 0.0
    for seg in leg.segments:
        length = seg.length
        if running - tolerance <= distance <= running + length + tolerance:
            return TrackPosition(seg, min(max(distance - running, 0.0), length))
        running += length
    raise SegmentNotFoundForDistanceError(
        f"distance {distance} km not covered by leg {leg.from_location}->{leg.to_location} "
        f"({running} km over {len(leg.segments)} segments)"
    )


def resolve(
    ride: Ride,
    t: float,
    *,
    policy: StationaryPolicy | None = None,
    fraction_tolerance: float = FRACTION_TOLERANCE,
    distance_tolerance: float = DISTANCE_TOLERANCE_KM,
) -> TrackPosition | Position2D:
    """TrackPosition on a moving leg; stationary legs are answered by `policy`."""
    i = active_leg_index(ride, t)
    leg = ride.legs[i]
    if not isinstance(leg, MovingLeg):
        return (policy or _DEFAULT_POLICY).position(ride, i)
    fraction = leg_fraction(leg, t, tolerance=fraction_tolerance)
    return locate_distance(leg, fraction * leg.total_distance, tolerance=distance_tolerance)


def realize(tp: TrackPosition, *, tolerance: float = OFFSET_TOLERANCE_KM) -> Position2D:
    ds = tp.segment
    pos = ds.segment.path.interpolate(ds.normalize_offset(tp.offset), tolerance=tolerance)
    # path headings follow storage order
    return pos.flipped() if ds.reversed else pos


def resolve_and_realize(
    ride: Ride,
    t: float,
    *,
    policy: StationaryPolicy | None = None,
    fraction_tolerance: float = FRACTION_TOLERANCE,
    distance_tolerance: float = DISTANCE_TOLERANCE_KM,
    offset_tolerance: float = OFFSET_TOLERANCE_KM,
) -> Position2D:
    res = resolve(
        ride,
        t,
        policy=policy,
        fraction_tolerance=fraction_tolerance,
        distance_tolerance=distance_tolerance,
    )
    if isinstance(res, TrackPosition):
        return realize(res, tolerance=offset_tolerance)
    return res
