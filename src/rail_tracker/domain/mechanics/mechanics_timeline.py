# domain/mechanics/mechanics_timeline.py
from collections.abc import Iterable
from dataclasses import dataclass

from rail_tracker.domain.entities.geography import Coordinate
from rail_tracker.domain.entities.schedule import MovingLeg, Ride
from rail_tracker.sim.clock import remap


@dataclass(frozen=True)
class TimelinePoint:
    coordinate: Coordinate
    time: float  # ms the vehicle passes this point


def leg_timeline(leg: MovingLeg) -> Iterable[TimelinePoint]:
    """Every path point of the leg, stamped with its pass time (constant speed)."""
    travelled = 0.0
    last = None
    for seg in leg.segments:
        for point, distance in seg.iter_with_distance():
            if leg.total_distance > 0:
                t = remap(travelled + distance, 0.0, leg.total_distance, leg.start_time, leg.end_time)
            else:
                t = leg.start_time
            tp = TimelinePoint(point.coordinate, t)
            # joint between consecutive segments
            if tp != last:
                yield tp
            last = tp
        travelled += seg.length


def ride_timeline(
    ride: Ride,
    start: float | None = None,
    end: float | None = None,
    *,
    first_leg: int = 0,
    last_leg: int | None = None,
) -> list[TimelinePoint]:
    """
    Timeline samples for legs[first_leg..last_leg] (inclusive), keeping only
    points whose time falls in [start, end] when a window is given.
    """
    stop = len(ride.legs) if last_leg is None else min(last_leg + 1, len(ride.legs))
    out: list[TimelinePoint] = []
    for leg in ride.legs[first_leg:stop]:
        if not isinstance(leg, MovingLeg):
            continue
        for tp in leg_timeline(leg):
            if start is not None and tp.time < start:
                continue
            if end is not None and tp.time > end:
                continue
            if out and out[-1] == tp:
                continue
            out.append(tp)
    return out
