# domain/mechanics/mechanics_stationary.py
from typing import Literal

from rail_tracker.app.protocols import StationaryPolicy
from rail_tracker.domain.entities.geography import ZERO_HEADING, Position2D
from rail_tracker.domain.entities.network import TrackPosition
from rail_tracker.domain.entities.schedule import MovingLeg, Ride, StationaryLeg


def _dwell_pin(leg: StationaryLeg) -> Position2D:
    return Position2D(leg.coordinate, ZERO_HEADING)


class DwellPinPolicy(StationaryPolicy):
    """Pin to the dwell location's coordinate with a zero heading."""

    def position(self, ride: Ride, leg_index: int) -> Position2D:
        return _dwell_pin(ride.legs[leg_index])


class AdjacentAnchorPolicy(StationaryPolicy):
    """
    Anchor to the end of the arriving moving leg (or the start of the departing
    one), so the vehicle keeps the heading it had on the track.
    """

    def __init__(self, prefer: Literal["previous", "next"] = "previous"):
        self.prefer = prefer

    def _previous(self, ride: Ride, i: int) -> TrackPosition | None:
        if i > 0:
            leg = ride.legs[i - 1]
            if isinstance(leg, MovingLeg) and leg.segments:
                last = leg.segments[-1]
                return TrackPosition(last, last.length)
        return None

    def _next(self, ride: Ride, i: int) -> TrackPosition | None:
        if i + 1 < len(ride.legs):
            leg = ride.legs[i + 1]
            if isinstance(leg, MovingLeg) and leg.segments:
                return TrackPosition(leg.segments[0], 0.0)
        return None

    def position(self, ride: Ride, leg_index: int) -> Position2D | TrackPosition:
        order = (self._previous, self._next)
        if self.prefer == "next":
            order = order[::-1]
        for side in order:
            tp = side(ride, leg_index)
            if tp is not None:
                return tp
        return _dwell_pin(ride.legs[leg_index])
