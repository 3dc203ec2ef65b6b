from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from rail_tracker.domain.entities.geography import Position2D
from rail_tracker.domain.entities.network import TrackPosition
from rail_tracker.domain.entities.schedule import Ride
from rail_tracker.io.records import RouteHop


# ------------- Resolver --------------------
@runtime_checkable
class StationaryPolicy(Protocol):
    """
    Decides where a ride "is" while it dwells.

    Given the ride and the index of an active stationary leg, return either a
    realized Position2D or a TrackPosition anchored on an adjacent moving leg.
    """

    def position(self, ride: Ride, leg_index: int) -> Position2D | TrackPosition: ...


# ------------- External services --------------------
@runtime_checkable
class RouteFinder(Protocol):
    """
    Opaque path-finding service. Returns the hops of one or more candidate
    trips as a flat, ordered sequence.
    """

    def find_route(self, from_location: str, to_location: str) -> Sequence[RouteHop]: ...
