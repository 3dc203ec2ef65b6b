# app/planner.py
"""
Glue between the external route finder and loaded rides.

A hop may name a ride that is not loaded (stale timetable, international
trains with missing legs); that is a per-hop miss, never an error.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from rail_tracker.app.protocols import RouteFinder
from rail_tracker.domain.entities.network import Location
from rail_tracker.domain.entities.schedule import Leg, Ride
from rail_tracker.domain.errors import UnknownLocationError
from rail_tracker.io.records import RouteHop
from rail_tracker.runtime.snapshot import Snapshot


@dataclass(frozen=True)
class HopMatch:
    hop: RouteHop
    ride: Ride
    from_stop_index: int
    to_stop_index: int
    from_leg_index: int
    to_leg_index: int

    @property
    def legs(self) -> tuple[Leg, ...]:
        return self.ride.legs[self.from_leg_index : self.to_leg_index + 1]


@dataclass(frozen=True)
class HopMiss:
    hop: RouteHop
    reason: str


def find_location_code(query: str, locations: Mapping[str, Location]) -> str | None:
    """Exact code first (case-insensitive), then display name."""
    q = query.strip().lower()
    if q in locations:
        return locations[q].code
    for loc in locations.values():
        if loc.code.lower() == q or loc.name.lower() == q:
            return loc.code
    return None


def location_suggestions(locations: Mapping[str, Location]) -> list[str]:
    """Display names, most prominent first."""
    ordered = sorted(locations.values(), key=lambda loc: loc.rank, reverse=True)
    return [loc.name for loc in ordered]


def match_hop(hop: RouteHop, rides_by_id: Mapping[str, Ride]) -> HopMatch | HopMiss:
    ride = rides_by_id.get(hop.ride_id)
    if ride is None:
        return HopMiss(hop, f"ride {hop.ride_id!r} not loaded")
    start = ride.stop_index(hop.from_location)
    if start is None:
        return HopMiss(hop, f"ride {hop.ride_id!r} does not stop at {hop.from_location!r}")
    end = ride.stop_index(hop.to_location, start + 1)
    if end is None:
        return HopMiss(hop, f"ride {hop.ride_id!r} does not reach {hop.to_location!r} after {hop.from_location!r}")
    stationary = ride.stationary_leg_indices()
    return HopMatch(hop, ride, start, end, stationary[start], stationary[end])


def match_plan(hops: Iterable[RouteHop], snapshot: Snapshot) -> list[HopMatch | HopMiss]:
    return [match_hop(h, snapshot.rides_by_id) for h in hops]


def plan_trip(
    finder: RouteFinder, from_query: str, to_query: str, snapshot: Snapshot
) -> list[HopMatch | HopMiss]:
    origin = find_location_code(from_query, snapshot.locations)
    if origin is None:
        raise UnknownLocationError(from_query)
    destination = find_location_code(to_query, snapshot.locations)
    if destination is None:
        raise UnknownLocationError(to_query)
    return match_plan(finder.find_route(origin, destination), snapshot)
