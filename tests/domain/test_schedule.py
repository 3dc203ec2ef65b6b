import pytest

from rail_tracker.domain.entities.geography import Coordinate
from rail_tracker.domain.entities.network import Segment, SegmentRegistry
from rail_tracker.domain.entities.schedule import (
    MovingLeg,
    PlatformInfo,
    Ride,
    StationaryLeg,
    Stop,
    StopKind,
)
from rail_tracker.domain.errors import InvalidRideError
from rail_tracker.sim.clock import hours, minutes

A, B, C = Coordinate(0.0, 0.0), Coordinate(0.0, 1.0), Coordinate(0.0, 2.0)


@pytest.fixture
def registry() -> SegmentRegistry:
    reg = SegmentRegistry()
    reg.add(Segment.from_coordinates("A", "B", [A, B]))
    reg.add(Segment.from_coordinates("C", "B", [C, B]))
    return reg


def _ride(registry, legs=None) -> Ride:
    legs = legs or [
        StationaryLeg(0, 1000, "A", A, StopKind.DEPARTURE, PlatformInfo("1")),
        MovingLeg(1000, 3000, "A", "C", (registry.between("A", "B"), registry.between("B", "C"))),
        StationaryLeg(3000, 4000, "C", C, StopKind.ARRIVAL, PlatformInfo("2", "3")),
    ]
    return Ride("r1", legs, line="IC", operator="NS")


def test_ride_derives_times_and_stops(registry):
    ride = _ride(registry)
    assert (ride.start_time, ride.end_time) == (0, 4000)
    assert [s.location for s in ride.stops] == ["A", "C"]
    assert ride.stops[1] == Stop("C", 3000, 4000, StopKind.ARRIVAL, PlatformInfo("2", "3"))
    assert ride.stationary_leg_indices() == [0, 2]


def test_moving_leg_total_distance(registry):
    leg = _ride(registry).legs[1]
    assert isinstance(leg, MovingLeg)
    assert leg.total_distance == pytest.approx(sum(s.length for s in leg.segments))
    assert leg.segments[1].reversed


def test_ride_rejects_bad_leg_sequences(registry):
    with pytest.raises(InvalidRideError):
        Ride("empty", ())
    with pytest.raises(InvalidRideError):
        _ride(
            registry,
            [StationaryLeg(0, 1000, "A", A), StationaryLeg(1500, 2000, "C", C)],
        )
    with pytest.raises(ValueError):
        _ride(registry, [StationaryLeg(1000, 500, "A", A)])


def test_moving_leg_segments_must_chain(registry):
    with pytest.raises(InvalidRideError):
        # A->B then C->B: the second segment does not start where the first ends
        MovingLeg(0, 10, "A", "B", (registry.between("A", "B"), registry.between("C", "B")))


def test_stop_index_is_case_insensitive(registry):
    ride = _ride(registry)
    assert ride.stop_index("c") == 1
    assert ride.stop_index("A", start=1) is None
    assert ride.stop_index("Z") is None


def test_stop_kind_from_record_keys():
    assert StopKind.from_record_keys({"Departure": {}}) == StopKind.DEPARTURE
    assert StopKind.from_record_keys(["StopShort"]) == StopKind.SHORT
    assert StopKind.from_record_keys(["StopLong"]) == StopKind.LONG
    assert StopKind.from_record_keys(["Arrival", "Departure"]) == StopKind.DEPARTURE
    with pytest.raises(ValueError):
        StopKind.from_record_keys(["Teleport"])


@pytest.mark.parametrize(
    "kind, expected",
    [
        (StopKind.ARRIVAL, "08:05"),
        (StopKind.DEPARTURE, "08:07"),
        (StopKind.SHORT, "08:07"),
        (StopKind.WAYPOINT, ""),
    ],
)
def test_stop_display_time(kind, expected):
    stop = Stop("ut", hours(8) + minutes(5), hours(8) + minutes(7), kind)
    assert stop.display_time() == expected


def test_unknown_stop_kind_cannot_be_displayed():
    with pytest.raises(ValueError):
        Stop("ut", 0, 0, StopKind.UNKNOWN).display_time()


def test_platform_display():
    assert PlatformInfo("5").display() == "5"
    assert PlatformInfo("5", "5").display() == "5"
    assert PlatformInfo("5", "6").display() == "5->6"
    assert Stop("ut", 0, 0, StopKind.SHORT).display_platform() == ""
