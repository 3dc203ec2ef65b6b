import numpy as np
import pytest

from rail_tracker.domain.entities.geography import Coordinate
from rail_tracker.domain.entities.network import (
    DirectedSegment,
    Segment,
    SegmentRegistry,
    TrackPosition,
    pair_code,
)
from rail_tracker.domain.errors import SegmentNotFoundError
from rail_tracker.domain.mechanics.mechanics_resolver import realize

A, B = Coordinate(0.0, 0.0), Coordinate(0.0, 1.0)


@pytest.fixture
def registry() -> SegmentRegistry:
    reg = SegmentRegistry()
    reg.add(Segment.from_coordinates("A", "B", [A, Coordinate(0.0, 0.4), B]))
    return reg


def test_pair_code_is_lowercase():
    assert pair_code("UT", "Asd") == "ut_asd"
    assert pair_code("UT", "Asd", "-") == "ut-asd"


def test_both_directions_share_one_segment(registry: SegmentRegistry):
    fwd = registry.directed("A_B")
    rev = registry.directed("b_a")
    assert fwd.segment is rev.segment
    assert not fwd.reversed and rev.reversed
    assert len(registry) == 1
    assert "a_b" in registry and "B_A" in registry
    assert list(registry) == [fwd.segment]


def test_pair_registered_twice_counts_once(registry: SegmentRegistry):
    first = registry.get("a_b")
    # a feed listing the same track in both directions
    kept = registry.add(Segment.from_coordinates("B", "A", [B, A]))
    assert kept is first
    assert len(registry) == 1 and list(registry) == [first]
    assert registry.directed("b_a").segment is first and registry.directed("b_a").reversed


def test_endpoints_follow_direction(registry: SegmentRegistry):
    fwd = registry.between("A", "B")
    rev = registry.between("B", "A")
    assert (fwd.first_location, fwd.last_location) == ("A", "B")
    assert (rev.first_location, rev.last_location) == ("B", "A")
    assert rev.first_point.coordinate == B and rev.last_point.coordinate == A
    assert rev.opposite() == fwd


def test_missing_code_raises(registry: SegmentRegistry):
    with pytest.raises(SegmentNotFoundError) as ei:
        registry.directed("A_C")
    assert ei.value.code == "A_C"
    with pytest.raises(KeyError):
        registry.between("X", "Y")


def test_empty_separator_rejected():
    with pytest.raises(ValueError):
        SegmentRegistry(separator="")


def test_direction_symmetry(registry: SegmentRegistry):
    ds = registry.between("A", "B")
    other = ds.opposite()
    length = ds.length
    for x in np.linspace(0.0, length, 17):
        assert ds.normalize_offset(x) == pytest.approx(length - other.normalize_offset(x))


def test_reversed_traversal_starts_at_b(registry: SegmentRegistry):
    ds = registry.between("B", "A")
    assert ds.normalize_offset(0.0) == ds.length
    native = ds.segment.path.interpolate(ds.normalize_offset(0.0))
    assert native.coordinate.longitude == pytest.approx(1.0)

    pos = realize(TrackPosition(ds, 0.0))
    assert pos.coordinate.longitude == pytest.approx(1.0)
    assert pos.heading == pytest.approx((0.0, -1.0))


def test_iter_with_distance_in_travel_order(registry: SegmentRegistry):
    fwd = list(registry.between("A", "B").iter_with_distance())
    rev = list(registry.between("B", "A").iter_with_distance())

    assert [p.coordinate for p, _ in rev] == [p.coordinate for p, _ in reversed(fwd)]
    dist = [d for _, d in rev]
    assert dist[0] == 0.0
    assert dist[-1] == pytest.approx(fwd[-1][1])
    assert all(a <= b for a, b in zip(dist, dist[1:]))


def test_directed_segment_is_a_reference_not_a_copy(registry: SegmentRegistry):
    seg = next(iter(registry))
    ds = DirectedSegment(seg, reversed=True)
    assert ds.segment.path is seg.path
    assert ds.length == seg.length
