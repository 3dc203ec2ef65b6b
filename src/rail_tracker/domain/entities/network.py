# domain/entities/network.py
from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from rail_tracker.domain.entities.geography import Coordinate, Path, PathPoint
from rail_tracker.domain.errors import SegmentNotFoundError

PAIR_SEPARATOR = "_"


@dataclass(frozen=True)
class Location:
    code: str
    name: str
    coordinate: Coordinate
    rank: int = 0  # popularity, orders search suggestions


def pair_code(a: str, b: str, separator: str = PAIR_SEPARATOR) -> str:
    return f"{a}{separator}{b}".lower()


@dataclass(frozen=True, eq=False)
class Segment:
    """Undirected physical polyline between two locations (canonical from/to)."""

    from_location: str
    to_location: str
    path: Path

    @property
    def length(self) -> float:
        return self.path.length

    @classmethod
    def from_coordinates(
        cls, from_location: str, to_location: str, coordinates: Iterable[Coordinate]
    ) -> Segment:
        return cls(from_location, to_location, Path.from_coordinates(list(coordinates)))


@dataclass(frozen=True)
class DirectedSegment:
    """A shared Segment walked in one direction. Never copies the path."""

    segment: Segment
    reversed: bool = False

    @property
    def length(self) -> float:
        return self.segment.path.length

    @property
    def first_location(self) -> str:
        return self.segment.to_location if self.reversed else self.segment.from_location

    @property
    def last_location(self) -> str:
        return self.segment.from_location if self.reversed else self.segment.to_location

    @property
    def first_point(self) -> PathPoint:
        points = self.segment.path.points
        return points[-1] if self.reversed else points[0]

    @property
    def last_point(self) -> PathPoint:
        points = self.segment.path.points
        return points[0] if self.reversed else points[-1]

    def opposite(self) -> DirectedSegment:
        return DirectedSegment(self.segment, not self.reversed)

    def normalize_offset(self, native_offset: float) -> float:
        """Storage-order offset -> travel-order offset (and back; it is an involution)."""
        if self.reversed:
            return self.segment.path.length - native_offset
        return native_offset

    def iter_with_distance(self) -> Iterator[tuple[PathPoint, float]]:
        """
        Yield (point, distance from departure end) in travel order.

        All reversal arithmetic for walking a segment lives here.
        """
        path = self.segment.path
        if self.reversed:
            for point in reversed(path.points):
                yield point, path.length - point.start_offset
        else:
            for point in path.points:
                yield point, point.start_offset


class SegmentRegistry:
    """
    Shared store of Segments keyed by pair code in both directions.

    `a_b` and `b_a` resolve to the same Segment object.
    """

    def __init__(self, separator: str = PAIR_SEPARATOR):
        if not separator:
            raise ValueError("pair separator must be non-empty")
        self.separator = separator
        self._by_code: dict[str, Segment] = {}
        self._segments: list[Segment] = []

    def add(self, segment: Segment) -> Segment:
        """Register under both pair codes. A pair already registered keeps its first segment."""
        a, b = segment.from_location, segment.to_location
        existing = self._by_code.get(pair_code(a, b, self.separator))
        if existing is not None:
            return existing
        self._by_code[pair_code(a, b, self.separator)] = segment
        self._by_code[pair_code(b, a, self.separator)] = segment
        self._segments.append(segment)
        return segment

    def get(self, code: str) -> Segment | None:
        return self._by_code.get(code.lower())

    def directed(self, code: str) -> DirectedSegment:
        segment = self.get(code)
        if segment is None:
            raise SegmentNotFoundError(code)
        departure = code.partition(self.separator)[0]
        return DirectedSegment(segment, departure.lower() != segment.from_location.lower())

    def between(self, a: str, b: str) -> DirectedSegment:
        return self.directed(pair_code(a, b, self.separator))

    def __contains__(self, code: str) -> bool:
        return code.lower() in self._by_code

    def __iter__(self) -> Iterator[Segment]:
        return iter(self._segments)

    def __len__(self) -> int:
        return len(self._segments)


@dataclass(frozen=True)
class TrackPosition:
    segment: DirectedSegment
    offset: float  # km from the departure end, in travel direction
