# domain/entities/geography.py
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np

from rail_tracker.domain.errors import InvalidPathError, OffsetOutOfRangeError

EARTH_DIAMETER_KM = 12742.0  # 2 * R; R = 6371 km
OFFSET_TOLERANCE_KM = 1e-6

Heading = tuple[float, float]
ZERO_HEADING: Heading = (0.0, 0.0)


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class PathPoint:
    coordinate: Coordinate
    start_offset: float  # km along the path from its first point


@dataclass(frozen=True)
class Position2D:
    coordinate: Coordinate
    heading: Heading = ZERO_HEADING  # unit (dlat, dlon) in direction of travel

    def flipped(self) -> Position2D:
        dlat, dlon = self.heading
        return Position2D(self.coordinate, (-dlat + 0.0, -dlon + 0.0))


def great_circle_km(lat1, lon1, lat2, lon2):
    """Haversine distance in km. Works on scalars and numpy arrays alike."""
    p = np.pi / 180.0
    a = (
        0.5
        - np.cos((lat2 - lat1) * p) / 2
        + np.cos(lat1 * p) * np.cos(lat2 * p) * (1 - np.cos((lon2 - lon1) * p)) / 2
    )
    return EARTH_DIAMETER_KM * np.arcsin(np.sqrt(np.clip(a, 0.0, 1.0)))


def great_circle_distance(a: Coordinate, b: Coordinate) -> float:
    return float(great_circle_km(a.latitude, a.longitude, b.latitude, b.longitude))


@dataclass(eq=False)
class Path:
    """
    Polyline indexed by cumulative great-circle distance.

    Built once from an ordered coordinate list and never mutated afterwards.
    `length == points[-1].start_offset`.
    """

    points: tuple[PathPoint, ...]
    length: float
    _offsets: np.ndarray = field(repr=False)
    _headings: np.ndarray = field(repr=False)  # (n_spans, 2), zero rows for degenerate spans

    @classmethod
    def from_coordinates(cls, coordinates: Sequence[Coordinate]) -> Path:
        if len(coordinates) < 2:
            raise InvalidPathError(f"expected at least 2 coordinates, got {len(coordinates)}")

        lat = np.fromiter((c.latitude for c in coordinates), dtype=float, count=len(coordinates))
        lon = np.fromiter((c.longitude for c in coordinates), dtype=float, count=len(coordinates))

        steps = great_circle_km(lat[:-1], lon[:-1], lat[1:], lon[1:])
        offsets = np.concatenate(([0.0], np.cumsum(steps)))

        deltas = np.column_stack((lat[1:] - lat[:-1], lon[1:] - lon[:-1]))
        norms = np.hypot(deltas[:, 0], deltas[:, 1])
        headings = np.zeros_like(deltas)
        moving = (norms > 0) & (steps > 0)
        headings[moving] = deltas[moving] / norms[moving, None]

        points = tuple(
            PathPoint(coordinate=c, start_offset=float(o)) for c, o in zip(coordinates, offsets)
        )
        return cls(points, float(offsets[-1]), offsets, headings)

    # ---------------- lookup -----------------

    def _span_index(self, offset: float, tolerance: float) -> int:
        """Index i of the first span (points[i], points[i+1]) containing offset."""
        if offset < -tolerance or offset > self.length + tolerance:
            raise OffsetOutOfRangeError(
                f"offset {offset} outside path of length {self.length} km"
            )
        # first point whose offset >= target; the span ends there
        hi = int(np.searchsorted(self._offsets, offset, side="left"))
        hi = min(max(hi, 1), len(self.points) - 1)
        return hi - 1

    def find_offset_span(
        self, offset: float, *, tolerance: float = OFFSET_TOLERANCE_KM
    ) -> tuple[PathPoint, PathPoint]:
        i = self._span_index(offset, tolerance)
        return self.points[i], self.points[i + 1]

    def span_heading(self, index: int) -> Heading:
        """Heading of span `index`; degenerate spans borrow the nearest real neighbour."""
        n = len(self._headings)
        for dist in range(n):
            for j in (index - dist, index + dist):
                if 0 <= j < n and (self._headings[j, 0] or self._headings[j, 1]):
                    return float(self._headings[j, 0]), float(self._headings[j, 1])
        return ZERO_HEADING

    def interpolate(self, offset: float, *, tolerance: float = OFFSET_TOLERANCE_KM) -> Position2D:
        # planar lerp of lat/lon; fine at the point density of rail geometry
        i = self._span_index(offset, tolerance)
        low, high = self.points[i], self.points[i + 1]
        span = high.start_offset - low.start_offset
        f = 0.0 if span <= 0 else min(max((offset - low.start_offset) / span, 0.0), 1.0)
        a, b = low.coordinate, high.coordinate
        coordinate = Coordinate(
            a.latitude + f * (b.latitude - a.latitude),
            a.longitude + f * (b.longitude - a.longitude),
        )
        return Position2D(coordinate, self.span_heading(i))
