# domain/passages.py
"""
Station passage index: per location, per platform, time-ordered visits.

Built in one pass over all rides, then frozen. A failure anywhere (e.g. a
platform label without digits) aborts the build; nothing partial escapes.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass

from rail_tracker.domain.entities.schedule import Ride
from rail_tracker.domain.errors import NoDigitsInPlatformLabelError

_DIGITS = re.compile(r"\d+")


def platform_sort_key(label: str) -> tuple[int, int]:
    """(number from the first run of digits, code point of the last char)."""
    m = _DIGITS.search(label)
    if m is None:
        raise NoDigitsInPlatformLabelError(label)
    return int(m.group()), ord(label[-1])


def sort_platform_labels(labels: Iterable[str]) -> list[str]:
    return sorted(labels, key=platform_sort_key)


@dataclass(frozen=True)
class StationPassage:
    start_time: float
    end_time: float
    ride_id: str

    def overlaps(self, start: float, end: float) -> bool:
        return self.start_time <= end and self.end_time >= start


@dataclass(frozen=True)
class PlatformPassages:
    platform_label: str
    passages: tuple[StationPassage, ...]

    def between(self, start: float, end: float) -> list[StationPassage]:
        return [p for p in self.passages if p.overlaps(start, end)]


@dataclass(frozen=True)
class StationPassages:
    location: str
    platforms: tuple[PlatformPassages, ...]

    def platform(self, label: str) -> PlatformPassages | None:
        return next((p for p in self.platforms if p.platform_label == label), None)

    def between(self, start: float, end: float) -> list[PlatformPassages]:
        """Platforms restricted to a window; platforms with nothing in it are dropped."""
        out = []
        for p in self.platforms:
            hits = p.between(start, end)
            if hits:
                out.append(PlatformPassages(p.platform_label, tuple(hits)))
        return out


class StationPassageIndex(Mapping[str, StationPassages]):
    """
    Keyed by lower-cased location code. `StationPassages.location` keeps the
    canonical spelling.
    """

    def __init__(self, by_location: Mapping[str, StationPassages]):
        self._by_location = {code.lower(): s for code, s in by_location.items()}

    @classmethod
    def build(cls, rides: Iterable[Ride]) -> StationPassageIndex:
        buckets: dict[str, dict[str, list[StationPassage]]] = {}
        canonical: dict[str, str] = {}
        for ride in rides:
            for stop in ride.stops:
                platforms = buckets.setdefault(stop.location.lower(), {})
                canonical.setdefault(stop.location.lower(), stop.location)
                if stop.platform is None:
                    continue
                platforms.setdefault(stop.platform.label, []).append(
                    StationPassage(stop.arrival_time, stop.departure_time, ride.id)
                )

        by_location = {}
        for location, platforms in buckets.items():
            ordered = [
                PlatformPassages(
                    label,
                    tuple(sorted(platforms[label], key=lambda p: (p.start_time, p.end_time))),
                )
                for label in sort_platform_labels(platforms)
            ]
            by_location[location] = StationPassages(canonical[location], tuple(ordered))
        return cls(by_location)

    def lookup(self, location: str) -> StationPassages | None:
        return self._by_location.get(location.lower())

    def __getitem__(self, location: str) -> StationPassages:
        return self._by_location[location.lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_location)

    def __len__(self) -> int:
        return len(self._by_location)
