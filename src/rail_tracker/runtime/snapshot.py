# runtime/snapshot.py
import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field

from rail_tracker.config.models import EngineModel
from rail_tracker.domain.categories import CategoryPalette
from rail_tracker.domain.entities.network import Location, SegmentRegistry
from rail_tracker.domain.entities.schedule import Ride
from rail_tracker.domain.errors import RefreshTimeoutError
from rail_tracker.domain.passages import StationPassageIndex
from rail_tracker.io.loader import build_locations, build_registry, build_rides
from rail_tracker.io.records import LocationRecord, ScheduleRecord, SegmentRecord
from rail_tracker.sim.hooks import EngineHooks, NoopHooks


@dataclass(frozen=True)
class Snapshot:
    """Everything readers need for one dataset generation. Never mutated."""

    generation: int
    registry: SegmentRegistry
    locations: Mapping[str, Location]
    rides: tuple[Ride, ...]
    passages: StationPassageIndex
    lines: CategoryPalette = field(default_factory=CategoryPalette, compare=False)
    rides_by_id: Mapping[str, Ride] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "rides_by_id", {r.id: r for r in self.rides})


def build_snapshot(
    segments: Iterable[SegmentRecord],
    locations: Iterable[LocationRecord],
    schedules: Iterable[ScheduleRecord],
    *,
    cfg: EngineModel | None = None,
    generation: int = 0,
    deadline_s: float | None = None,
) -> Snapshot:
    """Build a complete snapshot or raise. `deadline_s` is a soft budget in seconds."""
    cfg = cfg or EngineModel()
    deadline = None if deadline_s is None else time.monotonic() + deadline_s

    registry = build_registry(segments, separator=cfg.network.pair_separator)
    locs = build_locations(locations)
    rides = build_rides(schedules, registry, locs, deadline=deadline)
    passages = StationPassageIndex.build(rides)
    if deadline is not None and time.monotonic() > deadline:
        raise RefreshTimeoutError("passage index build exceeded deadline")

    lines = CategoryPalette()
    for ride in rides:
        if ride.line:
            lines.index(ride.line)

    return Snapshot(generation, registry, locs, tuple(rides), passages, lines)


class SnapshotStore:
    """
    Holds the live snapshot. Readers grab `current` once per tick; a refresh
    publishes by swapping the reference, so readers on the old one are unaffected.
    """

    def __init__(self, hooks: EngineHooks | None = None):
        self._current: Snapshot | None = None
        self._generation = 0
        self._hooks = hooks or NoopHooks()

    @property
    def current(self) -> Snapshot | None:
        return self._current

    @property
    def next_generation(self) -> int:
        return self._generation + 1

    def refresh(self, build: Callable[[int], Snapshot]) -> Snapshot:
        generation = self.next_generation
        t0 = time.perf_counter()
        self._hooks.refresh_start(generation=generation)
        try:
            snap = build(generation)
        except Exception as exc:
            # old snapshot stays live
            self._hooks.refresh_failed(generation=generation, exc=exc)
            raise
        self._generation = generation
        self._current = snap
        self._hooks.refresh_end(
            generation=generation,
            segments=len(snap.registry),
            locations=len(snap.locations),
            rides=len(snap.rides),
            stations=len(snap.passages),
            wall_ms=(time.perf_counter() - t0) * 1000,
        )
        return snap
