# rail_tracker/app/build.py
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from rail_tracker.app.protocols import RouteFinder, StationaryPolicy
from rail_tracker.app.planner import HopMatch, HopMiss, plan_trip
from rail_tracker.app.tick import positions_at
from rail_tracker.config.models import EngineModel
from rail_tracker.domain.entities.geography import Position2D
from rail_tracker.domain.passages import PlatformPassages
from rail_tracker.io.records import LocationRecord, ScheduleRecord, SegmentRecord
from rail_tracker.io.refresh_logging import RefreshLogging
from rail_tracker.runtime.registries import make_stationary_policy
from rail_tracker.runtime.snapshot import Snapshot, SnapshotStore, build_snapshot
from rail_tracker.sim.clock import ServiceClock
from rail_tracker.sim.hooks import EngineHooks, NoopHooks


@dataclass
class App:
    cfg: EngineModel
    clock: ServiceClock
    hooks: EngineHooks
    policy: StationaryPolicy
    store: SnapshotStore

    @property
    def snapshot(self) -> Snapshot:
        snap = self.store.current
        if snap is None:
            raise RuntimeError("no data loaded yet; call refresh() first")
        return snap

    def refresh(
        self,
        segments: Iterable[SegmentRecord | Mapping],
        locations: Iterable[LocationRecord | Mapping],
        schedules: Iterable[ScheduleRecord | Mapping],
        *,
        deadline_s: float | None = None,
    ) -> Snapshot:
        def _build(generation: int) -> Snapshot:
            return build_snapshot(
                [_as(SegmentRecord, r) for r in segments],
                [_as(LocationRecord, r) for r in locations],
                [_as(ScheduleRecord, r) for r in schedules],
                cfg=self.cfg,
                generation=generation,
                deadline_s=deadline_s,
            )

        return self.store.refresh(_build)

    def positions(self, t: float | None = None) -> dict[str, Position2D]:
        t = self.clock.day_offset() if t is None else t
        return positions_at(
            self.snapshot, t, policy=self.policy, tolerance=self.cfg.tolerance, hooks=self.hooks
        )

    def station_board(self, location: str, now: float | None = None) -> list[PlatformPassages]:
        """Passages per platform within [now, now + window]; [] for quiet stations."""
        now = self.clock.day_offset() if now is None else now
        passages = self.snapshot.passages.lookup(location)
        if passages is None:
            return []
        return passages.between(now, now + self.cfg.passages.window_ms)

    def plan(self, finder: RouteFinder, from_query: str, to_query: str) -> list[HopMatch | HopMiss]:
        return plan_trip(finder, from_query, to_query, self.snapshot)


def _as(model, rec):
    return rec if isinstance(rec, model) else model.model_validate(rec)


def build(cfg: EngineModel | Mapping | None = None, *, use_logging: bool = True) -> App:
    model = cfg if isinstance(cfg, EngineModel) else EngineModel.model_validate(cfg or {})

    hooks = (
        RefreshLogging(name=model.name, level=model.log.level, debug=model.log.debug)
        if use_logging
        else NoopHooks()
    )
    return App(
        cfg=model,
        clock=ServiceClock(model.network.timezone),
        hooks=hooks,
        policy=make_stationary_policy(model.stationary),
        store=SnapshotStore(hooks=hooks),
    )
