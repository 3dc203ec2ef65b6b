# app/tick.py
import time

from rail_tracker.app.protocols import StationaryPolicy
from rail_tracker.config.models import ToleranceModel
from rail_tracker.domain.entities.geography import Position2D
from rail_tracker.domain.entities.schedule import Ride
from rail_tracker.domain.errors import QueryError
from rail_tracker.domain.mechanics.mechanics_resolver import is_active, resolve_and_realize
from rail_tracker.runtime.snapshot import Snapshot
from rail_tracker.sim.hooks import EngineHooks, NoopHooks


def active_rides(snapshot: Snapshot, t: float) -> list[Ride]:
    return [r for r in snapshot.rides if is_active(r, t)]


def positions_at(
    snapshot: Snapshot,
    t: float,
    *,
    policy: StationaryPolicy | None = None,
    tolerance: ToleranceModel | None = None,
    hooks: EngineHooks | None = None,
) -> dict[str, Position2D]:
    """
    Positions of every ride active at `t`, keyed by ride id.

    A ride whose resolution fails is reported to the hooks and left out of
    this tick; the others are unaffected.
    """
    hooks = hooks or NoopHooks()
    tol = tolerance or ToleranceModel()
    t0 = time.perf_counter()
    out: dict[str, Position2D] = {}
    active = 0
    for ride in snapshot.rides:
        if not is_active(ride, t):
            continue
        active += 1
        try:
            out[ride.id] = resolve_and_realize(
                ride,
                t,
                policy=policy,
                fraction_tolerance=tol.fraction,
                distance_tolerance=tol.distance_km,
                offset_tolerance=tol.offset_km,
            )
        except QueryError as exc:
            hooks.resolve_error(ride_id=ride.id, t=t, exc=exc)
    hooks.tick(t=t, active=active, resolved=len(out), wall_ms=(time.perf_counter() - t0) * 1000)
    return out
