# runtime/registries.py
from collections.abc import Callable
from typing import Any

from rail_tracker.app.protocols import StationaryPolicy
from rail_tracker.config.models import (
    StationaryAnchorModel,
    StationaryDwellModel,
    StationaryPolicyUnion,
)
from rail_tracker.domain.mechanics.mechanics_stationary import AdjacentAnchorPolicy, DwellPinPolicy

StationaryFactory = Callable[[StationaryPolicyUnion, dict[str, Any]], StationaryPolicy]

_stationary_registry: dict[str, StationaryFactory] = {}


# ------------------- Stationary policy registry ---------------------------


def register_stationary_policy(kind: str):
    def deco(fn: StationaryFactory):
        _stationary_registry[kind] = fn
        return fn

    return deco


def make_stationary_policy(cfg: StationaryPolicyUnion, *, deps: dict | None = None) -> StationaryPolicy:
    try:
        factory = _stationary_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown stationary policy kind {cfg.kind!r}") from None
    return factory(cfg, deps or {})


@register_stationary_policy("dwell")
def _make_dwell(cfg: StationaryDwellModel, deps):
    return DwellPinPolicy()


@register_stationary_policy("anchor")
def _make_anchor(cfg: StationaryAnchorModel, deps):
    return AdjacentAnchorPolicy(prefer=cfg.prefer)
