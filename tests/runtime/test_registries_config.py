import pytest
from pydantic import ValidationError

from rail_tracker.config.models import EngineModel, StationaryAnchorModel
from rail_tracker.domain.mechanics.mechanics_stationary import AdjacentAnchorPolicy, DwellPinPolicy
from rail_tracker.runtime.registries import make_stationary_policy, register_stationary_policy


def test_defaults():
    cfg = EngineModel()
    assert cfg.network.pair_separator == "_"
    assert cfg.network.timezone == "Europe/Amsterdam"
    assert cfg.tolerance.offset_km == 1e-6
    assert cfg.stationary.kind == "dwell"
    assert cfg.passages.window_ms == 7_200_000


def test_stationary_union_discriminates_on_kind():
    cfg = EngineModel.model_validate({"stationary": {"kind": "anchor", "prefer": "next"}})
    assert isinstance(cfg.stationary, StationaryAnchorModel)
    policy = make_stationary_policy(cfg.stationary)
    assert isinstance(policy, AdjacentAnchorPolicy) and policy.prefer == "next"
    assert isinstance(make_stationary_policy(EngineModel().stationary), DwellPinPolicy)


@pytest.mark.parametrize(
    "raw",
    [
        {"stationary": {"kind": "teleport"}},
        {"network": {"pair_separator": ""}},
        {"network": {"timezone": "Mars/Olympus_Mons"}},
        {"tolerance": {"fraction": -1}},
        {"passages": {"window_ms": 0}},
        {"log": {"level": "LOUD"}},
        {"unknown_section": {}},
    ],
)
def test_invalid_config_is_rejected(raw):
    with pytest.raises(ValidationError):
        EngineModel.model_validate(raw)


def test_registered_policy_factories_are_used():
    class Fixed:
        kind = "fixed"

    sentinel = DwellPinPolicy()

    @register_stationary_policy("fixed")
    def _make_fixed(cfg, deps):
        return deps["policy"]

    assert make_stationary_policy(Fixed(), deps={"policy": sentinel}) is sentinel


def test_unknown_policy_kind():
    class Odd:
        kind = "odd"

    with pytest.raises(ValueError, match="odd"):
        make_stationary_policy(Odd())
