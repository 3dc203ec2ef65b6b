# sim/hooks.py
from typing import Protocol


class EngineHooks(Protocol):
    def refresh_start(self, *, generation): ...
    def refresh_end(self, *, generation, segments, locations, rides, stations, wall_ms): ...
    def refresh_failed(self, *, generation, exc: BaseException): ...
    def resolve_error(self, *, ride_id: str, t: float, exc: BaseException): ...
    def tick(self, *, t: float, active: int, resolved: int, wall_ms: float): ...


class NoopHooks:
    def refresh_start(self, **_):
        pass

    def refresh_end(self, **_):
        pass

    def refresh_failed(self, **_):
        pass

    def resolve_error(self, **_):
        pass

    def tick(self, **_):
        pass
