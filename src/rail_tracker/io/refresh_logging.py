# io/refresh_logging.py
import json
import logging
import sys

from rail_tracker.sim.clock import format_day_offset
from rail_tracker.sim.hooks import NoopHooks


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        return json.dumps(payload, default=str)


def default_json_logger(name="rail_tracker", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
        logger.setLevel(level)
    return logger


class RefreshLogging(NoopHooks):
    """
    One place to shape and emit structured logs for refreshes and ticks.

    Resolve errors are per ride per frame; without `debug` each ride is
    reported once per generation so a broken ride cannot flood the log.
    """

    def __init__(
        self,
        name: str = "rail",
        level: str = "INFO",
        debug: bool = False,
        logger: logging.Logger | None = None,
    ):
        self.name, self.debug = name, debug
        self.log = logger or default_json_logger(level=level)
        self._generation = None
        self._reported: set[str] = set()

    def _emit(self, level: str, msg: str, **extra):
        payload = {"engine": self.name}
        if "t" in extra and extra["t"] is not None:
            payload["clock"] = format_day_offset(extra["t"])
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    # --------------- refresh lifecycle -----------------------------

    def refresh_start(self, *, generation, **extra):
        self._emit("INFO", "refresh_start", generation=generation, **extra)

    def refresh_end(self, *, generation, **extra):
        self._generation = generation
        self._reported.clear()
        self._emit("INFO", "refresh_end", generation=generation, **extra)

    def refresh_failed(self, *, generation, exc: BaseException, **extra):
        self._emit(
            "ERROR",
            "refresh_failed",
            generation=generation,
            error=type(exc).__name__,
            detail=str(exc),
            **extra,
        )

    # --------------- per tick -----------------------------

    def resolve_error(self, *, ride_id: str, t: float, exc: BaseException, **extra):
        if self.debug:
            level = "DEBUG"
        elif ride_id in self._reported:
            return
        else:
            self._reported.add(ride_id)
            level = "WARNING"
        self._emit(
            level,
            "resolve_error",
            ride_id=ride_id,
            t=t,
            error=type(exc).__name__,
            detail=str(exc),
            **extra,
        )

    def tick(self, *, t: float, **extra):
        if self.debug:
            self._emit("DEBUG", "tick", t=t, **extra)
