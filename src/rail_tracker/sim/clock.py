# sim/clock.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from zoneinfo import ZoneInfo

# schedule times are milliseconds since local service-day midnight
MS = 1.0
SEC = 1000 * MS
MIN = 60 * SEC
HOUR = 60 * MIN
DAY = 24 * HOUR


def seconds(x: float) -> float:
    return x * SEC


def minutes(x: float) -> float:
    return x * MIN


def hours(x: float) -> float:
    return x * HOUR


def as_seconds(ms: float) -> float:
    return ms / SEC


def remap(value: float, from_low: float, from_high: float, to_low: float, to_high: float) -> float:
    return to_low + (value - from_low) * (to_high - to_low) / (from_high - from_low)


def format_day_offset(ms: float) -> str:
    """'HH:MM' for an offset into the day; wraps past midnight."""
    into_day = ms % DAY
    hh = int(into_day // HOUR)
    mm = int((into_day - hh * HOUR) // MIN)
    return f"{hh:02d}:{mm:02d}"


@dataclass(frozen=True)
class ServiceClock:
    timezone: str = "Europe/Amsterdam"

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def _local(self, dt: datetime | None) -> datetime:
        if dt is None:
            return datetime.now(self.tz)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        return dt.astimezone(self.tz)

    def service_date(self, dt: datetime | None = None) -> date:
        return self._local(dt).date()

    def day_offset(self, dt: datetime | None = None) -> float:
        """Wall-clock milliseconds since local midnight of `dt`, default now."""
        local = self._local(dt)
        midnight = datetime.combine(local.date(), time(0), tzinfo=self.tz)
        return (local - midnight).total_seconds() * SEC

    def to_wall(self, ms: float, day: date) -> datetime:
        midnight = datetime.combine(day, time(0), tzinfo=self.tz)
        return midnight + timedelta(milliseconds=ms)
