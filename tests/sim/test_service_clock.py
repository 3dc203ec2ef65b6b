from datetime import UTC, date, datetime

import pytest

from rail_tracker.sim.clock import (
    DAY,
    ServiceClock,
    as_seconds,
    format_day_offset,
    hours,
    minutes,
    remap,
    seconds,
)


def test_unit_helpers():
    assert seconds(1.5) == 1500
    assert minutes(2) == 120_000
    assert hours(1) == 3_600_000
    assert as_seconds(hours(1)) == 3600
    assert remap(5, 0, 10, 100, 200) == 150


@pytest.mark.parametrize(
    "ms, text",
    [(0, "00:00"), (hours(8) + minutes(5), "08:05"), (hours(23) + minutes(59) + seconds(59), "23:59")],
)
def test_format_day_offset(ms, text):
    assert format_day_offset(ms) == text


def test_format_wraps_past_midnight():
    assert format_day_offset(DAY + hours(1) + minutes(30)) == "01:30"


def test_day_offset_in_winter_and_summer():
    clock = ServiceClock("Europe/Amsterdam")
    # CET is UTC+1, CEST is UTC+2
    assert clock.day_offset(datetime(2024, 1, 15, 11, 0, tzinfo=UTC)) == hours(12)
    assert clock.day_offset(datetime(2024, 7, 15, 10, 0, tzinfo=UTC)) == hours(12)


def test_naive_datetimes_are_taken_as_utc():
    clock = ServiceClock("Europe/Amsterdam")
    assert clock.day_offset(datetime(2024, 1, 15, 11, 0)) == hours(12)


def test_service_date_follows_local_midnight():
    clock = ServiceClock("Europe/Amsterdam")
    assert clock.service_date(datetime(2024, 1, 15, 23, 30, tzinfo=UTC)) == date(2024, 1, 16)


def test_to_wall_round_trip():
    clock = ServiceClock("Europe/Amsterdam")
    wall = clock.to_wall(hours(17) + minutes(42), date(2024, 3, 1))
    assert (wall.hour, wall.minute) == (17, 42)
    assert clock.day_offset(wall) == hours(17) + minutes(42)


def test_now_is_within_the_day():
    assert 0 <= ServiceClock().day_offset() < DAY
