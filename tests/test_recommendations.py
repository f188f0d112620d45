"""Unit tests for age-based recommendations."""

from datetime import datetime, timedelta

import pytest

from babytracker.health.recommendations import (
    growth_status,
    is_late_for_feeding,
    next_feeding_time,
    recommended_daily_milk,
    recommended_daily_sleep,
    recommended_feeding_interval,
)


@pytest.mark.parametrize("weeks, hours", [(0, 2), (3, 2), (4, 3), (11, 3), (12, 4), (30, 4)])
def test_recommended_feeding_interval(weeks, hours):
    assert recommended_feeding_interval(weeks) == hours


@pytest.mark.parametrize("weeks, hours", [(2, 16), (4, 14), (12, 12), (24, 11), (60, 11)])
def test_recommended_daily_sleep(weeks, hours):
    assert recommended_daily_sleep(weeks) == hours * 60


def test_recommended_daily_milk_scales_with_weight():
    assert recommended_daily_milk(4000, 2) == 600
    assert recommended_daily_milk(6000, 16) == 720
    assert recommended_daily_milk(8000, 30) == 800


def test_next_feeding_time_after_last_feeding():
    last = datetime(2024, 3, 10, 9, 0)
    assert next_feeding_time(last, 3) == datetime(2024, 3, 10, 12, 0)


def test_next_feeding_time_without_feeding_is_now():
    now = datetime(2024, 3, 10, 9, 0)
    assert next_feeding_time(None, 3, now) == now


def test_is_late_for_feeding():
    last = datetime(2024, 3, 10, 9, 0)
    assert is_late_for_feeding(last, 3, last + timedelta(hours=3, minutes=1))
    assert not is_late_for_feeding(last, 3, last + timedelta(hours=2))
    assert not is_late_for_feeding(None, 3, last)


def test_growth_status():
    assert growth_status(4300, 4000, 10) == "gaining"
    assert growth_status(4100, 4000, 10) == "stable"
    assert growth_status(3800, 4000, 10) == "losing"
    assert growth_status(4300, 4000, 0) == "stable"
