"""Unit tests for client-generated notifications."""

from datetime import date, datetime, timedelta

import pytest

from babytracker.models import AppSettings, Baby, FeedingEntry, NotificationSettings, SleepEntry
from babytracker.services.notification_service import (
    feeding_notifications,
    generate_all,
    health_notifications,
    is_quiet_time,
    sleep_notifications,
)

NOW = datetime(2024, 3, 10, 15, 0)
BABY = Baby(id="b1", name="Léa", birth_date=date(2024, 1, 15))


def _fed(hours_ago: float) -> FeedingEntry:
    return FeedingEntry(id="f1", baby_id="b1", kind="bottle", start_time=NOW - timedelta(hours=hours_ago))


def test_first_feeding_reminder():
    (n,) = feeding_notifications(BABY, None, 3, NOW)
    assert n.id == "feeding-first-b1-2024-03-10"
    assert n.baby_id == "b1"


def test_feeding_soon_and_late():
    assert feeding_notifications(BABY, _fed(2), 3, NOW) == []
    (soon,) = feeding_notifications(BABY, _fed(2.75), 3, NOW)
    assert soon.id == "feeding-soon-f1"
    (late,) = feeding_notifications(BABY, _fed(3.5), 3, NOW)
    assert (late.id, late.priority) == ("feeding-late-f1", "high")
    (very_late,) = feeding_notifications(BABY, _fed(6), 3, NOW)
    assert very_late.priority == "urgent"


def test_insufficient_sleep_after_two_pm():
    (n,) = sleep_notifications(BABY, 60, 14 * 60, None, 0.5, 6, NOW)
    assert n.id == "sleep-insufficient-b1-2024-03-10"
    assert sleep_notifications(BABY, 60, 14 * 60, None, 0.5, 6, NOW.replace(hour=11)) == []


def test_long_night_suppresses_insufficient_sleep():
    evening = NOW.replace(hour=21)
    night = SleepEntry(id="s1", baby_id="b1", start_time=evening - timedelta(hours=9), end_time=evening - timedelta(hours=2))
    assert sleep_notifications(BABY, 60, 14 * 60, night, 0.5, 6, evening) == []


def test_nap_recommended_after_four_hours_awake():
    nap = SleepEntry(id="s9", baby_id="b1", start_time=NOW - timedelta(hours=5), end_time=NOW - timedelta(hours=4, minutes=30))
    ids = [n.id for n in sleep_notifications(BABY, 600, 14 * 60, nap, 0.5, 6, NOW)]
    assert ids == ["sleep-needed-s9"]


def test_no_nap_reminder_during_ongoing_sleep():
    asleep = SleepEntry(id="s9", baby_id="b1", start_time=NOW - timedelta(hours=5))
    assert sleep_notifications(BABY, 600, 14 * 60, asleep, 0.5, 6, NOW) == []


def test_health_visit_and_milestone():
    at_twelve_weeks = datetime(2024, 4, 8, 10, 0)
    ids = {n.id for n in health_notifications(BABY, at_twelve_weeks)}
    assert ids == {"health-visit-b1-12", "milestone-b1-12"}
    assert health_notifications(BABY, at_twelve_weeks, visits=False, milestones=False) == []


@pytest.mark.parametrize("hour, minute, quiet", [(22, 0, True), (23, 30, True), (7, 0, True), (7, 1, False), (12, 0, False)])
def test_quiet_hours_wrap_midnight(hour, minute, quiet):
    assert is_quiet_time(NotificationSettings(), datetime(2024, 3, 10, hour, minute)) is quiet


def test_generate_all_is_silent_in_quiet_hours():
    night = NOW.replace(hour=23)
    assert generate_all(BABY, None, None, 0, 3, 14 * 60, NotificationSettings(), now=night) == []


def test_app_settings_thresholds_take_precedence():
    settings = AppSettings().merge({"notifications": {"sleep_insufficient_threshold": 0.01}})
    generated = generate_all(BABY, _fed(1), None, 60, 3, 14 * 60, NotificationSettings(), settings, NOW)
    assert not any(n.type == "sleep" for n in generated)
    generated = generate_all(BABY, _fed(1), None, 60, 3, 14 * 60, NotificationSettings(), None, NOW)
    assert any(n.id == "sleep-insufficient-b1-2024-03-10" for n in generated)
