"""Unit tests for diaper statistics and health alerts."""

from datetime import datetime, timedelta

from babytracker.health.diapers import diaper_day_stats, diaper_health_alerts
from babytracker.models import DiaperEntry, Stool

NOW = datetime(2024, 3, 10, 18, 0)


def _diaper(hours_ago: float, kind: str = "wet", stool_color: str | None = None) -> DiaperEntry:
    return DiaperEntry(
        baby_id="b1",
        time=NOW - timedelta(hours=hours_ago),
        type=kind,
        stool=Stool(color=stool_color) if stool_color else None,
    )


def test_day_stats():
    diapers = [_diaper(1), _diaper(3, "soiled"), _diaper(5, "mixed"), _diaper(30)]
    stats = diaper_day_stats(diapers, NOW)
    assert stats.total == 3
    assert stats.wet == 2
    assert stats.soiled == 2
    assert stats.hours_since_last_wet == 1


def test_no_alerts_for_normal_day():
    assert diaper_health_alerts([_diaper(1), _diaper(4, "soiled", "yellow")], NOW) == []


def test_dehydration_alert_after_six_hours():
    alerts = diaper_health_alerts([_diaper(6), _diaper(2, "soiled", "yellow")], NOW)
    assert [a.level for a in alerts] == ["urgent"]
    assert "6h" in alerts[0].message


def test_abnormal_stool_color_in_recent_stools():
    diapers = [_diaper(1), _diaper(2, "soiled", "black")]
    alerts = diaper_health_alerts(diapers, NOW)
    assert [a.title for a in alerts] == ["Unusual stool color"]


def test_old_abnormal_stool_is_ignored():
    diapers = [_diaper(1)] + [_diaper(h, "soiled", "yellow") for h in (2, 3, 4)] + [_diaper(5, "soiled", "red")]
    assert diaper_health_alerts(diapers, NOW) == []


def test_frequent_stools_warning():
    diapers = [_diaper(0.5)] + [_diaper(h, "soiled", "yellow") for h in range(1, 7)]
    alerts = diaper_health_alerts(diapers, NOW)
    assert [a.title for a in alerts] == ["Frequent stools"]
