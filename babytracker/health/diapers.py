"""Daily diaper statistics and hydration / stool alerts."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Optional

from babytracker.models.diaper import DiaperEntry

DEHYDRATION_HOURS = 6
MAX_DAILY_STOOLS = 6
ABNORMAL_STOOL_COLORS = frozenset({"black", "red", "white"})


@dataclass
class DiaperDayStats:
    total: int
    wet: int
    soiled: int
    hours_since_last_wet: Optional[float]


@dataclass
class DiaperAlert:
    level: Literal["warning", "urgent"]
    title: str
    message: str


def _has_urine(entry: DiaperEntry) -> bool:
    return entry.type in ("wet", "mixed")


def _has_stool(entry: DiaperEntry) -> bool:
    return entry.type in ("soiled", "mixed")


def diaper_day_stats(diapers: Iterable[DiaperEntry], now: Optional[datetime] = None) -> DiaperDayStats:
    """Counts for ``now``'s calendar day, and hours since the last wet diaper overall."""
    now = now or datetime.now()
    diapers = list(diapers)
    today = [d for d in diapers if d.time.date() == now.date()]
    wet_times = [d.time for d in diapers if _has_urine(d) and d.time <= now]
    last_wet = max(wet_times, default=None)
    return DiaperDayStats(
        total=len(today),
        wet=sum(1 for d in today if _has_urine(d)),
        soiled=sum(1 for d in today if _has_stool(d)),
        hours_since_last_wet=(now - last_wet).total_seconds() / 3600 if last_wet else None,
    )


def diaper_health_alerts(diapers: Iterable[DiaperEntry], now: Optional[datetime] = None) -> list[DiaperAlert]:
    now = now or datetime.now()
    diapers = sorted(diapers, key=lambda d: d.time, reverse=True)
    stats = diaper_day_stats(diapers, now)
    alerts: list[DiaperAlert] = []

    if stats.hours_since_last_wet is not None and stats.hours_since_last_wet >= DEHYDRATION_HOURS:
        alerts.append(DiaperAlert(
            level="urgent",
            title="Possible dehydration",
            message=f"No wet diaper for {int(stats.hours_since_last_wet)}h. Offer a feed and call your pediatrician if this continues.",
        ))

    recent_stools = [d for d in diapers if _has_stool(d)][:3]
    if any(d.stool_color in ABNORMAL_STOOL_COLORS for d in recent_stools):
        alerts.append(DiaperAlert(
            level="warning",
            title="Unusual stool color",
            message="Black, red or white stools should be checked by a doctor.",
        ))

    if stats.soiled >= MAX_DAILY_STOOLS:
        alerts.append(DiaperAlert(
            level="warning",
            title="Frequent stools",
            message=f"{stats.soiled} soiled diapers today. Watch for diarrhea and dehydration.",
        ))
    return alerts
