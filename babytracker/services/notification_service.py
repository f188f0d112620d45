"""Client-generated reminders about feeding, sleep and health follow-up.

Identifiers are derived from the condition that triggered a notification
(e.g. the feeding that is now overdue) so that generating twice does not
produce duplicates.
"""

from datetime import datetime, timedelta
from typing import Optional

from babytracker.health.age import age_in_weeks
from babytracker.models import (
    AppSettings,
    Baby,
    FeedingEntry,
    Notification,
    NotificationSettings,
    SleepEntry,
)

VISIT_WEEKS = (1, 2, 4, 8, 12, 16, 24, 36, 52)

MILESTONES = {
    6: ("First smiles", "Baby starts smiling back at you"),
    12: ("Holds head up", "Baby should hold their head steady"),
    16: ("Tracks objects", "Baby follows objects with their eyes"),
    24: ("First tooth", "The first teeth may appear"),
    36: ("Sitting", "Baby can sit with support"),
}


def feeding_notifications(
    baby: Baby,
    last_feeding: Optional[FeedingEntry],
    interval_hours: float,
    now: datetime,
) -> list[Notification]:
    if last_feeding is None:
        return [Notification(
            id=f"feeding-first-{baby.id}-{now.date().isoformat()}",
            type="feeding",
            title="First feeding",
            message=f"Time to feed {baby.name}",
            priority="medium",
            created_at=now,
            action_url="/feeding",
            icon="🍼",
            baby_id=baby.id,
        )]

    elapsed = (now - last_feeding.start_time).total_seconds() / 60
    interval = interval_hours * 60
    if elapsed > interval:
        hours_late = int((elapsed - interval) // 60)
        return [Notification(
            id=f"feeding-late-{last_feeding.id}",
            type="feeding",
            title="Feeding overdue!",
            message=f"{baby.name} has not eaten for {int(elapsed // 60)}h",
            priority="urgent" if hours_late > 1 else "high",
            created_at=now,
            action_url="/feeding",
            icon="🚨",
            baby_id=baby.id,
        )]
    if elapsed > interval - 30:
        return [Notification(
            id=f"feeding-soon-{last_feeding.id}",
            type="feeding",
            title="Feeding soon",
            message=f"Get {baby.name}'s next feeding ready within 30min",
            priority="low",
            created_at=now,
            action_url="/feeding",
            icon="⏰",
            baby_id=baby.id,
        )]
    return []


def sleep_notifications(
    baby: Baby,
    total_sleep_today: int,
    recommended_sleep: int,
    last_sleep: Optional[SleepEntry],
    threshold: float,
    quality_minimum_hours: float,
    now: datetime,
) -> list[Notification]:
    """``total_sleep_today`` and ``recommended_sleep`` are in minutes."""
    notifications: list[Notification] = []

    if total_sleep_today < recommended_sleep * threshold and now.hour >= 14:
        had_quality_sleep = (
            last_sleep is not None
            and last_sleep.end_time is not None
            and last_sleep.start_time > now - timedelta(hours=24)
            and (last_sleep.end_time - last_sleep.start_time).total_seconds() / 3600 >= quality_minimum_hours
        )
        if not had_quality_sleep:
            notifications.append(Notification(
                id=f"sleep-insufficient-{baby.id}-{now.date().isoformat()}",
                type="sleep",
                title="Not enough sleep",
                message=(
                    f"{baby.name} slept {total_sleep_today // 60}h out of "
                    f"{recommended_sleep // 60}h recommended"
                ),
                priority="low",
                created_at=now,
                action_url="/sleep",
                icon="😴",
                baby_id=baby.id,
            ))

    if last_sleep is not None and not last_sleep.is_active:
        hours_since = (now - last_sleep.start_time).total_seconds() / 3600
        if hours_since > 4 and 8 < now.hour < 20:
            notifications.append(Notification(
                id=f"sleep-needed-{last_sleep.id}",
                type="sleep",
                title="Nap recommended",
                message=f"{baby.name} has not slept for {int(hours_since)}h",
                priority="medium",
                created_at=now,
                action_url="/sleep",
                icon="💤",
                baby_id=baby.id,
            ))
    return notifications


def health_notifications(
    baby: Baby,
    now: datetime,
    visits: bool = True,
    milestones: bool = True,
) -> list[Notification]:
    weeks = age_in_weeks(baby.birth_date, now)
    notifications: list[Notification] = []
    if visits and weeks in VISIT_WEEKS:
        notifications.append(Notification(
            id=f"health-visit-{baby.id}-{weeks}",
            type="health",
            title="Checkup",
            message=f"Remember to book the {weeks}-week checkup",
            priority="medium",
            created_at=now,
            icon="🏥",
            baby_id=baby.id,
        ))
    if milestones and weeks in MILESTONES:
        title, message = MILESTONES[weeks]
        notifications.append(Notification(
            id=f"milestone-{baby.id}-{weeks}",
            type="milestone",
            title=title,
            message=message,
            priority="low",
            created_at=now,
            icon="🎉",
            baby_id=baby.id,
        ))
    return notifications


def _hhmm(value: str) -> int:
    return int(value.replace(":", ""))


def is_quiet_time(settings: NotificationSettings, now: datetime) -> bool:
    """Quiet hours are inclusive at both ends and may wrap past midnight."""
    current = now.hour * 100 + now.minute
    start = _hhmm(settings.quiet_hours_start)
    end = _hhmm(settings.quiet_hours_end)
    if start > end:
        return current >= start or current <= end
    return start <= current <= end


def generate_all(
    baby: Baby,
    last_feeding: Optional[FeedingEntry],
    last_sleep: Optional[SleepEntry],
    total_sleep_today: int,
    interval_hours: float,
    recommended_sleep: int,
    settings: NotificationSettings,
    app_settings: Optional[AppSettings] = None,
    now: Optional[datetime] = None,
) -> list[Notification]:
    now = now or datetime.now()
    if is_quiet_time(settings, now):
        return []

    notifications: list[Notification] = []
    if settings.enable_feeding_alerts:
        notifications.extend(feeding_notifications(baby, last_feeding, interval_hours, now))
    if settings.enable_sleep_alerts:
        # Thresholds edited on the settings screen take precedence.
        prefs = app_settings.notifications if app_settings is not None else None
        notifications.extend(sleep_notifications(
            baby,
            total_sleep_today,
            recommended_sleep,
            last_sleep,
            prefs.sleep_insufficient_threshold if prefs else settings.sleep_insufficient_threshold,
            prefs.sleep_quality_minimum_hours if prefs else settings.sleep_quality_minimum_hours,
            now,
        ))
    if settings.enable_health_reminders or settings.enable_milestone_reminders:
        notifications.extend(health_notifications(
            baby,
            now,
            visits=settings.enable_health_reminders,
            milestones=settings.enable_milestone_reminders,
        ))
    return notifications
