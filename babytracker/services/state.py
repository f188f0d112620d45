"""Immutable snapshot of everything the client holds in memory."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from babytracker.models import (
    AppSettings,
    Baby,
    DiaperEntry,
    FamilyMember,
    FeedingEntry,
    GrowthEntry,
    Notification,
    NotificationSettings,
    Preferences,
    SleepEntry,
    UserProfile,
)
from babytracker.models.feeding import FeedingKind

from .outbox import SyncStatus


class SleepTimer(BaseModel):
    model_config = {"frozen": True}

    is_running: bool = False
    seconds: int = 0
    start_time: Optional[datetime] = None
    session_id: Optional[str] = None


class FeedingSession(BaseModel):
    model_config = {"frozen": True}

    is_active: bool = False
    kind: FeedingKind = "bottle"
    amount: float = 0
    start_time: Optional[datetime] = None
    timer_seconds: int = 0
    session_id: Optional[str] = None


class StoreState(BaseModel):
    """One version of the application state; replaced wholesale on every change.

    ``revision`` increases on every change, ``entries_revision`` only when a
    local edit touches a tracked-entry collection.
    """

    model_config = {"frozen": True}

    current_baby: Optional[Baby] = None
    babies: tuple[Baby, ...] = ()
    feedings: tuple[FeedingEntry, ...] = ()
    sleeps: tuple[SleepEntry, ...] = ()
    diapers: tuple[DiaperEntry, ...] = ()
    growth: tuple[GrowthEntry, ...] = ()

    sleep_timer: SleepTimer = SleepTimer()
    feeding_session: FeedingSession = FeedingSession()

    notifications: tuple[Notification, ...] = ()
    unread_count: int = 0
    notification_settings: NotificationSettings = NotificationSettings()

    user_profile: Optional[UserProfile] = None
    app_settings: Optional[AppSettings] = None
    family_members: tuple[FamilyMember, ...] = ()
    preferences: Preferences = Preferences()

    sync_status: dict[str, SyncStatus] = Field(default_factory=dict)
    is_loading: bool = False
    revision: int = 0
    entries_revision: int = 0
