from datetime import datetime
from typing import Literal, Optional

from pydantic import Field

from babytracker.utils import generate_id

from .base import CamelModel, LocalDatetime

NotificationType = Literal["feeding", "sleep", "diaper", "health", "milestone", "reminder"]
Priority = Literal["low", "medium", "high", "urgent"]


class Notification(CamelModel):
    """Advisory message generated on the client; never synced."""
    id: str = Field(default_factory=generate_id)
    type: NotificationType
    title: str
    message: str
    priority: Priority = "medium"
    is_read: bool = False
    created_at: LocalDatetime = Field(default_factory=datetime.now)
    action_url: Optional[str] = None
    icon: Optional[str] = None
    baby_id: Optional[str] = None


class NotificationSettings(CamelModel):
    enable_feeding_alerts: bool = True
    feeding_interval_minutes: int = 180
    enable_sleep_alerts: bool = True
    sleep_insufficient_threshold: float = Field(
        0.5, description="Share of the recommended daily sleep below which to alert"
    )
    sleep_quality_minimum_hours: float = 6
    enable_milestone_reminders: bool = True
    enable_health_reminders: bool = True
    quiet_hours_start: str = "22:00"
    quiet_hours_end: str = "07:00"
