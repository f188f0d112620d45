"""User profile, application settings and family sharing."""

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import Field

from babytracker.utils import deep_merge, generate_id

from .base import CamelModel, LocalDatetime

UserRole = Literal["mother", "father", "guardian", "caregiver", "grandparent", "other"]
Language = Literal["fr", "en", "es", "de"]


class EmergencyContact(CamelModel):
    name: str
    phone: str
    relationship: str


class UserProfile(CamelModel):
    """The household account the babies belong to."""
    id: str = Field(default_factory=generate_id)
    first_name: str = ""
    last_name: str = ""
    email: str
    phone: Optional[str] = None
    avatar: str = "👩"
    role: UserRole = "mother"
    preferred_name: Optional[str] = None
    timezone: str = "Europe/Paris"
    language: Language = "fr"
    emergency_contact: Optional[EmergencyContact] = None
    is_verified: bool = False
    email_verified: bool = False
    phone_verified: bool = False
    created_at: Optional[LocalDatetime] = None
    updated_at: Optional[LocalDatetime] = None


# ── Settings ───────────────────────────────────────────────────────────────


class QuietHours(CamelModel):
    enabled: bool = False
    start: str = "22:00"
    end: str = "06:00"


class NotificationPreferences(CamelModel):
    enabled: bool = True
    feeding_reminders: bool = True
    feeding_interval: int = Field(180, description="Minutes between feeding reminders")
    sleep_reminders: bool = True
    sleep_insufficient_threshold: float = 0.5
    sleep_quality_minimum_hours: float = 6
    diaper_reminders: bool = True
    health_alerts: bool = True
    quiet_hours: QuietHours = QuietHours()
    push_notifications: bool = True
    email_notifications: bool = False


class PrivacySettings(CamelModel):
    data_sharing: bool = False
    analytics: bool = False
    face_id_unlock: bool = False


class BackupSettings(CamelModel):
    auto_backup: bool = True
    backup_frequency: Literal["daily", "weekly", "monthly"] = "daily"
    cloud_sync: bool = False


class UnitSettings(CamelModel):
    weight: Literal["grams", "pounds"] = "grams"
    height: Literal["cm", "inches"] = "cm"
    temperature: Literal["celsius", "fahrenheit"] = "celsius"
    volume: Literal["ml", "oz"] = "ml"


class AppSettings(CamelModel):
    """Display, unit and notification preferences of a user."""
    theme: Literal["light", "dark", "auto"] = "light"
    color_scheme: str = "green"
    font_size: Literal["small", "medium", "large"] = "medium"
    language: Language = "fr"
    date_format: Literal["DD/MM/YYYY", "MM/DD/YYYY", "YYYY-MM-DD"] = "DD/MM/YYYY"
    time_format: Literal["12h", "24h"] = "24h"
    units: UnitSettings = UnitSettings()
    notifications: NotificationPreferences = NotificationPreferences()
    privacy: PrivacySettings = PrivacySettings()
    backup: BackupSettings = BackupSettings()

    def merge(self, updates: Mapping[str, Any]) -> "AppSettings":
        """Return a copy with ``updates`` applied group by group.

        ``updates`` uses attribute names; ``{"notifications": {"quiet_hours":
        {"enabled": True}}}`` leaves every other notification setting as is.
        """
        return AppSettings.model_validate(deep_merge(self.model_dump(), updates))


class Preferences(CamelModel):
    """Tracking defaults used by the feeding getters and quick actions."""
    feeding_interval: float = Field(3, gt=0, description="Hours between feedings")
    default_bottle_amount: float = Field(150, gt=0, description="Milliliters")


# ── Family sharing ─────────────────────────────────────────────────────────


class FamilyPermissions(CamelModel):
    view_data: bool = True
    add_entries: bool = False
    edit_entries: bool = False
    manage_settings: bool = False


class FamilyMember(CamelModel):
    """A person invited to follow or log entries for the household."""
    id: str = Field(default_factory=generate_id)
    name: str
    email: str
    role: Literal["partner", "grandparent", "caregiver", "family_friend"] = "partner"
    permissions: FamilyPermissions = FamilyPermissions()
    invite_status: Literal["pending", "accepted", "declined"] = "pending"
    joined_date: LocalDatetime = Field(default_factory=datetime.now)
    is_active: bool = True
    avatar: Optional[str] = None
