from .baby import Baby
from .diaper import DiaperDetails, DiaperEntry, Stool, Wetness
from .entry import Entry, EntryType, entry_timestamp, entry_type_of
from .feeding import FeedingEntry
from .growth import GrowthEntry
from .live_data import LiveBabyData, LiveStats
from .notification import Notification, NotificationSettings
from .profile import AppSettings, FamilyMember, FamilyPermissions, Preferences, UserProfile
from .sleep import SleepEntry

__all__ = [
    "Baby", "FeedingEntry", "SleepEntry", "GrowthEntry",
    "DiaperEntry", "DiaperDetails", "Stool", "Wetness",
    "Entry", "EntryType", "entry_timestamp", "entry_type_of",
    "LiveBabyData", "LiveStats",
    "Notification", "NotificationSettings",
    "AppSettings", "FamilyMember", "FamilyPermissions", "Preferences", "UserProfile",
]
