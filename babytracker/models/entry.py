"""The tracked-entry union and helpers dispatching on its variants."""

from datetime import datetime
from typing import Literal, Union

from .diaper import DiaperEntry
from .feeding import FeedingEntry
from .growth import GrowthEntry
from .sleep import SleepEntry

Entry = Union[FeedingEntry, SleepEntry, DiaperEntry, GrowthEntry]
EntryType = Literal["feeding", "sleep", "diaper", "growth"]

ENTRY_MODELS: dict[str, type] = {
    "feeding": FeedingEntry,
    "sleep": SleepEntry,
    "diaper": DiaperEntry,
    "growth": GrowthEntry,
}


def entry_type_of(entry: Entry) -> EntryType:
    match entry:
        case FeedingEntry():
            return "feeding"
        case SleepEntry():
            return "sleep"
        case DiaperEntry():
            return "diaper"
        case GrowthEntry():
            return "growth"
    raise TypeError(f"Unsupported entry: {type(entry).__name__}")


def entry_timestamp(entry: Entry) -> datetime:
    """The moment an entry is filed under when grouping by day."""
    match entry:
        case FeedingEntry() | SleepEntry():
            return entry.start_time
        case DiaperEntry():
            return entry.time
        case GrowthEntry():
            return entry.date
    raise TypeError(f"Unsupported entry: {type(entry).__name__}")
