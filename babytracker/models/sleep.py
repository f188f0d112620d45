from datetime import datetime
from typing import ClassVar, Literal, Optional

from pydantic import Field

from babytracker.utils import generate_id

from .base import CamelModel, LocalDatetime

SleepQuality = Literal["excellent", "good", "restless", "difficult"]
SleepType = Literal["nap", "night"]
SleepLocation = Literal["bed", "stroller", "arms", "car"]


class SleepEntry(CamelModel):
    """A nap or night sleep. No ``end_time`` means the baby is still asleep."""
    entry_type: ClassVar[str] = "sleep"

    id: str = Field(default_factory=generate_id)
    baby_id: str
    start_time: LocalDatetime
    end_time: Optional[LocalDatetime] = None
    quality: SleepQuality = "good"
    type: SleepType = "nap"
    location: Optional[SleepLocation] = None
    notes: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.end_time is None

    def overlap_minutes(self, start: datetime, end: datetime) -> int:
        """Whole minutes of this (completed) sleep falling inside [start, end)."""
        if self.end_time is None:
            return 0
        lo = max(self.start_time, start)
        hi = min(self.end_time, end)
        if hi <= lo:
            return 0
        return int((hi - lo).total_seconds() // 60)
