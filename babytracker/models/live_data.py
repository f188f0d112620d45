"""Server-computed "today" view of a baby."""

from typing import Any, Optional

from pydantic import Field

from .baby import Baby
from .base import CamelModel, LocalDatetime
from .diaper import DiaperEntry
from .feeding import FeedingEntry
from .sleep import SleepEntry


class LastFeeding(CamelModel):
    time: LocalDatetime
    amount: Optional[float] = None
    type: Optional[str] = None
    mood: Optional[str] = None


class LiveStats(CamelModel):
    total_milk: float = 0
    total_sleep_minutes: int = 0
    feeding_count: int = 0
    sleep_count: int = 0
    diaper_count: int = 0
    time_since_last_feeding: Optional[int] = Field(None, description="Minutes")
    last_feeding: Optional[LastFeeding] = None


class LiveBabyData(CamelModel):
    baby: Optional[Baby] = None
    feedings: tuple[FeedingEntry, ...] = ()
    sleeps: tuple[SleepEntry, ...] = ()
    diapers: tuple[DiaperEntry, ...] = ()
    stats: LiveStats = LiveStats()
    timestamp: Optional[LocalDatetime] = None

    @classmethod
    def from_response(cls, payload: dict[str, Any]) -> "LiveBabyData":
        """Build from ``{baby, liveData: {...}, timestamp}``."""
        live = payload.get("liveData") or {}
        return cls.model_validate({
            "baby": payload.get("baby"),
            "feedings": live.get("feedings") or [],
            "sleeps": live.get("sleeps") or [],
            "diapers": live.get("diapers") or [],
            "stats": live.get("stats") or {},
            "timestamp": payload.get("timestamp"),
        })
