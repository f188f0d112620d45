from typing import ClassVar, Literal, Optional

from pydantic import Field, field_validator

from babytracker.utils import generate_id

from .base import CamelModel, LocalDatetime

FeedingKind = Literal["bottle", "breast", "solid", "snack"]
FeedingMood = Literal["happy", "content", "difficult"]

# Values written by older clients.
_LEGACY_KINDS = {
    "biberon": "bottle",
    "tétée": "breast",
    "tetee": "breast",
    "breastfeeding": "breast",
    "solide": "solid",
}


class FeedingEntry(CamelModel):
    """A bottle, breastfeeding, solid or snack feeding."""
    entry_type: ClassVar[str] = "feeding"

    id: str = Field(default_factory=generate_id)
    baby_id: str
    kind: FeedingKind
    amount: Optional[float] = Field(None, ge=0, description="Quantity in milliliters")
    duration: Optional[int] = Field(None, ge=0, description="Session length in seconds")
    start_time: LocalDatetime
    end_time: Optional[LocalDatetime] = None
    mood: Optional[FeedingMood] = None
    notes: Optional[str] = None

    @field_validator("kind", mode="before")
    @classmethod
    def _normalise_kind(cls, value):
        if isinstance(value, str):
            return _LEGACY_KINDS.get(value, value)
        return value
