from typing import ClassVar, Optional

from pydantic import AliasChoices, Field

from babytracker.utils import generate_id

from .base import CamelModel, LocalDatetime


class GrowthEntry(CamelModel):
    """A growth measurement; any of the three measures may be missing."""
    entry_type: ClassVar[str] = "growth"

    id: str = Field(default_factory=generate_id)
    baby_id: str
    date: LocalDatetime
    weight: Optional[float] = Field(None, ge=0, description="Weight in grams")
    height: Optional[float] = Field(None, ge=0, description="Height in centimeters")
    head_circumference: Optional[float] = Field(
        None,
        ge=0,
        validation_alias=AliasChoices("headCircumference", "headCirc", "head_circumference"),
        description="Head circumference in centimeters",
    )
    notes: Optional[str] = None
