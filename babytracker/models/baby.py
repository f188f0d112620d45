from typing import Literal

from pydantic import Field, field_validator

from babytracker.utils import generate_id

from .base import CalendarDate, CamelModel

Gender = Literal["male", "female", "other"]


class Baby(CamelModel):
    """Child profile, owned by a user profile."""
    id: str = Field(default_factory=generate_id)
    name: str
    birth_date: CalendarDate
    weight: float = Field(0, ge=0, description="Weight in grams")
    height: float = Field(0, ge=0, description="Height in centimeters")
    gender: Gender = "other"
    avatar: str = "👶"

    @field_validator("weight", "height", "gender", "avatar", mode="before")
    @classmethod
    def _default_when_null(cls, value, info):
        if value is None:
            return cls.model_fields[info.field_name].default
        return value
