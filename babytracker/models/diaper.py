"""Pydantic models for diaper changes and their optional detail groups."""

import json
from typing import ClassVar, Literal, Optional

from pydantic import AliasChoices, Field, field_validator

from babytracker.utils import generate_id

from .base import CamelModel, LocalDatetime

DiaperType = Literal["wet", "soiled", "mixed", "dry"]
StoolColor = Literal["yellow", "brown", "green", "black", "red", "white"]

_LEGACY_TYPES = {"dirty": "soiled", "both": "mixed"}


class Wetness(CamelModel):
    level: Literal["light", "moderate", "heavy", "soaked"] = "moderate"
    color: Literal["clear", "light_yellow", "dark_yellow", "orange"] = "light_yellow"


class Stool(CamelModel):
    consistency: Literal["liquid", "soft", "formed", "hard"] = "soft"
    color: StoolColor = "yellow"
    amount: Literal["small", "medium", "large"] = "medium"
    texture: Optional[Literal["smooth", "seedy", "mucous", "bloody"]] = None


class DiaperDetails(CamelModel):
    size: Literal["newborn", "size1", "size2", "size3", "size4", "size5", "size6"] = "size1"
    leaked: bool = False
    rash: bool = False


class DiaperEntry(CamelModel):
    """A diaper change. Older records only carry ``amount`` and ``color``."""
    entry_type: ClassVar[str] = "diaper"

    id: str = Field(default_factory=generate_id)
    baby_id: str
    time: LocalDatetime = Field(validation_alias=AliasChoices("time", "timestamp"))
    type: DiaperType
    wetness: Optional[Wetness] = None
    stool: Optional[Stool] = None
    diaper: Optional[DiaperDetails] = None
    mood: Optional[Literal["comfortable", "fussy", "crying"]] = None
    changed_by: Optional[str] = None
    notes: Optional[str] = None
    amount: Optional[str] = None
    color: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def _normalise_type(cls, value):
        if isinstance(value, str):
            return _LEGACY_TYPES.get(value, value)
        return value

    @field_validator("wetness", "stool", "diaper", mode="before")
    @classmethod
    def _decode_json_column(cls, value):
        # Some server rows store the detail groups as JSON text.
        if isinstance(value, str):
            return json.loads(value) if value else None
        return value

    @property
    def stool_color(self) -> Optional[str]:
        if self.stool is not None:
            return self.stool.color
        return self.color if self.type in ("soiled", "mixed") else None
