"""Convert the server's nested profile document into flat store collections."""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import ValidationError

from babytracker.models import (
    AppSettings,
    Baby,
    DiaperEntry,
    FeedingEntry,
    GrowthEntry,
    SleepEntry,
    UserProfile,
)

logger = logging.getLogger(__name__)


@dataclass
class LoadedProfile:
    profile: UserProfile
    babies: list[Baby] = field(default_factory=list)
    feedings: list[FeedingEntry] = field(default_factory=list)
    sleeps: list[SleepEntry] = field(default_factory=list)
    diapers: list[DiaperEntry] = field(default_factory=list)
    growth: list[GrowthEntry] = field(default_factory=list)


def _compact(raw: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in raw.items() if v is not None}


def _to_feeding(baby_id: str, raw: dict) -> FeedingEntry:
    return FeedingEntry.model_validate(_compact({
        "id": raw.get("id"),
        "babyId": baby_id,
        "kind": raw.get("type") or raw.get("kind"),
        "amount": raw.get("amount"),
        "startTime": raw.get("startTime"),
        "endTime": raw.get("endTime"),
        "duration": raw.get("duration"),
        "mood": raw.get("mood"),
        "notes": raw.get("notes"),
    }))


def _to_sleep(baby_id: str, raw: dict) -> SleepEntry:
    return SleepEntry.model_validate(_compact({
        "id": raw.get("id"),
        "babyId": baby_id,
        "startTime": raw.get("startTime"),
        "endTime": raw.get("endTime"),
        "quality": raw.get("quality"),
        "type": raw.get("type"),
        "location": raw.get("location"),
        "notes": raw.get("notes"),
    }))


def _to_diaper(baby_id: str, raw: dict) -> DiaperEntry:
    return DiaperEntry.model_validate(_compact({**raw, "babyId": baby_id}))


def _to_growth(baby_id: str, raw: dict) -> GrowthEntry:
    return GrowthEntry.model_validate(_compact({
        "id": raw.get("id"),
        "babyId": baby_id,
        "date": raw.get("date"),
        "weight": raw.get("weight"),
        "height": raw.get("height"),
        "headCircumference": raw.get("headCirc", raw.get("headCircumference")),
        "notes": raw.get("notes"),
    }))


def _to_profile(data: dict) -> UserProfile:
    return UserProfile.model_validate(_compact({
        "id": data.get("id"),
        "firstName": data.get("firstName"),
        "lastName": data.get("lastName"),
        "email": data.get("email"),
        "phone": data.get("phone"),
        "avatar": data.get("avatar"),
        "role": data.get("role"),
        "preferredName": data.get("preferredName") or data.get("firstName"),
        "timezone": data.get("timezone"),
        "language": data.get("language"),
        "emergencyContact": data.get("emergencyContact"),
        "createdAt": data.get("createdAt"),
        "updatedAt": data.get("updatedAt"),
        "emailVerified": data.get("isEmailVerified") or data.get("emailVerified"),
        "phoneVerified": data.get("isPhoneVerified") or data.get("phoneVerified"),
    }))


def parse_profile(data: dict) -> LoadedProfile:
    """Flatten ``{..., babies: [{..., feedingEntries: [...], ...}]}``."""
    loaded = LoadedProfile(profile=_to_profile(data))
    for raw_baby in data.get("babies") or []:
        baby = Baby.model_validate(raw_baby)
        loaded.babies.append(baby)
        loaded.feedings.extend(_to_feeding(baby.id, e) for e in raw_baby.get("feedingEntries") or [])
        loaded.sleeps.extend(_to_sleep(baby.id, e) for e in raw_baby.get("sleepEntries") or [])
        loaded.diapers.extend(_to_diaper(baby.id, e) for e in raw_baby.get("diaperEntries") or [])
        loaded.growth.extend(_to_growth(baby.id, e) for e in raw_baby.get("growthEntries") or [])
    logger.info(
        "Loaded profile %s: %d babies, %d feedings, %d sleeps, %d diapers, %d growth entries",
        loaded.profile.email, len(loaded.babies), len(loaded.feedings),
        len(loaded.sleeps), len(loaded.diapers), len(loaded.growth),
    )
    return loaded


def parse_settings(data: Optional[dict]) -> AppSettings:
    """Settings document from the server; defaults when absent or malformed."""
    if not data:
        return AppSettings()
    try:
        return AppSettings.model_validate(data)
    except ValidationError as exc:
        logger.warning("Ignoring malformed user settings: %s", exc)
        return AppSettings()
