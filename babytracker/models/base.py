"""Base model shared by every record exchanged with the BabyTrack server."""

from datetime import date, datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, BeforeValidator
from pydantic.alias_generators import to_camel

from babytracker.utils import to_local_naive


def _date_prefix(value: Any) -> Any:
    # The server serialises calendar dates as midnight UTC timestamps.
    if isinstance(value, str) and len(value) > 10:
        return value[:10]
    if isinstance(value, datetime):
        return value.date()
    return value


LocalDatetime = Annotated[datetime, AfterValidator(to_local_naive)]
CalendarDate = Annotated[date, BeforeValidator(_date_prefix)]


class CamelModel(BaseModel):
    """Immutable record; snake_case in Python, camelCase on the wire."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "frozen": True,
    }

    def to_wire(self, **kwargs: Any) -> dict:
        return self.model_dump(mode="json", by_alias=True, **kwargs)
