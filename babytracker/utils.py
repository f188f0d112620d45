"""Small helpers shared by the store, the sync layer and the calculators."""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from datetime import date, datetime, time, timedelta
from typing import Any, Optional


def generate_id(prefix: Optional[str] = None) -> str:
    """Return a collision-resistant identifier, optionally namespaced."""
    value = uuid.uuid4().hex
    return f"{prefix}_{value}" if prefix else value


def to_local_naive(value: datetime) -> datetime:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Return [start, end) of a calendar day as naive datetimes."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def deep_merge(base: Mapping[str, Any], updates: Mapping[str, Any]) -> dict[str, Any]:
    """Merge ``updates`` into ``base`` recursively.

    Nested mappings are merged key by key so that updating one member of a
    group keeps its siblings; any other value replaces the previous one.
    """
    merged = dict(base)
    for key, value in updates.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def format_duration(minutes: float) -> str:
    """45 -> '45min', 90 -> '1h30', 120 -> '2h'."""
    minutes = int(minutes)
    hours, rest = divmod(minutes, 60)
    if hours == 0:
        return f"{rest}min"
    return f"{hours}h{rest:02d}" if rest else f"{hours}h"


def format_timer(seconds: int) -> str:
    """Format a running timer as HH:MM:SS."""
    hours, rest = divmod(int(seconds), 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
