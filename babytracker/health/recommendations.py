"""Age-based feeding and sleep recommendations.

All ladders share the same thresholds on the age in weeks:
under 4, under 12, under 24, and older.
"""

from datetime import datetime, timedelta
from typing import Literal, Optional

GrowthStatus = Literal["gaining", "stable", "losing"]


def recommended_feeding_interval(age_weeks: int) -> float:
    """Hours between two feedings."""
    if age_weeks < 4:
        return 2
    elif age_weeks < 12:
        return 3
    return 4


def recommended_daily_sleep(age_weeks: int) -> int:
    """Minutes of sleep per 24 hours."""
    if age_weeks < 4:
        hours = 16
    elif age_weeks < 12:
        hours = 14
    elif age_weeks < 24:
        hours = 12
    else:
        hours = 11
    return hours * 60


def recommended_daily_milk(weight_grams: float, age_weeks: int) -> int:
    """Milliliters of milk per day, scaled on body weight."""
    if age_weeks < 4:
        ml_per_kg = 150
    elif age_weeks < 12:
        ml_per_kg = 150
    elif age_weeks < 24:
        ml_per_kg = 120
    else:
        ml_per_kg = 100
    return round(weight_grams / 1000 * ml_per_kg)


def next_feeding_time(
    last_feeding: Optional[datetime],
    interval_hours: float,
    now: Optional[datetime] = None,
) -> datetime:
    """When the next feeding is due; immediately when nothing was logged."""
    if last_feeding is None:
        return now or datetime.now()
    return last_feeding + timedelta(hours=interval_hours)


def is_late_for_feeding(
    last_feeding: Optional[datetime],
    interval_hours: float,
    now: Optional[datetime] = None,
) -> bool:
    now = now or datetime.now()
    return last_feeding is not None and now > next_feeding_time(last_feeding, interval_hours)


def growth_status(current_weight: float, previous_weight: float, days_between: int) -> GrowthStatus:
    """Classify weight change: over 20 g/day is gaining, under -10 g/day losing."""
    if days_between <= 0:
        return "stable"
    daily_gain = (current_weight - previous_weight) / days_between
    if daily_gain > 20:
        return "gaining"
    if daily_gain < -10:
        return "losing"
    return "stable"
