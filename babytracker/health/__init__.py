"""Pure calculators deriving health indicators from tracked data."""

from .age import age_in_days, age_in_months, age_in_weeks, format_age
from .diapers import diaper_day_stats, diaper_health_alerts
from .dosage import MedicationNotAllowedError, available_medications, calculate_dosage
from .percentiles import height_percentile, weight_percentile
from .recommendations import (
    recommended_daily_milk,
    recommended_daily_sleep,
    recommended_feeding_interval,
)
from .symptoms import assess_urgency

__all__ = [
    "age_in_days", "age_in_weeks", "age_in_months", "format_age",
    "recommended_feeding_interval", "recommended_daily_sleep", "recommended_daily_milk",
    "weight_percentile", "height_percentile",
    "calculate_dosage", "available_medications", "MedicationNotAllowedError",
    "assess_urgency",
    "diaper_day_stats", "diaper_health_alerts",
]
