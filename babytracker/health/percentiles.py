"""Growth percentiles from WHO reference tables."""

from typing import Literal

Measure = Literal["weight", "height"]

PERCENTILES = (3, 10, 25, 50, 75, 90)

# Bounds for p3, p10, p25, p50, p75, p90, p97 by age in weeks.
WEIGHT_PERCENTILES: dict[int, tuple[float, ...]] = {
    0: (2500, 2800, 3100, 3400, 3700, 4000, 4300),
    4: (3200, 3600, 4000, 4500, 5000, 5500, 6000),
    8: (4000, 4500, 5000, 5600, 6200, 6800, 7400),
    12: (4600, 5200, 5800, 6400, 7100, 7800, 8500),
    24: (5800, 6500, 7200, 8000, 8800, 9600, 10500),
    52: (7500, 8400, 9300, 10200, 11200, 12200, 13300),
}

HEIGHT_PERCENTILES: dict[int, tuple[float, ...]] = {
    0: (46, 48, 49, 50, 51, 52, 54),
    4: (52, 54, 55, 57, 58, 60, 62),
    8: (57, 59, 61, 63, 64, 66, 68),
    12: (61, 63, 65, 67, 69, 71, 73),
    24: (72, 75, 77, 80, 82, 85, 88),
    52: (82, 85, 88, 91, 94, 97, 100),
}

_TABLES = {"weight": WEIGHT_PERCENTILES, "height": HEIGHT_PERCENTILES}


def nearest_age_bucket(age_weeks: float, table: dict[int, tuple[float, ...]] = WEIGHT_PERCENTILES) -> int:
    """Closest tabulated age; the younger bucket wins a tie."""
    return min(table, key=lambda bucket: (abs(bucket - age_weeks), bucket))


def percentile_for(value: float, age_weeks: float, measure: Measure) -> int:
    """Lowest percentile whose bound is >= ``value``; 97 above every bound."""
    table = _TABLES[measure]
    bounds = table[nearest_age_bucket(age_weeks, table)]
    for percentile, bound in zip(PERCENTILES, bounds):
        if value <= bound:
            return percentile
    return 97


def weight_percentile(weight_grams: float, age_weeks: float) -> int:
    return percentile_for(weight_grams, age_weeks, "weight")


def height_percentile(height_cm: float, age_weeks: float) -> int:
    return percentile_for(height_cm, age_weeks, "height")


def predicted_adult_height(height_cm: float, gender: str) -> float:
    """Rough adult height projection (Tanner) from a current height."""
    offset = 8.5 if gender == "male" else 5.7
    return round(height_cm * 1.08 + offset, 1)
