"""Unit tests for growth percentiles."""

from babytracker.health.percentiles import (
    HEIGHT_PERCENTILES,
    WEIGHT_PERCENTILES,
    height_percentile,
    nearest_age_bucket,
    predicted_adult_height,
    weight_percentile,
)


def test_value_exactly_at_p50_returns_50():
    assert weight_percentile(WEIGHT_PERCENTILES[0][3], 0) == 50
    assert height_percentile(HEIGHT_PERCENTILES[12][3], 12) == 50


def test_value_below_p3_returns_3():
    assert weight_percentile(2000, 0) == 3


def test_value_between_bounds_returns_upper_percentile():
    # 4 weeks: p25 = 4000, p50 = 4500
    assert weight_percentile(4200, 4) == 50


def test_value_above_p90_returns_97():
    assert weight_percentile(4100, 0) == 97
    assert height_percentile(120, 52) == 97


def test_nearest_age_bucket():
    assert nearest_age_bucket(5) == 4
    assert nearest_age_bucket(30) == 24
    assert nearest_age_bucket(100) == 52


def test_nearest_age_bucket_tie_prefers_younger():
    assert nearest_age_bucket(2) == 0
    assert nearest_age_bucket(18) == 12


def test_percentile_uses_nearest_bucket():
    # 10 weeks rounds to the 8- or 12-week row; tie goes to 8 (p50 = 5600).
    assert weight_percentile(5600, 10) == 50


def test_predicted_adult_height():
    assert predicted_adult_height(50, "male") == 62.5
    assert predicted_adult_height(50, "female") == 59.7
