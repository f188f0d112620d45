"""Unit tests for age calculations."""

from datetime import date, datetime

from babytracker.health.age import age_in_days, age_in_months, age_in_weeks, format_age


def test_age_in_days():
    assert age_in_days(date(2024, 1, 15), date(2024, 1, 25)) == 10


def test_age_in_days_accepts_datetimes():
    assert age_in_days(datetime(2024, 1, 15, 23, 0), datetime(2024, 1, 16, 1, 0)) == 1


def test_age_in_days_future_birth_is_zero():
    assert age_in_days(date(2024, 2, 1), date(2024, 1, 1)) == 0


def test_age_in_weeks_floors():
    birth = date(2024, 1, 1)
    assert age_in_weeks(birth, date(2024, 1, 14)) == 1
    assert age_in_weeks(birth, date(2024, 1, 15)) == 2


def test_age_in_months_counts_completed_months():
    birth = date(2024, 1, 20)
    assert age_in_months(birth, date(2024, 2, 19)) == 0
    assert age_in_months(birth, date(2024, 2, 20)) == 1
    assert age_in_months(birth, date(2025, 1, 20)) == 12


def test_age_in_months_never_negative():
    assert age_in_months(date(2024, 5, 1), date(2024, 4, 1)) == 0


def test_age_is_idempotent():
    birth, today = date(2023, 11, 3), date(2024, 3, 10)
    assert age_in_weeks(birth, today) == age_in_weeks(birth, today)
    assert age_in_months(birth, today) == age_in_months(birth, today)


def test_format_age():
    birth = date(2024, 1, 1)
    assert format_age(birth, date(2024, 1, 2)) == "1 day"
    assert format_age(birth, date(2024, 1, 11)) == "10 days"
    assert format_age(birth, date(2024, 2, 5)) == "5 weeks"
    assert format_age(birth, date(2024, 5, 1)) == "4 months"
