"""Age calculations from a birth date."""

from datetime import date, datetime
from typing import Optional


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def age_in_days(birth_date: date | datetime, today: Optional[date | datetime] = None) -> int:
    """Whole days since birth; 0 for a birth date in the future."""
    today = _as_date(today or date.today())
    return max(0, (today - _as_date(birth_date)).days)


def age_in_weeks(birth_date: date | datetime, today: Optional[date | datetime] = None) -> int:
    return age_in_days(birth_date, today) // 7


def age_in_months(birth_date: date | datetime, today: Optional[date | datetime] = None) -> int:
    """Calendar months since birth.

    A month only counts once the day-of-month of the birth date is reached:
    born on the 20th, the baby is 1 month old from the 20th of the next month.
    """
    birth = _as_date(birth_date)
    today = _as_date(today or date.today())
    months = (today.year - birth.year) * 12 + (today.month - birth.month)
    if today.day < birth.day:
        months -= 1
    return max(0, months)


def format_age(birth_date: date | datetime, today: Optional[date | datetime] = None) -> str:
    """Human-readable age: days for the first two weeks, then weeks, then months."""
    days = age_in_days(birth_date, today)
    if days < 14:
        return f"{days} day" + ("s" if days != 1 else "")
    if days < 60:
        weeks = days // 7
        return f"{weeks} weeks"
    months = age_in_months(birth_date, today)
    if months < 24:
        return f"{months} month" + ("s" if months != 1 else "")
    return f"{months // 12} years"
