"""
Birthday Helpers

Only month and day matter for reminders; the year is used for age.
"""

from datetime import date
from typing import Optional


def _occurrence(birthday: date, year: int) -> date:
    """The birthday as celebrated in `year` (Feb 29 falls back to Feb 28)."""
    try:
        return birthday.replace(year=year)
    except ValueError:
        return date(year, 2, 28)


def age(birthday: Optional[date], today: date) -> Optional[int]:
    """Completed years since `birthday`, or None when unknown."""
    if birthday is None:
        return None
    years = today.year - birthday.year
    if today < _occurrence(birthday, today.year):
        years -= 1
    return years


def days_until_birthday(birthday: Optional[date], today: date) -> Optional[int]:
    """Days until the next birthday; 0 when it is today."""
    if birthday is None:
        return None
    upcoming = _occurrence(birthday, today.year)
    if upcoming < today:
        upcoming = _occurrence(birthday, today.year + 1)
    return (upcoming - today).days


def is_birthday_today(birthday: Optional[date], today: date) -> bool:
    return days_until_birthday(birthday, today) == 0


def is_birthday_soon(birthday: Optional[date], today: date, soon_days: int = 7) -> bool:
    """True when the birthday is 1 to `soon_days` days away (today excluded)."""
    days = days_until_birthday(birthday, today)
    if days is None:
        return False
    return 0 < days <= soon_days
