"""Uptime string for the profile card."""

from __future__ import annotations
import datetime
from typing import Optional

from dateutil import relativedelta


def _plural(n: int) -> str:
    return '' if n == 1 else 's'


def rel_age(birthday: datetime.date, today: Optional[datetime.date] = None) -> str:
    """'X years, Y months, Z days' between `birthday` and `today`."""
    today = today or datetime.date.today()
    if isinstance(birthday, datetime.datetime):
        birthday = birthday.date()
    if isinstance(today, datetime.datetime):
        today = today.date()
    diff = relativedelta.relativedelta(today, birthday)
    return (f"{diff.years} year{_plural(diff.years)}, "
            f"{diff.months} month{_plural(diff.months)}, "
            f"{diff.days} day{_plural(diff.days)}")
