"""
Week arithmetic.

Weeks start on Monday at local midnight and end on Sunday at
23:59:59.999, whatever the locale. All functions are pure and return
naive local datetimes; aware input is converted to local time first.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional, Union


DAYS_PER_WEEK = 7

_END_OF_DAY = time(23, 59, 59, 999000)

# Labels are always English, independent of the process locale.
_MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def to_local_naive(value: datetime) -> datetime:
    """Drop any offset, keeping the local wall-clock instant."""
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def _as_datetime(instant: Optional[Union[datetime, date]]) -> datetime:
    if instant is None:
        return datetime.now()
    if isinstance(instant, datetime):
        return to_local_naive(instant)
    return datetime.combine(instant, time.min)


def get_week_start(instant: Optional[Union[datetime, date]] = None) -> datetime:
    """
    Monday 00:00:00.000 of the week containing `instant` (default: now).

    Sunday belongs to the week that began six days earlier.
    """
    moment = _as_datetime(instant)
    monday = moment.date() - timedelta(days=moment.weekday())
    return datetime.combine(monday, time.min)


def get_week_end(instant: Optional[Union[datetime, date]] = None) -> datetime:
    """Sunday 23:59:59.999 of the week containing `instant`."""
    start = get_week_start(instant)
    return datetime.combine(start.date() + timedelta(days=DAYS_PER_WEEK - 1), _END_OF_DAY)


def _short_date(value: datetime) -> str:
    return f"{_MONTH_ABBREVIATIONS[value.month - 1]} {value.day}"


def format_week_range(week_start: Union[datetime, date]) -> str:
    """
    Display label such as "Mar 11 - Mar 17, 2024".

    The end day is computed exactly as get_week_end does.
    """
    start = _as_datetime(week_start)
    end = start + timedelta(days=DAYS_PER_WEEK - 1)
    return f"{_short_date(start)} - {_short_date(end)}, {end.year}"


def weeks_between(earlier_week_start: datetime, later_week_start: datetime) -> int:
    """Whole weeks from one week start to another."""
    return (later_week_start.date() - earlier_week_start.date()).days // DAYS_PER_WEEK
