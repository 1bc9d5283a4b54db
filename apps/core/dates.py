"""
Calendar-date helpers.

All arithmetic works on `datetime.date` values (no time-of-day). Month and
year steps use dateutil's relativedelta, which clamps to the end of the
target month (Jan 31 + 1 month = Feb 28/29). A timezone only enters in
`today_in_timezone`, where "today" is decided for a household.
"""
import calendar
import logging
from datetime import date, datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil.relativedelta import relativedelta
from django.utils import timezone

logger = logging.getLogger(__name__)


def add_days(day: date, days: int) -> date:
    return day + timedelta(days=days)


def add_months(day: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's length."""
    return day + relativedelta(months=months)


def add_years(day: date, years: int) -> date:
    """Shift by whole years; Feb 29 lands on Feb 28 in non-leap years."""
    return day + relativedelta(years=years)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def clamp_day(year: int, month: int, day: int) -> date:
    """Build a date, moving a non-existent day to the month's last day."""
    return date(year, month, min(day, days_in_month(year, month)))


def month_index(day: date) -> int:
    """Absolute month number, handy for month distances."""
    return day.year * 12 + (day.month - 1)


def months_between(start: date, end: date) -> int:
    """Whole calendar months from start to end (floored)."""
    delta = relativedelta(end, start)
    return delta.years * 12 + delta.months


def age_in_months(birthdate: date, as_of: date) -> int:
    """
    Completed months of age on `as_of`.

    A child born exactly N months before `as_of` is N months old; a birthdate
    in the future yields 0.
    """
    if as_of <= birthdate:
        return 0
    return months_between(birthdate, as_of)


def age_in_years(birthdate: date, as_of: date) -> int:
    return age_in_months(birthdate, as_of) // 12


def sunday_based_weekday(day: date) -> int:
    """Weekday numbered 0 = Sunday ... 6 = Saturday."""
    return (day.weekday() + 1) % 7


def week_start(day: date) -> date:
    """Monday of the ISO week containing `day`."""
    return day - timedelta(days=day.weekday())


def days_until(target: date, as_of: date) -> int:
    return (target - as_of).days


def resolve_timezone(name: Optional[str], fallback: str = "UTC") -> ZoneInfo:
    try:
        return ZoneInfo(name or fallback)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown timezone {name!r}, falling back to {fallback}")
        return ZoneInfo(fallback)


def today_in_timezone(tz_name: Optional[str], now: Optional[datetime] = None) -> date:
    """Calendar date of `now` (default: current time) in the given timezone."""
    current = now or timezone.now()
    if timezone.is_naive(current):
        current = timezone.make_aware(current, ZoneInfo("UTC"))
    return current.astimezone(resolve_timezone(tz_name)).date()
