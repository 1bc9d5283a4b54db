"""
Cron-pattern parsing for catalog templates.

Catalog rows historically store their recurrence as a cron string
("@yearly", "0 0 1 9 *"). Only the calendar fields matter here; minute and
hour are validated for shape and otherwise ignored.
"""
from typing import Optional, Tuple

from apps.core.exceptions import RecurrenceValidationError
from .dtos import Frequency, RecurrenceRule

SHORTCUTS = {
    "@daily": RecurrenceRule(frequency=Frequency.DAILY),
    "@weekly": RecurrenceRule(frequency=Frequency.WEEKLY, by_day_of_week=(0,)),
    "@monthly": RecurrenceRule(frequency=Frequency.MONTHLY, by_day_of_month=(1,)),
    "@yearly": RecurrenceRule(frequency=Frequency.YEARLY, by_month=(1,), by_day_of_month=(1,)),
}
SHORTCUTS["@annually"] = SHORTCUTS["@yearly"]


def _parse_list(field: str, value: str, low: int, high: int) -> Optional[Tuple[int, ...]]:
    if value == "*":
        return None
    numbers = []
    for part in value.split(","):
        if not part.isdigit():
            raise RecurrenceValidationError(f"Unsupported cron {field} field: {value!r}")
        number = int(part)
        if number < low or number > high:
            raise RecurrenceValidationError(f"Cron {field} value out of range: {number}")
        numbers.append(number)
    return tuple(numbers)


def _parse_step(field: str, value: str) -> Optional[int]:
    """Interval from a '*/n' field, None for anything else."""
    if not value.startswith("*/"):
        return None
    step = value[2:]
    if not step.isdigit() or int(step) < 1:
        raise RecurrenceValidationError(f"Unsupported cron {field} step: {value!r}")
    return int(step)


def parse_cron_pattern(pattern: str) -> RecurrenceRule:
    """
    Turn a cron pattern into a RecurrenceRule.

    Supports the @daily/@weekly/@monthly/@yearly shortcuts and five-field
    `minute hour day month weekday` expressions made of numbers, comma
    lists, '*' and '*/n' steps on the day and month fields.

    Raises:
        RecurrenceValidationError: the pattern cannot be expressed as a rule
    """
    if not isinstance(pattern, str) or not pattern.strip():
        raise RecurrenceValidationError("Cron pattern must be a non-empty string")

    pattern = pattern.strip().lower()
    if pattern.startswith("@"):
        if pattern not in SHORTCUTS:
            raise RecurrenceValidationError(f"Unknown cron shortcut: {pattern}")
        return SHORTCUTS[pattern]

    fields = pattern.split()
    if len(fields) != 5:
        raise RecurrenceValidationError(f"Cron pattern needs 5 fields, got {len(fields)}: {pattern!r}")
    minute, hour, day_field, month_field, weekday_field = fields
    _parse_list("minute", minute, 0, 59)
    _parse_list("hour", hour, 0, 23)

    day_step = _parse_step("day", day_field)
    month_step = _parse_step("month", month_field)
    days = None if day_step else _parse_list("day", day_field, 1, 31)
    months = None if month_step else _parse_list("month", month_field, 1, 12)
    weekdays = _parse_list("weekday", weekday_field, 0, 7)
    if weekdays:
        # Cron accepts 7 as a second spelling of Sunday
        weekdays = tuple(sorted({day % 7 for day in weekdays}))

    if day_step:
        return RecurrenceRule(frequency=Frequency.DAILY, interval=day_step, by_month=months)
    if days and month_step:
        return RecurrenceRule(frequency=Frequency.MONTHLY, interval=month_step, by_day_of_month=days)
    if days and months:
        return RecurrenceRule(frequency=Frequency.YEARLY, by_month=months, by_day_of_month=days)
    if days:
        return RecurrenceRule(frequency=Frequency.MONTHLY, by_day_of_month=days)
    if weekdays:
        return RecurrenceRule(frequency=Frequency.WEEKLY, by_day_of_week=weekdays, by_month=months)
    if month_step:
        raise RecurrenceValidationError(f"Month step needs a day of month: {pattern!r}")
    return RecurrenceRule(frequency=Frequency.DAILY, by_month=months)
