"""
Recurrence evaluation services.

Pure functions over calendar dates: no I/O and no state kept between calls,
so every function is safe to call concurrently.

A series is anchored at an origin date. `next_occurrence` and `preview`
anchor at the date they are given; `occurrence_on_or_after` keeps an
explicit origin so that repeated evaluations of the same series land on
the same dates whatever day they run.
"""
import logging
from datetime import date, datetime, time, timedelta
from itertools import islice
from typing import Dict, Iterator, List, Optional

from dateutil.rrule import DAILY, MO, WEEKLY, rrule, weekday as rrule_weekday

from apps.core.dates import add_months, clamp_day, month_index, months_between
from apps.core.exceptions import UnsupportedFrequency
from .dtos import Frequency, RecurrenceRule, coerce_rule
from .labels import LABELS, NO_RECURRENCE, PRESET_LABELS, join_words, ordinal, wording

logger = logging.getLogger(__name__)

# Consecutive monthly candidates rejected by the month filter before a walk gives up
MAX_WALK_STEPS = 5000

# Frequencies walked by dateutil; month and year steps clamp instead of skipping
RRULE_FREQUENCIES = {
    Frequency.DAILY: DAILY,
    Frequency.WEEKLY: WEEKLY,
}


RECURRENCE_PRESETS: Dict[str, RecurrenceRule] = {
    "daily": RecurrenceRule(frequency=Frequency.DAILY),
    "weekdays": RecurrenceRule(frequency=Frequency.WEEKLY, by_day_of_week=(1, 2, 3, 4, 5)),
    "weekly": RecurrenceRule(frequency=Frequency.WEEKLY),
    "biweekly": RecurrenceRule(frequency=Frequency.WEEKLY, interval=2),
    "monthly": RecurrenceRule(frequency=Frequency.MONTHLY),
    "quarterly": RecurrenceRule(frequency=Frequency.MONTHLY, interval=3),
    "yearly": RecurrenceRule(frequency=Frequency.YEARLY),
}


# =============================================================================
# Occurrence generators
# =============================================================================

def _midnight(day: date) -> datetime:
    return datetime.combine(day, time.min)


def _calendar_rule(rule: RecurrenceRule, origin: date) -> rrule:
    byweekday = None
    if rule.frequency is Frequency.WEEKLY and rule.by_day_of_week:
        # Rules number weekdays from Sunday = 0, dateutil from Monday = 0
        byweekday = [rrule_weekday((day + 6) % 7) for day in rule.by_day_of_week]
    return rrule(
        RRULE_FREQUENCIES[rule.frequency],
        dtstart=_midnight(origin),
        interval=rule.interval,
        wkst=MO,
        byweekday=byweekday,
        bymonth=rule.by_month or None,
        until=_midnight(rule.end_date) if rule.end_date else None,
    )


def _rrule_walk(rule: RecurrenceRule, after: date, origin: date) -> Iterator[date]:
    for occurrence in _calendar_rule(rule, origin).xafter(_midnight(after)):
        yield occurrence.date()


def _month_step(after: date, origin: date, step_months: int) -> Iterator[date]:
    # Always offset from the origin so a clamped month never shifts later ones
    k = max(1, months_between(origin, after) // step_months)
    candidate = add_months(origin, k * step_months)
    while candidate <= after:
        k += 1
        candidate = add_months(origin, k * step_months)
    while True:
        yield candidate
        k += 1
        candidate = add_months(origin, k * step_months)


def _listed_days(year: int, month: int, days) -> List[date]:
    """Listed month-days that exist in the month; missing days clamp to the month end."""
    return sorted({clamp_day(year, month, day) for day in days})


def _monthly_on_days(rule: RecurrenceRule, after: date, origin: date) -> Iterator[date]:
    k = (month_index(after) - month_index(origin)) // rule.interval
    month_cursor = add_months(origin.replace(day=1), k * rule.interval)
    while True:
        for candidate in _listed_days(month_cursor.year, month_cursor.month, rule.by_day_of_month):
            if candidate > after:
                yield candidate
        month_cursor = add_months(month_cursor, rule.interval)


def _yearly_on_dates(rule: RecurrenceRule, after: date, origin: date) -> Iterator[date]:
    months = rule.by_month or (origin.month,)
    days = rule.by_day_of_month or (origin.day,)
    year = origin.year + ((after.year - origin.year) // rule.interval) * rule.interval
    while True:
        for month in months:
            for candidate in _listed_days(year, month, days):
                if candidate > after:
                    yield candidate
        year += rule.interval


def _candidates(rule: RecurrenceRule, after: date, origin: date) -> Iterator[date]:
    frequency = rule.frequency
    if frequency is Frequency.MONTHLY:
        if rule.by_day_of_month:
            return _monthly_on_days(rule, after, origin)
        return _month_step(after, origin, rule.interval)
    if frequency is Frequency.YEARLY:
        if rule.by_month or rule.by_day_of_month:
            return _yearly_on_dates(rule, after, origin)
        return _month_step(after, origin, 12 * rule.interval)
    raise UnsupportedFrequency(frequency)


def _walk(rule: RecurrenceRule, after: date, origin: Optional[date] = None) -> Iterator[date]:
    """Occurrences strictly after `after`, in order, until `end_date`."""
    origin = origin or after
    if rule.frequency in RRULE_FREQUENCIES:
        yield from _rrule_walk(rule, after, origin)
        return

    month_filter = rule.by_month if rule.frequency is Frequency.MONTHLY else None
    rejected = 0
    for candidate in _candidates(rule, after, origin):
        if rule.end_date and candidate > rule.end_date:
            return
        if month_filter and candidate.month not in month_filter:
            rejected += 1
            if rejected >= MAX_WALK_STEPS:
                logger.warning(f"Recurrence walk exhausted after {rejected} steps for {rule.to_dict()}")
                return
            continue
        rejected = 0
        yield candidate


# =============================================================================
# Public API
# =============================================================================

def next_occurrence(rule, reference_date: date) -> Optional[date]:
    """
    Next occurrence strictly after `reference_date`.

    Returns None for a None rule, or when the series has ended.
    Raises RecurrenceValidationError / UnsupportedFrequency for bad rules.
    """
    rule = coerce_rule(rule)
    if rule is None:
        return None
    if rule.end_date and rule.end_date < reference_date:
        return None
    return next(_walk(rule, reference_date), None)


def preview(rule, start_date: date, n: int) -> List[date]:
    """
    Up to `n` upcoming occurrences after `start_date`, capped by the rule's count.

    Recomputed from scratch on every call.
    """
    rule = coerce_rule(rule)
    if rule is None or n <= 0:
        return []
    limit = n if rule.count is None else min(n, rule.count)
    return list(islice(_walk(rule, start_date), limit))


def occurrence_on_or_after(rule, origin: date, target: date) -> Optional[date]:
    """
    First occurrence of the series anchored at `origin` that falls on or after `target`.

    The origin itself is not an occurrence. Month-based steps jump straight
    to the target; daily and weekly rules are replayed by rrule from the
    origin.
    """
    rule = coerce_rule(rule)
    if rule is None:
        return None
    if rule.end_date and rule.end_date < target:
        return None

    if rule.count is not None:
        for candidate in islice(_walk(rule, origin, origin), rule.count):
            if candidate >= target:
                return candidate
        return None

    after = max(origin, target - timedelta(days=1))
    return next(_walk(rule, after, origin), None)


def label(rule, locale: str = "en") -> str:
    """Human-readable label for a rule; None gives the "no recurrence" sentinel."""
    words = wording(locale)
    lang = "fr" if words is LABELS["fr"] else "en"
    rule = coerce_rule(rule)
    if rule is None:
        return NO_RECURRENCE[lang]

    frequency = rule.frequency
    by_day_of_week = rule.by_day_of_week if frequency is Frequency.WEEKLY else None
    by_day_of_month = rule.by_day_of_month if frequency in (Frequency.MONTHLY, Frequency.YEARLY) else None
    by_month = rule.by_month

    parts = []
    if rule.interval == 1 and not (by_day_of_week or by_day_of_month or by_month):
        parts.append(words["simple"][frequency.value])
    elif rule.interval > 1:
        parts.append(words["every_n"][frequency.value].format(n=rule.interval))
    else:
        parts.append(words["every"][frequency.value])

    if by_day_of_week:
        names = [words["weekdays"][day] for day in by_day_of_week]
        if len(names) == 1:
            parts.append(words["on_weekday"].format(day=names[0]))
        else:
            parts.append(words["on_weekdays"].format(days=join_words(names, words["and"])))

    if by_day_of_month:
        ordinals = [ordinal(day, lang) for day in by_day_of_month]
        if len(ordinals) == 1:
            parts.append(words["on_month_day"].format(day=ordinals[0]))
        else:
            parts.append(words["on_month_days"].format(days=", ".join(ordinals)))

    if by_month:
        names = [words["months"][month - 1] for month in by_month]
        parts.append(words["in_months"].format(months=", ".join(names)))

    if rule.end_date:
        parts.append(words["until"].format(date=rule.end_date.isoformat()))
    if rule.count is not None:
        parts.append(words["times"].format(n=rule.count))

    return " ".join(parts)


def preset_label(preset: str, locale: str = "en") -> str:
    labels = PRESET_LABELS.get(locale, PRESET_LABELS["en"])
    if preset not in labels:
        raise ValueError(f"Unknown recurrence preset: {preset}")
    return labels[preset]


def list_presets(locale: str = "en") -> List[dict]:
    return [
        {"key": key, "label": preset_label(key, locale), "rule": rule.to_dict()}
        for key, rule in RECURRENCE_PRESETS.items()
    ]
