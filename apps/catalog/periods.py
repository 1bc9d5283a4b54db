"""
Calendar periods used to scope seasonal templates.

Windows follow the French school calendar and never span a year boundary.
"""
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Dict, List, Optional, Tuple

from dateutil.relativedelta import relativedelta, weekday

from apps.core.dates import clamp_day


class Period(str, Enum):
    BACK_TO_SCHOOL = "back_to_school"
    AUTUMN_BREAK = "autumn_break"
    CHRISTMAS = "christmas"
    WINTER = "winter"
    SPRING = "spring"
    SUMMER = "summer"
    YEAR_ROUND = "year_round"


PERIOD_MONTHS: Dict[Period, Tuple[int, ...]] = {
    Period.BACK_TO_SCHOOL: (8, 9),
    Period.AUTUMN_BREAK: (10, 11),
    Period.CHRISTMAS: (12,),
    Period.WINTER: (1, 2),
    Period.SPRING: (3, 4, 5),
    Period.SUMMER: (6, 7),
}

PERIOD_LABELS = {
    "en": {
        Period.BACK_TO_SCHOOL: "Back to school",
        Period.AUTUMN_BREAK: "Autumn break",
        Period.CHRISTMAS: "Christmas",
        Period.WINTER: "Winter",
        Period.SPRING: "Spring",
        Period.SUMMER: "Summer holidays",
        Period.YEAR_ROUND: "All year",
    },
    "fr": {
        Period.BACK_TO_SCHOOL: "Rentrée scolaire",
        Period.AUTUMN_BREAK: "Toussaint",
        Period.CHRISTMAS: "Noël",
        Period.WINTER: "Hiver",
        Period.SPRING: "Printemps",
        Period.SUMMER: "Vacances d'été",
        Period.YEAR_ROUND: "Toute l'année",
    },
}


def current_periods(day: date) -> List[Period]:
    """Seasonal periods covering `day`, followed by YEAR_ROUND."""
    periods = [period for period, months in PERIOD_MONTHS.items() if day.month in months]
    periods.append(Period.YEAR_ROUND)
    return periods


def period_start_for(period: Period, as_of: date) -> date:
    """
    First day of the period window containing `as_of`, or of the next window.

    YEAR_ROUND has no window and returns `as_of` itself.
    """
    period = Period(period)
    if period is Period.YEAR_ROUND:
        return as_of
    first_month = PERIOD_MONTHS[period][0]
    if as_of.month in PERIOD_MONTHS[period]:
        return date(as_of.year, first_month, 1)
    if first_month > as_of.month:
        return date(as_of.year, first_month, 1)
    return date(as_of.year + 1, first_month, 1)


def period_label(period: Period, locale: str = "en") -> str:
    labels = PERIOD_LABELS.get(locale, PERIOD_LABELS["en"])
    return labels[Period(period)]


@dataclass(frozen=True)
class PeriodTrigger:
    """
    Calendar date a period rule fires on, once a year or every month.

    The day is, in order of precedence: `day_of_month`; the
    `week_of_month`-th `day_of_week` (Sunday = 0); the middle of the
    `week_of_month`-th week; the 1st.
    """
    month: int
    day_of_month: Optional[int] = None
    week_of_month: Optional[int] = None
    day_of_week: Optional[int] = None
    monthly: bool = False

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be between 1 and 12, got {self.month}")
        if self.day_of_month is not None and not 1 <= self.day_of_month <= 31:
            raise ValueError(f"day_of_month must be between 1 and 31, got {self.day_of_month}")
        if self.week_of_month is not None and not 1 <= self.week_of_month <= 4:
            raise ValueError(f"week_of_month must be between 1 and 4, got {self.week_of_month}")
        if self.day_of_week is not None and not 0 <= self.day_of_week <= 6:
            raise ValueError(f"day_of_week must be between 0 and 6, got {self.day_of_week}")

    def date_in(self, year: int, month: Optional[int] = None) -> date:
        """Trigger date in `year`; monthly triggers take the month to use."""
        month = month if self.monthly and month is not None else self.month
        first = date(year, month, 1)
        if self.day_of_month:
            return clamp_day(year, month, self.day_of_month)
        if self.week_of_month and self.day_of_week is not None:
            nth = weekday((self.day_of_week + 6) % 7)(self.week_of_month)
            return first + relativedelta(weekday=nth)
        if self.week_of_month:
            return first + relativedelta(days=(self.week_of_month - 1) * 7 + 3)
        return first

    def next_on_or_after(self, as_of: date) -> date:
        if self.monthly:
            this_month = self.date_in(as_of.year, as_of.month)
            if this_month >= as_of:
                return this_month
            following = as_of + relativedelta(months=1)
            return self.date_in(following.year, following.month)
        this_year = self.date_in(as_of.year)
        if this_year >= as_of:
            return this_year
        return self.date_in(as_of.year + 1)
