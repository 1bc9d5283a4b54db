"""DTOs for Recurrence app - the recurrence rule value object shared by catalog and user tasks."""
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

from apps.core.exceptions import RecurrenceValidationError, UnsupportedFrequency


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @classmethod
    def parse(cls, value) -> "Frequency":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise UnsupportedFrequency(value) from None


def _normalise_set(name: str, values: Optional[Iterable[int]], low: int, high: int) -> Optional[Tuple[int, ...]]:
    if values is None:
        return None
    if isinstance(values, (str, bytes)):
        raise RecurrenceValidationError(f"{name} must be a list of integers")
    cleaned = set()
    for value in values:
        if isinstance(value, bool) or not isinstance(value, int):
            raise RecurrenceValidationError(f"{name} must contain integers, got {value!r}")
        if value < low or value > high:
            raise RecurrenceValidationError(f"{name} values must be between {low} and {high}, got {value}")
        cleaned.add(value)
    # An empty list means "no constraint", same as omitting it
    return tuple(sorted(cleaned)) or None


def _parse_date(name: str, value) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise RecurrenceValidationError(f"{name} must be an ISO date, got {value!r}") from None


@dataclass(frozen=True)
class RecurrenceRule:
    """
    Recurrence rule on calendar dates.

    Weekdays are numbered 0 = Sunday ... 6 = Saturday. `by_day_of_week`,
    `by_day_of_month` and `by_month` are optional constraints layered on the
    base frequency; a constraint that means nothing for the frequency is
    ignored by the evaluator rather than rejected.
    """
    frequency: Frequency
    interval: int = 1
    by_day_of_week: Optional[Tuple[int, ...]] = None
    by_day_of_month: Optional[Tuple[int, ...]] = None
    by_month: Optional[Tuple[int, ...]] = None
    end_date: Optional[date] = None
    count: Optional[int] = field(default=None)

    def __post_init__(self):
        object.__setattr__(self, "frequency", Frequency.parse(self.frequency))

        interval = self.interval
        if isinstance(interval, bool) or not isinstance(interval, int):
            raise RecurrenceValidationError(f"interval must be an integer, got {interval!r}")
        if interval < 1:
            raise RecurrenceValidationError(f"interval must be at least 1, got {interval}")

        object.__setattr__(self, "by_day_of_week", _normalise_set("by_day_of_week", self.by_day_of_week, 0, 6))
        object.__setattr__(self, "by_day_of_month", _normalise_set("by_day_of_month", self.by_day_of_month, 1, 31))
        object.__setattr__(self, "by_month", _normalise_set("by_month", self.by_month, 1, 12))
        object.__setattr__(self, "end_date", _parse_date("end_date", self.end_date))

        if self.count is not None:
            if isinstance(self.count, bool) or not isinstance(self.count, int) or self.count < 1:
                raise RecurrenceValidationError(f"count must be a positive integer, got {self.count!r}")

    @property
    def is_simple(self) -> bool:
        """Interval 1 with no additional constraints."""
        return (
            self.interval == 1
            and not self.by_day_of_week
            and not self.by_day_of_month
            and not self.by_month
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RecurrenceRule":
        """Build from the JSON shape (camelCase) or snake_case keys."""
        if not isinstance(data, dict):
            raise RecurrenceValidationError("Recurrence rule must be an object")
        if "frequency" not in data:
            raise RecurrenceValidationError("Recurrence rule requires a frequency")

        def pick(snake: str, camel: str):
            return data[camel] if camel in data else data.get(snake)

        return cls(
            frequency=data["frequency"],
            interval=data.get("interval", 1),
            by_day_of_week=pick("by_day_of_week", "byDayOfWeek"),
            by_day_of_month=pick("by_day_of_month", "byDayOfMonth"),
            by_month=pick("by_month", "byMonth"),
            end_date=pick("end_date", "endDate"),
            count=data.get("count"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON shape, omitting unset optional fields."""
        data: Dict[str, Any] = {
            "frequency": self.frequency.value,
            "interval": self.interval,
        }
        if self.by_day_of_week:
            data["byDayOfWeek"] = list(self.by_day_of_week)
        if self.by_day_of_month:
            data["byDayOfMonth"] = list(self.by_day_of_month)
        if self.by_month:
            data["byMonth"] = list(self.by_month)
        if self.end_date:
            data["endDate"] = self.end_date.isoformat()
        if self.count is not None:
            data["count"] = self.count
        return data


def coerce_rule(rule) -> Optional[RecurrenceRule]:
    """Accept a RecurrenceRule, its dict form, or None."""
    if rule is None or isinstance(rule, RecurrenceRule):
        return rule
    return RecurrenceRule.from_dict(rule)
