"""DTOs for Catalog app - immutable templates, milestones and query results."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple

from apps.core.exceptions import CatalogValidationError
from apps.recurrence.dtos import Frequency, RecurrenceRule
from .periods import Period, PeriodTrigger


class TaskCategory(str, Enum):
    SCHOOL = "school"
    HEALTH = "health"
    ADMINISTRATIVE = "administrative"
    DAILY = "daily"
    SOCIAL = "social"
    ACTIVITIES = "activities"
    LOGISTICS = "logistics"
    OTHER = "other"


class AgeUnit(str, Enum):
    MONTHS = "months"
    YEARS = "years"


class RecurrenceKind(str, Enum):
    ONCE = "once"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    SEASONAL = "seasonal"


class Priority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class MilestoneType(str, Enum):
    VACCINE = "vaccine"
    HEALTH_CHECKUP = "health_checkup"
    REGISTRATION = "registration"
    PREPARATION = "preparation"
    ADMINISTRATIVE = "administrative"
    ACTIVITY = "activity"
    TRANSITION = "transition"


# Named age bands, in months: [lower, upper)
AGE_BANDS: Dict[str, Tuple[int, int]] = {
    "0-3": (0, 36),
    "3-6": (36, 72),
    "6-11": (72, 132),
    "11-15": (132, 180),
    "15-18": (180, 216),
}

MIN_WEIGHT = 1
MAX_WEIGHT = 10


@dataclass(frozen=True)
class TaskTemplate:
    """
    Catalog entry describing a task to create for matching children.

    Ages are inclusive in `age_unit`: a 3..5 years template covers children
    from their 3rd birthday until the day before their 6th.
    """
    id: str
    country: str
    age_min: int
    age_max: int
    category: TaskCategory
    title: str
    age_unit: AgeUnit = AgeUnit.YEARS
    subcategory: Optional[str] = None
    description: str = ""
    recurrence: Optional[RecurrenceRule] = None
    weight: int = 1
    days_before_deadline: int = 0
    period: Period = Period.YEAR_ROUND
    is_active: bool = True
    critical: bool = False
    priority: Priority = Priority.MEDIUM
    trigger_age_months: Optional[int] = None
    milestone_id: Optional[str] = None
    trigger: Optional[PeriodTrigger] = None

    def __post_init__(self):
        if not self.id:
            raise CatalogValidationError("Template id is required")
        if not self.title:
            raise CatalogValidationError(f"Template {self.id}: title is required")
        if len(self.country) != 2:
            raise CatalogValidationError(f"Template {self.id}: country must be an ISO-2 code")
        if self.age_min < 0 or self.age_min > self.age_max:
            raise CatalogValidationError(
                f"Template {self.id}: invalid age range {self.age_min}..{self.age_max}"
            )
        if not MIN_WEIGHT <= self.weight <= MAX_WEIGHT:
            raise CatalogValidationError(
                f"Template {self.id}: weight must be between {MIN_WEIGHT} and {MAX_WEIGHT}"
            )
        if self.days_before_deadline < 0:
            raise CatalogValidationError(f"Template {self.id}: days_before_deadline must be >= 0")
        if self.trigger_age_months is not None and self.trigger_age_months < 0:
            raise CatalogValidationError(f"Template {self.id}: trigger_age_months must be >= 0")

    @property
    def min_age_months(self) -> int:
        if self.age_unit is AgeUnit.YEARS:
            return self.age_min * 12
        return self.age_min

    @property
    def max_age_months(self) -> int:
        if self.age_unit is AgeUnit.YEARS:
            return (self.age_max + 1) * 12 - 1
        return self.age_max

    def applies_to_age(self, age_months: int) -> bool:
        return self.min_age_months <= age_months <= self.max_age_months

    @property
    def age_ranges(self) -> Tuple[str, ...]:
        """Named bands overlapping the template's age range."""
        return tuple(
            name for name, (lower, upper) in AGE_BANDS.items()
            if lower <= self.max_age_months and upper > self.min_age_months
        )

    @property
    def recurrence_kind(self) -> RecurrenceKind:
        if self.trigger is not None:
            return RecurrenceKind.MONTHLY if self.trigger.monthly else RecurrenceKind.YEARLY
        if self.recurrence is None:
            if self.period is Period.YEAR_ROUND:
                return RecurrenceKind.ONCE
            return RecurrenceKind.SEASONAL
        return {
            Frequency.DAILY: RecurrenceKind.DAILY,
            Frequency.WEEKLY: RecurrenceKind.WEEKLY,
            Frequency.MONTHLY: RecurrenceKind.MONTHLY,
            Frequency.YEARLY: RecurrenceKind.YEARLY,
        }[self.recurrence.frequency]

    @property
    def is_recurring(self) -> bool:
        return self.recurrence is not None


@dataclass(frozen=True)
class CatalogCriteria:
    """Conjunctive filter; empty collections and None mean "no constraint"."""
    age_ranges: Tuple[str, ...] = ()
    periods: Tuple[Period, ...] = ()
    categories: Tuple[TaskCategory, ...] = ()
    recurrence: Tuple[RecurrenceKind, ...] = ()
    search: Optional[str] = None
    min_weight: Optional[int] = None
    max_weight: Optional[int] = None
    critical: Optional[bool] = None
    country: Optional[str] = None
    include_inactive: bool = False
    page: int = 1
    limit: int = 20


@dataclass(frozen=True)
class CatalogPage:
    items: List[TaskTemplate]
    total: int
    page: int
    limit: int
    pages: int


@dataclass(frozen=True)
class CatalogStatistics:
    total: int
    critical: int
    by_category: Dict[str, int] = field(default_factory=dict)
    by_period: Dict[str, int] = field(default_factory=dict)
    by_age_range: Dict[str, int] = field(default_factory=dict)
    by_recurrence: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class AgeMilestone:
    """Age-triggered event (vaccine, checkup, registration...)."""
    id: str
    type: MilestoneType
    age_months: int
    names: Mapping[str, str]
    descriptions: Mapping[str, str]
    countries: Tuple[str, ...]
    priority: Priority
    mandatory: bool
    reminders: Tuple[int, ...] = ()
    tolerance: int = 0

    def __post_init__(self):
        if self.age_months < 0:
            raise CatalogValidationError(f"Milestone {self.id}: age_months must be >= 0")
        if self.tolerance < 0:
            raise CatalogValidationError(f"Milestone {self.id}: tolerance must be >= 0")
        if not self.names:
            raise CatalogValidationError(f"Milestone {self.id}: at least one name is required")

    def applies_in(self, country: str) -> bool:
        return country in self.countries or "GENERIC" in self.countries

    def name(self, locale: str) -> str:
        return self.names.get(locale) or self.names.get("fr") or next(iter(self.names.values()))

    def description(self, locale: str) -> str:
        return self.descriptions.get(locale) or self.descriptions.get("fr", "")


@dataclass(frozen=True)
class LocalizedMilestone:
    id: str
    type: str
    category: str
    age_months: int
    tolerance: int
    name: str
    description: str
    priority: str
    mandatory: bool
    reminders: Tuple[int, ...]


@dataclass(frozen=True)
class PeriodRule:
    """Calendar-triggered family task (school year, holidays, taxes...)."""
    id: str
    period_type: str
    trigger: PeriodTrigger
    names: Mapping[str, str]
    descriptions: Mapping[str, str]
    category: TaskCategory
    priority: Priority
    lead_days: int = 0
    min_age_months: Optional[int] = None
    max_age_months: Optional[int] = None
    countries: Tuple[str, ...] = ("FR",)
    tags: Tuple[str, ...] = ()
    enabled: bool = True

    def __post_init__(self):
        if self.lead_days < 0:
            raise CatalogValidationError(f"Period rule {self.id}: lead_days must be >= 0")
        if (self.min_age_months is None) != (self.max_age_months is None):
            raise CatalogValidationError(f"Period rule {self.id}: age range needs both bounds")
        if self.min_age_months is not None and not 0 <= self.min_age_months <= self.max_age_months:
            raise CatalogValidationError(f"Period rule {self.id}: invalid age range")
        if not self.names:
            raise CatalogValidationError(f"Period rule {self.id}: at least one name is required")

    @property
    def month(self) -> int:
        return self.trigger.month

    def applies_in(self, country: str) -> bool:
        return country in self.countries or "GENERIC" in self.countries

    def applies_to_age(self, age_months: int) -> bool:
        if self.min_age_months is None:
            return True
        return self.min_age_months <= age_months <= self.max_age_months

    def name(self, locale: str) -> str:
        return self.names.get(locale) or self.names.get("fr") or next(iter(self.names.values()))

    def description(self, locale: str) -> str:
        return self.descriptions.get(locale) or self.descriptions.get("fr", "")
