"""
Age milestone store.

Milestones are age-triggered events (vaccines, checkups, school
registrations) with a tolerance window in months. The store is immutable
and holds no per-child state; every query takes the child's age.
"""
import logging
from datetime import date
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Optional

from django.core.exceptions import ImproperlyConfigured

from apps.core.dates import add_months
from apps.core.exceptions import CatalogValidationError
from .dtos import (
    AgeMilestone, AgeUnit, LocalizedMilestone, MilestoneType,
    Priority, TaskCategory, TaskTemplate,
)

logger = logging.getLogger(__name__)

MILESTONE_TEMPLATE_PREFIX = "milestone:"
DEFAULT_LEAD_DAYS = 14

MILESTONE_CATEGORY: Dict[MilestoneType, TaskCategory] = {
    MilestoneType.VACCINE: TaskCategory.HEALTH,
    MilestoneType.HEALTH_CHECKUP: TaskCategory.HEALTH,
    MilestoneType.REGISTRATION: TaskCategory.SCHOOL,
    MilestoneType.TRANSITION: TaskCategory.SCHOOL,
    MilestoneType.PREPARATION: TaskCategory.SCHOOL,
    MilestoneType.ADMINISTRATIVE: TaskCategory.ADMINISTRATIVE,
    MilestoneType.ACTIVITY: TaskCategory.ACTIVITIES,
}

_unmapped = set(MilestoneType) - set(MILESTONE_CATEGORY)
if _unmapped:
    raise ImproperlyConfigured(
        f"Milestone types without a task category: {sorted(t.value for t in _unmapped)}"
    )

PRIORITY_WEIGHT = {
    Priority.CRITICAL: 5,
    Priority.HIGH: 4,
    Priority.MEDIUM: 3,
    Priority.LOW: 2,
}


def build_milestone(row: Dict[str, Any]) -> AgeMilestone:
    milestone_id = row.get("id", "")
    try:
        return AgeMilestone(
            id=milestone_id,
            type=MilestoneType(row["type"]),
            age_months=row["age_months"],
            tolerance=row.get("tolerance", 0),
            names=MappingProxyType(dict(row["name"])),
            descriptions=MappingProxyType(dict(row.get("description", {}))),
            countries=tuple(row.get("countries", ("FR",))),
            priority=Priority(row.get("priority", "medium")),
            mandatory=row.get("mandatory", False),
            reminders=tuple(row.get("reminders", ())),
        )
    except KeyError as e:
        raise CatalogValidationError(f"Milestone {milestone_id}: missing field {e.args[0]}") from None
    except ValueError as e:
        raise CatalogValidationError(f"Milestone {milestone_id}: {e}") from None


def localize(milestone: AgeMilestone, locale: str) -> LocalizedMilestone:
    return LocalizedMilestone(
        id=milestone.id,
        type=milestone.type.value,
        category=MILESTONE_CATEGORY[milestone.type].value,
        age_months=milestone.age_months,
        tolerance=milestone.tolerance,
        name=milestone.name(locale),
        description=milestone.description(locale),
        priority=milestone.priority.value,
        mandatory=milestone.mandatory,
        reminders=milestone.reminders,
    )


def milestone_to_template(milestone: AgeMilestone, locale: str = "fr", country: str = "FR") -> TaskTemplate:
    """
    One-time template for a milestone, due when the child reaches its age.

    Lead time is the earliest reminder; mandatory milestones cannot be skipped.
    """
    return TaskTemplate(
        id=f"{MILESTONE_TEMPLATE_PREFIX}{milestone.id}",
        country=country,
        age_min=max(0, milestone.age_months - milestone.tolerance),
        age_max=milestone.age_months + milestone.tolerance,
        age_unit=AgeUnit.MONTHS,
        category=MILESTONE_CATEGORY[milestone.type],
        subcategory=milestone.type.value,
        title=milestone.name(locale),
        description=milestone.description(locale),
        weight=PRIORITY_WEIGHT[milestone.priority],
        days_before_deadline=max(milestone.reminders, default=DEFAULT_LEAD_DAYS),
        critical=milestone.mandatory,
        priority=milestone.priority,
        trigger_age_months=milestone.age_months,
        milestone_id=milestone.id,
    )


class AgeRuleStore:
    """Read-only milestone lookup by age, type and country."""

    def __init__(self, milestones: Iterable[AgeMilestone]):
        ordered = sorted(milestones, key=lambda m: (m.age_months, m.id))
        by_id: Dict[str, AgeMilestone] = {}
        for milestone in ordered:
            if milestone.id in by_id:
                raise CatalogValidationError(f"Duplicate milestone id: {milestone.id}")
            by_id[milestone.id] = milestone
        self._milestones = tuple(ordered)
        self._by_id = MappingProxyType(by_id)

    @classmethod
    def from_rows(cls, rows: Iterable[Dict[str, Any]]) -> "AgeRuleStore":
        store = cls(build_milestone(row) for row in rows)
        logger.info(f"Age rule store loaded with {len(store)} milestones")
        return store

    def __len__(self) -> int:
        return len(self._milestones)

    def __iter__(self):
        return iter(self._milestones)

    def get(self, milestone_id: str) -> Optional[AgeMilestone]:
        return self._by_id.get(milestone_id)

    def _in_country(self, country: str) -> List[AgeMilestone]:
        country = country.upper()
        return [m for m in self._milestones if m.applies_in(country)]

    @staticmethod
    def _is_current(milestone: AgeMilestone, age_months: int) -> bool:
        return milestone.age_months - milestone.tolerance <= age_months <= milestone.age_months + milestone.tolerance

    def current(self, age_months: int, country: str = "FR") -> List[AgeMilestone]:
        return [m for m in self._in_country(country) if self._is_current(m, age_months)]

    def next_milestones(self, age_months: int, look_ahead_months: int, country: str = "FR") -> List[AgeMilestone]:
        limit = age_months + look_ahead_months
        return [
            m for m in self._in_country(country)
            if age_months < m.age_months <= limit and not self._is_current(m, age_months)
        ]

    def milestones_for_age(self, age_months: int, locale: str = "fr", country: str = "FR") -> List[LocalizedMilestone]:
        """Milestones whose tolerance window contains the age."""
        return [localize(m, locale) for m in self.current(age_months, country)]

    def upcoming(
        self,
        age_months: int,
        look_ahead_months: int = 6,
        locale: str = "fr",
        country: str = "FR",
    ) -> List[LocalizedMilestone]:
        """Milestones due after the current age, within the look-ahead, not already current."""
        return [localize(m, locale) for m in self.next_milestones(age_months, look_ahead_months, country)]

    def missed(
        self,
        age_months: int,
        completed: Iterable[str] = (),
        locale: str = "fr",
        country: str = "FR",
    ) -> List[LocalizedMilestone]:
        """Milestones whose window has closed and that are not in `completed`."""
        done = set(completed)
        return [
            localize(m, locale) for m in self._in_country(country)
            if m.age_months + m.tolerance < age_months and m.id not in done
        ]

    def mandatory(self, country: str = "FR", locale: str = "fr") -> List[LocalizedMilestone]:
        return [localize(m, locale) for m in self._in_country(country) if m.mandatory]

    def by_type(self, milestone_type, locale: str = "fr") -> List[LocalizedMilestone]:
        milestone_type = MilestoneType(milestone_type)
        return [localize(m, locale) for m in self._milestones if m.type is milestone_type]

    @staticmethod
    def due_date(milestone: AgeMilestone, birthdate: date) -> date:
        return add_months(birthdate, milestone.age_months)
