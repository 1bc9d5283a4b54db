"""
Period rule store.

Period rules are calendar-triggered tasks tied to the school year and the
holidays: supplies in August, the parents' meeting in the first week of
October, registrations in March. Each rule fires on a date in its month and
opens `lead_days` before it. Like the milestone store, it is immutable and
every query takes the date or age it needs.
"""
import logging
from datetime import date, timedelta
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Optional

from apps.core.exceptions import CatalogValidationError
from .dtos import AgeUnit, PeriodRule, Priority, TaskCategory, TaskTemplate
from .milestones import PRIORITY_WEIGHT
from .periods import PeriodTrigger

logger = logging.getLogger(__name__)

PERIOD_RULE_TEMPLATE_PREFIX = "period_rule:"
DEFAULT_UPCOMING_DAYS = 30

# Rules without an age range cover minors
ADULT_AGE_MONTHS = 216


def build_period_rule(row: Dict[str, Any]) -> PeriodRule:
    rule_id = row.get("id", "")
    age_range = row.get("age_range")
    try:
        trigger = PeriodTrigger(
            month=row["month"],
            day_of_month=row.get("day_of_month"),
            week_of_month=row.get("week_of_month"),
            day_of_week=row.get("day_of_week"),
            monthly=row.get("recurrence") == "monthly",
        )
        return PeriodRule(
            id=rule_id,
            period_type=row["period_type"],
            trigger=trigger,
            names=MappingProxyType(dict(row["name"])),
            descriptions=MappingProxyType(dict(row.get("description", {}))),
            category=TaskCategory(row["category"]),
            priority=Priority(row.get("priority", "medium")),
            lead_days=row.get("lead_days", 0),
            min_age_months=age_range[0] if age_range else None,
            max_age_months=age_range[1] if age_range else None,
            countries=tuple(row.get("countries", ("FR",))),
            tags=tuple(row.get("tags", ())),
            enabled=row.get("enabled", True),
        )
    except KeyError as e:
        raise CatalogValidationError(f"Period rule {rule_id}: missing field {e.args[0]}") from None
    except ValueError as e:
        raise CatalogValidationError(f"Period rule {rule_id}: {e}") from None


def due_date(rule: PeriodRule, year: int, month: Optional[int] = None) -> date:
    """Trigger date minus the lead time."""
    return rule.trigger.date_in(year, month) - timedelta(days=rule.lead_days)


def should_trigger(rule: PeriodRule, as_of: date) -> bool:
    """True during the `lead_days` leading up to this year's (or month's) due date."""
    days_left = (due_date(rule, as_of.year, as_of.month) - as_of).days
    return 0 <= days_left <= rule.lead_days


def period_rule_to_template(rule: PeriodRule, locale: str = "fr", country: str = "FR") -> TaskTemplate:
    """
    Template due on the rule's next trigger date.

    Critical rules cannot be skipped; the lead time becomes the days before
    the deadline.
    """
    return TaskTemplate(
        id=f"{PERIOD_RULE_TEMPLATE_PREFIX}{rule.id}",
        country=country,
        age_min=rule.min_age_months if rule.min_age_months is not None else 0,
        age_max=rule.max_age_months if rule.max_age_months is not None else ADULT_AGE_MONTHS - 1,
        age_unit=AgeUnit.MONTHS,
        category=rule.category,
        subcategory=rule.period_type,
        title=rule.name(locale),
        description=rule.description(locale),
        weight=PRIORITY_WEIGHT[rule.priority],
        days_before_deadline=rule.lead_days,
        critical=rule.priority is Priority.CRITICAL,
        priority=rule.priority,
        trigger=rule.trigger,
    )


class PeriodRuleStore:
    """Read-only period rule lookup by month, type, age and country."""

    def __init__(self, rules: Iterable[PeriodRule]):
        ordered = sorted(rules, key=lambda r: (r.month, r.id))
        by_id: Dict[str, PeriodRule] = {}
        for rule in ordered:
            if rule.id in by_id:
                raise CatalogValidationError(f"Duplicate period rule id: {rule.id}")
            by_id[rule.id] = rule
        self._rules = tuple(ordered)
        self._by_id = MappingProxyType(by_id)

    @classmethod
    def from_rows(cls, rows: Iterable[Dict[str, Any]]) -> "PeriodRuleStore":
        store = cls(build_period_rule(row) for row in rows)
        logger.info(f"Period rule store loaded with {len(store)} rules")
        return store

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self):
        return iter(self._rules)

    def get(self, rule_id: str) -> Optional[PeriodRule]:
        return self._by_id.get(rule_id)

    def _enabled_in(self, country: str) -> List[PeriodRule]:
        country = country.upper()
        return [r for r in self._rules if r.enabled and r.applies_in(country)]

    def rules_for_month(self, month: int, country: str = "FR") -> List[PeriodRule]:
        """Rules firing in `month`; monthly rules fire in every month."""
        if not 1 <= month <= 12:
            raise ValueError(f"month must be between 1 and 12, got {month}")
        return [r for r in self._enabled_in(country) if r.trigger.monthly or r.month == month]

    def upcoming(self, as_of: date, days_ahead: int = DEFAULT_UPCOMING_DAYS, country: str = "FR") -> List[PeriodRule]:
        """Rules of every month from `as_of` through `as_of + days_ahead`, without duplicates."""
        if days_ahead < 0:
            raise ValueError("days_ahead must be >= 0")
        end = as_of + timedelta(days=days_ahead)
        span = min((end.year - as_of.year) * 12 + end.month - as_of.month, 11)
        months = [(as_of.month - 1 + offset) % 12 + 1 for offset in range(span + 1)]

        seen = set()
        rules: List[PeriodRule] = []
        for month in months:
            for rule in self.rules_for_month(month, country):
                if rule.id not in seen:
                    seen.add(rule.id)
                    rules.append(rule)
        return rules

    def by_type(self, period_type: str) -> List[PeriodRule]:
        return [r for r in self._rules if r.enabled and r.period_type == period_type]

    def for_age(self, age_months: int, country: str = "FR") -> List[PeriodRule]:
        return [r for r in self._enabled_in(country) if r.applies_to_age(age_months)]

    def triggered(self, as_of: date, country: str = "FR") -> List[PeriodRule]:
        return [r for r in self._enabled_in(country) if should_trigger(r, as_of)]
