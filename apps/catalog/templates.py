"""
Template catalog.

Built once from static rows at startup and read concurrently afterwards;
nothing here mutates after __init__.
"""
import logging
import math
from collections import Counter
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Optional

from apps.core.exceptions import CatalogValidationError, RecurrenceError
from apps.recurrence.cron import parse_cron_pattern
from apps.recurrence.dtos import RecurrenceRule
from .dtos import (
    AgeUnit, CatalogCriteria, CatalogPage, CatalogStatistics,
    Priority, TaskCategory, TaskTemplate,
)
from .periods import Period

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def _enum(enum_cls, value, template_id: str, field_name: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise CatalogValidationError(
            f"Template {template_id}: invalid {field_name} {value!r}"
        ) from None


def _recurrence(row: Dict[str, Any], template_id: str) -> Optional[RecurrenceRule]:
    try:
        if row.get("cron"):
            return parse_cron_pattern(row["cron"])
        if row.get("recurrence"):
            return RecurrenceRule.from_dict(row["recurrence"])
    except RecurrenceError as e:
        raise CatalogValidationError(f"Template {template_id}: {e}") from e
    return None


def build_template(row: Dict[str, Any]) -> TaskTemplate:
    """
    Build a TaskTemplate from a catalog row.

    The recurrence comes from either a `cron` pattern or a `recurrence`
    rule dict. Raises CatalogValidationError on any invalid field.
    """
    template_id = row.get("id", "")
    try:
        return TaskTemplate(
            id=template_id,
            country=row.get("country", "FR"),
            age_min=row["age_min"],
            age_max=row["age_max"],
            age_unit=_enum(AgeUnit, row.get("age_unit", "years"), template_id, "age_unit"),
            category=_enum(TaskCategory, row["category"], template_id, "category"),
            subcategory=row.get("subcategory"),
            title=row["title"],
            description=row.get("description", ""),
            recurrence=_recurrence(row, template_id),
            weight=row.get("weight", 1),
            days_before_deadline=row.get("days_before_deadline", 0),
            period=_enum(Period, row.get("period", "year_round"), template_id, "period"),
            is_active=row.get("is_active", True),
            critical=row.get("critical", False),
            priority=_enum(Priority, row.get("priority", "medium"), template_id, "priority"),
            trigger_age_months=row.get("trigger_age_months"),
        )
    except KeyError as e:
        raise CatalogValidationError(f"Template {template_id}: missing field {e.args[0]}") from None


def _sort_key(template: TaskTemplate):
    return (template.category.value, template.min_age_months, template.title)


class TemplateCatalog:
    """Read-only, ordered collection of task templates."""

    def __init__(self, templates: Iterable[TaskTemplate]):
        ordered = sorted(templates, key=_sort_key)
        by_id: Dict[str, TaskTemplate] = {}
        for template in ordered:
            if template.id in by_id:
                raise CatalogValidationError(f"Duplicate template id: {template.id}")
            by_id[template.id] = template
        self._templates = tuple(ordered)
        self._by_id = MappingProxyType(by_id)

    @classmethod
    def from_rows(cls, rows: Iterable[Dict[str, Any]]) -> "TemplateCatalog":
        catalog = cls(build_template(row) for row in rows)
        logger.info(f"Template catalog loaded with {len(catalog)} templates")
        return catalog

    def __len__(self) -> int:
        return len(self._templates)

    def __iter__(self) -> Iterator[TaskTemplate]:
        return iter(self._templates)

    def get(self, template_id: str) -> Optional[TaskTemplate]:
        return self._by_id.get(template_id)

    # =========================================================================
    # Queries
    # =========================================================================

    @staticmethod
    def _matches(template: TaskTemplate, criteria: CatalogCriteria) -> bool:
        if not criteria.include_inactive and not template.is_active:
            return False
        if criteria.country and template.country != criteria.country.upper():
            return False
        if criteria.age_ranges and not set(criteria.age_ranges) & set(template.age_ranges):
            return False
        if criteria.periods and template.period is not Period.YEAR_ROUND:
            if template.period not in criteria.periods:
                return False
        if criteria.categories and template.category not in criteria.categories:
            return False
        if criteria.recurrence and template.recurrence_kind not in criteria.recurrence:
            return False
        if criteria.min_weight is not None and template.weight < criteria.min_weight:
            return False
        if criteria.max_weight is not None and template.weight > criteria.max_weight:
            return False
        if criteria.critical is not None and template.critical != criteria.critical:
            return False
        if criteria.search:
            needle = criteria.search.strip().lower()
            haystack = f"{template.title} {template.description}".lower()
            if needle not in haystack:
                return False
        return True

    def _matching(self, criteria: Optional[CatalogCriteria]) -> List[TaskTemplate]:
        criteria = criteria or CatalogCriteria()
        return [t for t in self._templates if self._matches(t, criteria)]

    def filter(self, criteria: Optional[CatalogCriteria] = None) -> List[TaskTemplate]:
        """Templates matching every criterion, for the requested page."""
        return self.page(criteria).items

    def count(self, criteria: Optional[CatalogCriteria] = None) -> int:
        return len(self._matching(criteria))

    def page(self, criteria: Optional[CatalogCriteria] = None) -> CatalogPage:
        criteria = criteria or CatalogCriteria()
        matching = self._matching(criteria)
        limit = max(1, min(MAX_PAGE_SIZE, criteria.limit or DEFAULT_PAGE_SIZE))
        page = max(1, criteria.page)
        start = (page - 1) * limit
        return CatalogPage(
            items=matching[start:start + limit],
            total=len(matching),
            page=page,
            limit=limit,
            pages=math.ceil(len(matching) / limit) if matching else 0,
        )

    def for_child(self, age_months: int, country: str) -> List[TaskTemplate]:
        """Active templates of a country whose age range contains the child's age."""
        country = country.upper()
        return [
            t for t in self._templates
            if t.is_active and t.country == country and t.applies_to_age(age_months)
        ]

    def statistics(self) -> CatalogStatistics:
        active = [t for t in self._templates if t.is_active]
        by_age_range: Counter = Counter()
        for template in active:
            by_age_range.update(template.age_ranges)
        return CatalogStatistics(
            total=len(active),
            critical=sum(1 for t in active if t.critical),
            by_category=dict(Counter(t.category.value for t in active)),
            by_period=dict(Counter(t.period.value for t in active)),
            by_age_range=dict(by_age_range),
            by_recurrence=dict(Counter(t.recurrence_kind.value for t in active)),
        )
