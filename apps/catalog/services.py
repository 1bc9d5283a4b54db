"""
Service layer for Catalog app.
Read-only access to the catalog built at startup.
"""
from datetime import date
from typing import Iterable, List, Optional

from django.apps import apps

from .dtos import CatalogCriteria, CatalogPage, CatalogStatistics, LocalizedMilestone, PeriodRule, TaskTemplate
from .milestones import AgeRuleStore
from .period_rules import DEFAULT_UPCOMING_DAYS, PeriodRuleStore
from .templates import TemplateCatalog


def get_template_catalog() -> TemplateCatalog:
    return apps.get_app_config("catalog").template_catalog


def get_age_rules() -> AgeRuleStore:
    return apps.get_app_config("catalog").age_rules


def get_period_rules() -> PeriodRuleStore:
    return apps.get_app_config("catalog").period_rules


def search_templates(criteria: CatalogCriteria) -> CatalogPage:
    return get_template_catalog().page(criteria)


def get_template(template_id: str) -> TaskTemplate:
    """
    Fetch one template by id.

    Raises:
        ValueError: unknown template id
    """
    template = get_template_catalog().get(template_id)
    if template is None:
        raise ValueError(f"Template {template_id} not found")
    return template


def get_statistics() -> CatalogStatistics:
    return get_template_catalog().statistics()


def get_milestone_overview(
    age_months: int,
    locale: str = "fr",
    look_ahead_months: int = 6,
    completed: Optional[Iterable[str]] = None,
    country: str = "FR",
) -> dict:
    """Current, upcoming and missed milestones for a child's age."""
    if age_months < 0:
        raise ValueError("age_months must be >= 0")
    if look_ahead_months < 0:
        raise ValueError("look_ahead_months must be >= 0")

    store = get_age_rules()
    current: List[LocalizedMilestone] = store.milestones_for_age(age_months, locale, country)
    return {
        "current": current,
        "upcoming": store.upcoming(age_months, look_ahead_months, locale, country),
        "missed": store.missed(age_months, completed or (), locale, country),
    }


def list_period_rules(
    as_of: date,
    month: Optional[int] = None,
    days_ahead: int = DEFAULT_UPCOMING_DAYS,
    country: str = "FR",
) -> List[PeriodRule]:
    """Rules firing in `month`, or in the months of the next `days_ahead` days."""
    store = get_period_rules()
    if month is not None:
        return store.rules_for_month(month, country)
    return store.upcoming(as_of, days_ahead, country)
