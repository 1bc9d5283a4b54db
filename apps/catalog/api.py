"""
API Router for Catalog app.
Read-only endpoints over the template catalog, age milestones and period rules.
"""
from dataclasses import asdict
from typing import List, Optional
from ninja import Router
from ninja.errors import HttpError
from django.http import HttpRequest
from django.utils import timezone

from apps.recurrence import services as recurrence_services
from .dtos import AGE_BANDS, CatalogCriteria, PeriodRule, RecurrenceKind, TaskCategory, TaskTemplate
from .periods import Period, period_label
from .period_rules import should_trigger
from .schemas import TemplateOut, TemplatePageOut, StatisticsOut, MilestoneOut, MilestoneOverviewOut, PeriodRuleOut
from . import services

router = Router(tags=["Catalog"])


# =============================================================================
# Helper Functions
# =============================================================================

def require_auth(request: HttpRequest):
    """Ensure user is authenticated."""
    if not request.user.is_authenticated:
        raise HttpError(401, "Unauthorized")


def _split(value: Optional[str]) -> tuple:
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


def _parse_enum_list(enum_cls, value: Optional[str], name: str) -> tuple:
    try:
        return tuple(enum_cls(part) for part in _split(value))
    except ValueError:
        raise ValueError(f"Invalid {name}: {value}") from None


def template_out(template: TaskTemplate, locale: str = "fr") -> TemplateOut:
    return TemplateOut(
        id=template.id,
        country=template.country,
        title=template.title,
        description=template.description,
        category=template.category.value,
        subcategory=template.subcategory,
        age_min=template.age_min,
        age_max=template.age_max,
        age_unit=template.age_unit.value,
        age_ranges=list(template.age_ranges),
        period=template.period.value,
        period_label=period_label(template.period, locale),
        recurrence=template.recurrence.to_dict() if template.recurrence else None,
        recurrence_kind=template.recurrence_kind.value,
        recurrence_label=recurrence_services.label(template.recurrence, locale),
        weight=template.weight,
        days_before_deadline=template.days_before_deadline,
        critical=template.critical,
        priority=template.priority.value,
        is_active=template.is_active,
    )


# =============================================================================
# Template Endpoints
# =============================================================================

@router.get("/templates", response=TemplatePageOut, auth=None)
def list_templates(
    request: HttpRequest,
    age_ranges: Optional[str] = None,
    periods: Optional[str] = None,
    categories: Optional[str] = None,
    recurrence: Optional[str] = None,
    search: Optional[str] = None,
    min_weight: Optional[int] = None,
    max_weight: Optional[int] = None,
    critical: Optional[bool] = None,
    country: Optional[str] = None,
    include_inactive: bool = False,
    page: int = 1,
    limit: int = 20,
    locale: str = "fr",
):
    """
    Filter the catalog.
    List filters take comma-separated values, e.g. `?age_ranges=3-6,6-11`.
    """
    require_auth(request)
    try:
        bands = _split(age_ranges)
        unknown = [band for band in bands if band not in AGE_BANDS]
        if unknown:
            raise ValueError(f"Invalid age_ranges: {', '.join(unknown)}")
        criteria = CatalogCriteria(
            age_ranges=bands,
            periods=_parse_enum_list(Period, periods, "periods"),
            categories=_parse_enum_list(TaskCategory, categories, "categories"),
            recurrence=_parse_enum_list(RecurrenceKind, recurrence, "recurrence"),
            search=search,
            min_weight=min_weight,
            max_weight=max_weight,
            critical=critical,
            country=country,
            include_inactive=include_inactive,
            page=page,
            limit=limit,
        )
    except ValueError as e:
        raise HttpError(400, str(e))

    result = services.search_templates(criteria)
    return TemplatePageOut(
        items=[template_out(t, locale) for t in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        pages=result.pages,
    )


@router.get("/templates/statistics", response=StatisticsOut, auth=None)
def template_statistics(request: HttpRequest):
    require_auth(request)
    return StatisticsOut(**asdict(services.get_statistics()))


@router.get("/templates/{template_id}", response=TemplateOut, auth=None)
def get_template(request: HttpRequest, template_id: str, locale: str = "fr"):
    require_auth(request)
    try:
        return template_out(services.get_template(template_id), locale)
    except ValueError as e:
        raise HttpError(404, str(e))


# =============================================================================
# Milestone Endpoints
# =============================================================================

@router.get("/milestones", response=MilestoneOverviewOut, auth=None)
def milestone_overview(
    request: HttpRequest,
    age_months: int,
    locale: str = "fr",
    look_ahead_months: int = 6,
    completed: Optional[str] = None,
    country: str = "FR",
):
    """Current, upcoming and missed milestones for a child's age in months."""
    require_auth(request)
    try:
        overview = services.get_milestone_overview(
            age_months=age_months,
            locale=locale,
            look_ahead_months=look_ahead_months,
            completed=_split(completed),
            country=country,
        )
    except ValueError as e:
        raise HttpError(400, str(e))

    return MilestoneOverviewOut(**{
        key: [MilestoneOut(**{**asdict(m), "reminders": list(m.reminders)}) for m in milestones]
        for key, milestones in overview.items()
    })


# =============================================================================
# Period Rule Endpoints
# =============================================================================

def period_rule_out(rule: PeriodRule, as_of, locale: str = "fr") -> PeriodRuleOut:
    return PeriodRuleOut(
        id=rule.id,
        period_type=rule.period_type,
        category=rule.category.value,
        priority=rule.priority.value,
        name=rule.name(locale),
        description=rule.description(locale),
        month=rule.month,
        monthly=rule.trigger.monthly,
        lead_days=rule.lead_days,
        next_trigger=rule.trigger.next_on_or_after(as_of),
        triggered=should_trigger(rule, as_of),
        min_age_months=rule.min_age_months,
        max_age_months=rule.max_age_months,
        tags=list(rule.tags),
    )


@router.get("/period-rules", response=List[PeriodRuleOut], auth=None)
def list_period_rules(
    request: HttpRequest,
    month: Optional[int] = None,
    days_ahead: int = 30,
    locale: str = "fr",
    country: str = "FR",
):
    """Rules firing in `month`, or over the next `days_ahead` days."""
    require_auth(request)
    as_of = timezone.localdate()
    try:
        rules = services.list_period_rules(as_of, month=month, days_ahead=days_ahead, country=country)
    except ValueError as e:
        raise HttpError(400, str(e))
    return [period_rule_out(rule, as_of, locale) for rule in rules]
