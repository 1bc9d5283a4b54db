"""
API Schemas for Catalog app.
"""
from datetime import date
from typing import Any, Dict, List, Optional
from ninja import Schema


class TemplateOut(Schema):
    id: str
    country: str
    title: str
    description: str
    category: str
    subcategory: Optional[str] = None
    age_min: int
    age_max: int
    age_unit: str
    age_ranges: List[str]
    period: str
    period_label: str
    recurrence: Optional[Dict[str, Any]] = None
    recurrence_kind: str
    recurrence_label: str
    weight: int
    days_before_deadline: int
    critical: bool
    priority: str
    is_active: bool


class TemplatePageOut(Schema):
    items: List[TemplateOut]
    total: int
    page: int
    limit: int
    pages: int


class StatisticsOut(Schema):
    total: int
    critical: int
    by_category: Dict[str, int]
    by_period: Dict[str, int]
    by_age_range: Dict[str, int]
    by_recurrence: Dict[str, int]


class MilestoneOut(Schema):
    id: str
    type: str
    category: str
    age_months: int
    tolerance: int
    name: str
    description: str
    priority: str
    mandatory: bool
    reminders: List[int]


class MilestoneOverviewOut(Schema):
    current: List[MilestoneOut]
    upcoming: List[MilestoneOut]
    missed: List[MilestoneOut]


class PeriodRuleOut(Schema):
    id: str
    period_type: str
    category: str
    priority: str
    name: str
    description: str
    month: int
    monthly: bool
    lead_days: int
    next_trigger: date
    triggered: bool
    min_age_months: Optional[int] = None
    max_age_months: Optional[int] = None
    tags: List[str]
