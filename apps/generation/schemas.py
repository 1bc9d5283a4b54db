"""
API Schemas for Generation app.
"""
from typing import List, Optional
from uuid import UUID
from datetime import date, datetime
from ninja import Schema

from apps.catalog.schemas import TemplateOut


# =============================================================================
# Request Schemas
# =============================================================================

class GenerateIn(Schema):
    as_of: Optional[date] = None
    auto_materialize: Optional[bool] = None


class CandidateKeyIn(Schema):
    generation_key: str
    as_of: Optional[date] = None


# =============================================================================
# Response Schemas
# =============================================================================

class ChildSummaryOut(Schema):
    id: UUID
    first_name: str
    age: int


class UpcomingOut(Schema):
    template: TemplateOut
    child: ChildSummaryOut
    deadline: date
    days_until: int
    status: str
    can_skip: bool
    generation_key: str
    weight: int


class CandidateOut(Schema):
    template_id: str
    title: str
    child_id: UUID
    deadline: date
    opens_on: date
    generation_key: str
    weight: int
    timing: str
    can_skip: bool


class PlanFailureOut(Schema):
    template_id: str
    child_id: UUID
    error: str


class PlanOut(Schema):
    candidates: List[CandidateOut]
    failures: List[PlanFailureOut]


class LedgerEntryOut(Schema):
    id: UUID
    household_id: UUID
    child_id: UUID
    template_id: str
    deadline: date
    generation_key: str
    status: str
    task_id: Optional[UUID] = None
    acknowledged: bool
    acknowledged_at: Optional[datetime] = None
    acknowledged_by_id: Optional[int] = None


class GenerationDetailOut(Schema):
    template_id: str
    child_id: UUID
    success: bool
    created: bool
    error: Optional[str] = None


class GenerationResultOut(Schema):
    generated: int
    skipped: int
    errors: int
    details: List[GenerationDetailOut]


class MaterializeOut(Schema):
    created: bool
    generation_key: str
    status: str
    task_id: Optional[UUID] = None
    entry_id: Optional[UUID] = None


class SkipOut(Schema):
    skipped: bool
    generation_key: str
    status: str
    entry_id: Optional[UUID] = None


class HouseholdStatsOut(Schema):
    total: int
    pending: int
    created: int
    skipped: int
    expired: int
    critical: int
    due_soon: int
