"""
API Router for Generation app.
Upcoming task preview, generation runs and the confirm/skip flow.
"""
from dataclasses import asdict
from datetime import date
from typing import List, Optional
from uuid import UUID
from ninja import Router
from ninja.errors import HttpError
from django.http import HttpRequest

from apps.catalog.api import template_out
from apps.households import services as household_services
from .schemas import (
    CandidateKeyIn, CandidateOut, ChildSummaryOut, GenerateIn, GenerationResultOut,
    HouseholdStatsOut, LedgerEntryOut, MaterializeOut, PlanFailureOut, PlanOut, SkipOut, UpcomingOut,
)
from . import services

router = Router(tags=["Generation"])


# =============================================================================
# Helper Functions
# =============================================================================

def require_auth(request: HttpRequest):
    """Ensure user is authenticated."""
    if not request.user.is_authenticated:
        raise HttpError(401, "Unauthorized")


def require_household(household_id: UUID):
    household = household_services.get_household(household_id)
    if household is None:
        raise HttpError(404, "Household not found")
    return household


# =============================================================================
# Preview Endpoints
# =============================================================================

@router.get("/households/{household_id}/upcoming", response=List[UpcomingOut], auth=None)
def upcoming_tasks(request: HttpRequest, household_id: UUID, days: Optional[int] = None):
    """Tasks the catalog expects within `days`, not yet created or skipped."""
    require_auth(request)
    household = require_household(household_id)
    try:
        previews = services.preview_upcoming(household_id, days=days)
    except ValueError as e:
        raise HttpError(400, str(e))

    return [
        UpcomingOut(
            template=template_out(p.template, household.locale),
            child=ChildSummaryOut(**asdict(p.child)),
            deadline=p.deadline,
            days_until=p.days_until,
            status=p.status,
            can_skip=p.can_skip,
            generation_key=p.generation_key,
            weight=p.weight,
        )
        for p in previews
    ]


@router.get("/households/{household_id}/candidates", response=PlanOut, auth=None)
def household_candidates(request: HttpRequest, household_id: UUID, as_of: Optional[date] = None):
    """Full plan for the household, including candidates that are not open yet."""
    require_auth(request)
    require_household(household_id)
    report = services.plan_household(household_id, as_of=as_of)
    return PlanOut(
        candidates=[
            CandidateOut(
                template_id=c.template_id,
                title=c.template.title,
                child_id=c.child_id,
                deadline=c.deadline,
                opens_on=c.opens_on,
                generation_key=c.generation_key,
                weight=c.weight,
                timing=c.timing,
                can_skip=c.can_skip,
            )
            for c in report.candidates
        ],
        failures=[PlanFailureOut(**asdict(f)) for f in report.failures],
    )


@router.get("/households/{household_id}/pending", response=List[LedgerEntryOut], auth=None)
def pending_generations(request: HttpRequest, household_id: UUID):
    require_auth(request)
    require_household(household_id)
    return [LedgerEntryOut(**asdict(entry)) for entry in services.list_pending(household_id)]


@router.get("/households/{household_id}/stats", response=HouseholdStatsOut, auth=None)
def household_stats(request: HttpRequest, household_id: UUID, as_of: Optional[date] = None):
    """Generation counts by status, plus pending critical and due-soon counts."""
    require_auth(request)
    require_household(household_id)
    return HouseholdStatsOut(**asdict(services.household_stats(household_id, as_of=as_of)))


# =============================================================================
# Generation Endpoints
# =============================================================================

@router.post("/households/{household_id}/generate", response=GenerationResultOut, auth=None)
def generate_tasks(request: HttpRequest, household_id: UUID, payload: GenerateIn):
    """Run generation for the household now."""
    require_auth(request)
    require_household(household_id)
    result = services.generate_for_household(
        household_id,
        as_of=payload.as_of,
        auto_materialize=payload.auto_materialize,
    )
    return GenerationResultOut(**asdict(result))


@router.post("/households/{household_id}/confirm", response=MaterializeOut, auth=None)
def confirm_candidate(request: HttpRequest, household_id: UUID, payload: CandidateKeyIn):
    """Create the task for a previewed candidate."""
    require_auth(request)
    require_household(household_id)
    try:
        result = services.confirm_candidate(household_id, payload.generation_key, as_of=payload.as_of)
    except ValueError as e:
        raise HttpError(400, str(e))
    return MaterializeOut(**asdict(result))


@router.post("/households/{household_id}/skip", response=SkipOut, auth=None)
def skip_candidate(request: HttpRequest, household_id: UUID, payload: CandidateKeyIn):
    """Decline a previewed candidate. Mandatory tasks cannot be skipped."""
    require_auth(request)
    require_household(household_id)
    try:
        result = services.skip_candidate(
            household_id,
            payload.generation_key,
            actor_id=request.user.id,
            as_of=payload.as_of,
        )
    except ValueError as e:
        raise HttpError(400, str(e))
    return SkipOut(**asdict(result))
