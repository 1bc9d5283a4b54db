"""
Service layer for Generation app.

Wires the planner to households and the ledger. The household timezone is
used here, and only here, to decide which calendar date is "today".
"""
import logging
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import List, Optional
from uuid import UUID

from django.conf import settings

from apps.catalog.services import get_age_rules, get_period_rules, get_template_catalog
from apps.core.dates import age_in_years, days_until, today_in_timezone
from apps.households import services as household_services
from apps.households.dtos import HouseholdDTO
from .dtos import (
    ChildSummary, GenerationCandidate, GenerationDetail, HouseholdGenerationStats, LedgerEntryDTO,
    MaterializeResult, PlanReport, SkipResult, SweepResult,
    TaskGenerationResult, UpcomingTaskPreview,
)
from .ledger import GenerationLedger
from .materializer import TaskMaterializer
from .models import GenerationStatus
from .planner import GenerationPlanner

logger = logging.getLogger(__name__)

PREVIEW_OVERDUE = "overdue"
PREVIEW_DUE_SOON = "due_soon"
PREVIEW_UPCOMING = "upcoming"

# Ledger states that hide a candidate from the preview
SETTLED_STATUSES = (GenerationStatus.CREATED, GenerationStatus.SKIPPED, GenerationStatus.EXPIRED)


def get_planner() -> GenerationPlanner:
    return GenerationPlanner(
        get_template_catalog(),
        get_age_rules(),
        get_period_rules(),
        milestone_look_ahead_months=getattr(settings, 'GENERATION_MILESTONE_LOOKAHEAD_MONTHS', 2),
        locale=getattr(settings, 'DEFAULT_LOCALE', 'fr'),
    )


def household_today(household: HouseholdDTO, now: Optional[datetime] = None) -> date:
    return today_in_timezone(household.timezone, now)


def _require_household(household_id: UUID) -> HouseholdDTO:
    household = household_services.get_household(household_id)
    if household is None:
        raise ValueError(f"Household {household_id} not found")
    return household


def _plan(household: HouseholdDTO, as_of: date, planner: Optional[GenerationPlanner] = None) -> PlanReport:
    planner = planner or get_planner()
    overrides = household_services.get_template_settings(household.id)
    candidates = []
    failures = []
    for child in household_services.list_children(household.id):
        report = planner.plan(child, overrides, as_of, country=household.country, locale=household.locale)
        candidates.extend(report.candidates)
        failures.extend(report.failures)
    candidates.sort(key=lambda c: (c.deadline, c.template_id, str(c.child_id)))
    return PlanReport(candidates=tuple(candidates), failures=tuple(failures))


def plan_household(household_id: UUID, as_of: Optional[date] = None) -> PlanReport:
    """Candidates for every active child of the household."""
    household = _require_household(household_id)
    return _plan(household, as_of or household_today(household))


# =============================================================================
# Preview
# =============================================================================

def _preview_status(days: int) -> str:
    if days < 0:
        return PREVIEW_OVERDUE
    if days <= getattr(settings, 'GENERATION_DUE_SOON_DAYS', 7):
        return PREVIEW_DUE_SOON
    return PREVIEW_UPCOMING


def preview_upcoming(
    household_id: UUID,
    days: Optional[int] = None,
    as_of: Optional[date] = None,
) -> List[UpcomingTaskPreview]:
    """
    Candidates due within `days`, for the family to confirm or skip.

    Candidates already created, skipped or expired are left out; pending
    ones stay visible until someone acts on them.
    """
    household = _require_household(household_id)
    as_of = as_of or household_today(household)
    if days is None:
        days = getattr(settings, 'GENERATION_LOOKAHEAD_DAYS', 30)
    if days < 0:
        raise ValueError("days must be >= 0")

    horizon = as_of + timedelta(days=days)
    oldest = as_of - timedelta(days=getattr(settings, 'GENERATION_BACKFILL_DAYS', 30))
    candidates = [c for c in _plan(household, as_of).candidates if oldest <= c.deadline <= horizon]
    settled = GenerationLedger().existing_keys((c.generation_key for c in candidates), SETTLED_STATUSES)

    previews = []
    for candidate in candidates:
        if candidate.generation_key in settled:
            continue
        remaining = days_until(candidate.deadline, as_of)
        previews.append(UpcomingTaskPreview(
            template=candidate.template,
            child=ChildSummary(
                id=candidate.child.id,
                first_name=candidate.child.first_name,
                age=age_in_years(candidate.child.birthdate, as_of),
            ),
            deadline=candidate.deadline,
            days_until=remaining,
            status=_preview_status(remaining),
            can_skip=candidate.can_skip,
            generation_key=candidate.generation_key,
            weight=candidate.weight,
        ))
    previews.sort(key=lambda p: (p.days_until, p.template.id, p.child.first_name))
    return previews


def list_pending(household_id: UUID) -> List[LedgerEntryDTO]:
    _require_household(household_id)
    return GenerationLedger().pending_for_household(household_id)


def household_stats(household_id: UUID, as_of: Optional[date] = None) -> HouseholdGenerationStats:
    """Ledger counts for the household; pending rows due within the due-soon window count as due soon."""
    household = _require_household(household_id)
    as_of = as_of or household_today(household)
    ledger = GenerationLedger()
    planner = get_planner()

    critical = set()
    for template_id in ledger.pending_template_ids(household_id):
        template = planner.resolve_template(template_id, household.country, household.locale)
        if template is not None and template.critical:
            critical.add(template_id)

    due_soon_until = as_of + timedelta(days=getattr(settings, 'GENERATION_DUE_SOON_DAYS', 7))
    return ledger.stats_for_household(household_id, due_soon_until, critical)


# =============================================================================
# Generation
# =============================================================================

def _is_eligible(candidate: GenerationCandidate, as_of: date, backfill: bool = True) -> bool:
    """Open on `as_of`; past deadlines are accepted only within the backfill window."""
    if candidate.opens_on > as_of:
        return False
    oldest = as_of
    if backfill:
        oldest -= timedelta(days=getattr(settings, 'GENERATION_BACKFILL_DAYS', 30))
    return candidate.deadline >= oldest


def generate_for_household(
    household_id: UUID,
    as_of: Optional[date] = None,
    auto_materialize: Optional[bool] = None,
) -> TaskGenerationResult:
    """
    Plan the household and persist what is due.

    With auto_materialize, due candidates become tasks straight away;
    otherwise they are recorded as pending for the family to confirm.
    Candidates not yet open, or too far past their deadline, count as skipped;
    in pending mode any candidate already past its deadline is skipped.
    """
    household = _require_household(household_id)
    as_of = as_of or household_today(household)
    if auto_materialize is None:
        auto_materialize = getattr(settings, 'GENERATION_AUTO_MATERIALIZE', True)

    report = _plan(household, as_of)
    # Overdue candidates are only backfilled as tasks: a pending row would expire before anyone saw it
    eligible = [c for c in report.candidates if _is_eligible(c, as_of, backfill=auto_materialize)]

    materializer = TaskMaterializer()
    if auto_materialize:
        result = materializer.materialize_batch(eligible)
    else:
        result = materializer.record_pending_batch(eligible)

    failures = [
        GenerationDetail(template_id=f.template_id, child_id=f.child_id, success=False, error=f.error)
        for f in report.failures
    ]
    result = replace(
        result,
        skipped=result.skipped + len(report.candidates) - len(eligible),
        errors=result.errors + len(failures),
        details=result.details + failures,
    )
    logger.info(
        f"Generation for household {household_id} on {as_of}: "
        f"generated={result.generated} skipped={result.skipped} errors={result.errors}"
    )
    return result


def _find_candidate(household: HouseholdDTO, generation_key: str, as_of: date) -> GenerationCandidate:
    """
    Candidate for a key, re-planned for `as_of`.

    A key recorded as pending on an earlier day may no longer come out of
    the plan; it is then rebuilt from its ledger row.
    """
    planner = get_planner()
    for candidate in _plan(household, as_of, planner).candidates:
        if candidate.generation_key == generation_key:
            return candidate

    entry = GenerationLedger().get_by_key(generation_key)
    if entry is None or entry.household_id != household.id:
        raise ValueError(f"Unknown generation key: {generation_key}")
    template = planner.resolve_template(entry.template_id, household.country, household.locale)
    child = household_services.get_child(entry.child_id)
    if template is None or child is None:
        raise ValueError(f"Generation key {generation_key} no longer matches the catalog")
    overrides = household_services.get_template_settings(household.id)
    return planner.build_candidate(template, child, entry.deadline, as_of, overrides.get(template.id))


def confirm_candidate(household_id: UUID, generation_key: str, as_of: Optional[date] = None) -> MaterializeResult:
    """Create the task for a candidate the family accepted."""
    household = _require_household(household_id)
    candidate = _find_candidate(household, generation_key, as_of or household_today(household))
    return TaskMaterializer().materialize(candidate)


def skip_candidate(
    household_id: UUID,
    generation_key: str,
    actor_id: Optional[int] = None,
    as_of: Optional[date] = None,
) -> SkipResult:
    """Record that the family declined a candidate."""
    household = _require_household(household_id)
    candidate = _find_candidate(household, generation_key, as_of or household_today(household))
    return TaskMaterializer().skip(candidate, actor_id)


# =============================================================================
# Scheduled runs
# =============================================================================

def sweep_households(as_of: Optional[date] = None) -> SweepResult:
    """
    Generate for every active household.

    Without `as_of`, each household runs on its own local date. A household
    that fails is logged and counted; the sweep carries on.
    """
    households = generated = skipped = errors = failed = 0
    for household in household_services.list_active_households():
        households += 1
        try:
            result = generate_for_household(household.id, as_of=as_of)
        except Exception as e:
            logger.exception(f"Generation sweep failed for household {household.id}: {e}")
            failed += 1
            continue
        generated += result.generated
        skipped += result.skipped
        errors += result.errors

    logger.info(f"Generation sweep: households={households} generated={generated} failed={failed}")
    return SweepResult(
        households=households,
        generated=generated,
        skipped=skipped,
        errors=errors,
        failed_households=failed,
    )


def expire_pending(as_of: Optional[date] = None) -> int:
    """
    Expire pending generations whose deadline has passed.

    Without `as_of`, each household is judged against its own local date.
    """
    ledger = GenerationLedger()
    expired = 0
    for household in household_services.list_active_households():
        expired += ledger.expire_overdue(as_of or household_today(household), household_id=household.id)
    return expired
