"""
Generation ledger repository.

The unique index on `generation_key` is the only lock between concurrent
generation runs (a scheduled sweep and a user confirming the same candidate,
for instance). Inserts run in a savepoint: the first to commit wins and every
other caller gets DuplicateGenerationDetected carrying the stored row.
"""
import logging
from datetime import date
from typing import Iterable, List, Optional, Set
from uuid import UUID

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Count, Q
from django.utils import timezone

from apps.core.exceptions import DuplicateGenerationDetected, PersistenceError
from .dtos import GenerationCandidate, HouseholdGenerationStats, LedgerEntryDTO, LedgerInsert
from .models import GeneratedTask, GenerationStatus

logger = logging.getLogger(__name__)


def to_dto(entry: GeneratedTask) -> LedgerEntryDTO:
    return LedgerEntryDTO(
        id=entry.id,
        household_id=entry.household_id,
        child_id=entry.child_id,
        template_id=entry.template_id,
        deadline=entry.deadline,
        generation_key=entry.generation_key,
        status=entry.status,
        task_id=entry.task_id,
        acknowledged=entry.acknowledged,
        acknowledged_at=entry.acknowledged_at,
        acknowledged_by_id=entry.acknowledged_by_id,
    )


class GenerationLedger:
    """Reads and writes GeneratedTask rows."""

    def insert(
        self,
        candidate: GenerationCandidate,
        status: str,
        *,
        task_id: Optional[UUID] = None,
        actor_id: Optional[int] = None,
    ) -> GeneratedTask:
        """
        Insert the ledger row for a candidate.

        Raises:
            DuplicateGenerationDetected: the key is already recorded
            PersistenceError: any other storage failure
        """
        acknowledged = status == GenerationStatus.SKIPPED
        try:
            with transaction.atomic():
                return GeneratedTask.objects.create(
                    household_id=candidate.household_id,
                    child_id=candidate.child_id,
                    template_id=candidate.template_id,
                    task_id=task_id,
                    deadline=candidate.deadline,
                    generation_key=candidate.generation_key,
                    status=status,
                    acknowledged=acknowledged,
                    acknowledged_at=timezone.now() if acknowledged else None,
                    acknowledged_by_id=actor_id if acknowledged else None,
                )
        except IntegrityError as e:
            existing = self.get_by_key(candidate.generation_key)
            if existing is None:
                raise PersistenceError(f"Could not record {candidate.generation_key}: {e}") from e
            raise DuplicateGenerationDetected(existing) from None
        except DatabaseError as e:
            raise PersistenceError(f"Could not record {candidate.generation_key}: {e}") from e

    def insert_if_absent(self, candidate: GenerationCandidate, status: str) -> LedgerInsert:
        """Insert unless the key exists; `created` tells which happened."""
        try:
            entry = self.insert(candidate, status)
        except DuplicateGenerationDetected as dup:
            return LedgerInsert(entry=to_dto(dup.existing), created=False)
        return LedgerInsert(entry=to_dto(entry), created=True)

    def get_by_key(self, generation_key: str) -> Optional[GeneratedTask]:
        return GeneratedTask.objects.filter(generation_key=generation_key).first()

    def lock(self, entry_id: UUID) -> GeneratedTask:
        """Row lock; must be called inside a transaction."""
        return GeneratedTask.objects.select_for_update().get(id=entry_id)

    def existing_keys(self, keys: Iterable[str], statuses: Optional[Iterable[str]] = None) -> Set[str]:
        keys = list(keys)
        if not keys:
            return set()
        rows = GeneratedTask.objects.filter(generation_key__in=keys)
        if statuses is not None:
            rows = rows.filter(status__in=list(statuses))
        return set(rows.values_list('generation_key', flat=True))

    def pending_for_household(self, household_id: UUID) -> List[LedgerEntryDTO]:
        rows = GeneratedTask.objects.filter(household_id=household_id, status=GenerationStatus.PENDING)
        return [to_dto(row) for row in rows]

    def expire_overdue(self, as_of: date, household_id: Optional[UUID] = None) -> int:
        """Pending, unacknowledged rows whose deadline is before `as_of` become expired."""
        rows = GeneratedTask.objects.filter(
            status=GenerationStatus.PENDING,
            acknowledged=False,
            deadline__lt=as_of,
        )
        if household_id is not None:
            rows = rows.filter(household_id=household_id)
        count = rows.update(status=GenerationStatus.EXPIRED, updated_at=timezone.now())
        if count:
            logger.info(f"Expired {count} pending generations with deadline before {as_of}")
        return count

    def pending_template_ids(self, household_id: UUID) -> Set[str]:
        rows = GeneratedTask.objects.filter(household_id=household_id, status=GenerationStatus.PENDING)
        return set(rows.values_list('template_id', flat=True).distinct())

    def stats_for_household(
        self,
        household_id: UUID,
        due_soon_until: date,
        critical_template_ids: Iterable[str] = (),
    ) -> HouseholdGenerationStats:
        """
        Counts by status in one query.

        Pending rows with a deadline on or before `due_soon_until` are due
        soon (overdue ones included); pending rows of a critical template are
        critical.
        """
        pending = Q(status=GenerationStatus.PENDING)
        critical_ids = list(critical_template_ids)
        aggregates = {
            'total': Count('id'),
            'pending': Count('id', filter=pending),
            'created': Count('id', filter=Q(status=GenerationStatus.CREATED)),
            'skipped': Count('id', filter=Q(status=GenerationStatus.SKIPPED)),
            'expired': Count('id', filter=Q(status=GenerationStatus.EXPIRED)),
            'due_soon': Count('id', filter=pending & Q(deadline__lte=due_soon_until)),
        }
        # An empty __in cannot be compiled inside an aggregate filter
        if critical_ids:
            aggregates['critical'] = Count('id', filter=pending & Q(template_id__in=critical_ids))
        counts = GeneratedTask.objects.filter(household_id=household_id).aggregate(**aggregates)
        return HouseholdGenerationStats(**counts)
