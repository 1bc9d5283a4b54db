"""
Task materializer.

Turns candidates into a ledger row plus a task row, committed together.
A key that is already in the ledger is a normal outcome: the stored row
is reported back and no second task is created.
"""
import logging
from typing import Iterable, Optional

from django.db import DatabaseError, transaction
from django.utils import timezone

from apps.core.exceptions import DuplicateGenerationDetected, PersistenceError
from apps.household_tasks.models import TaskSource
from apps.household_tasks.services import create_task_record
from .dtos import (
    GenerationCandidate, GenerationDetail, MaterializeResult,
    SkipResult, TaskGenerationResult,
)
from .ledger import GenerationLedger
from .models import GeneratedTask, GenerationStatus

logger = logging.getLogger(__name__)


class TaskMaterializer:

    def __init__(self, ledger: Optional[GenerationLedger] = None):
        self.ledger = ledger or GenerationLedger()

    @staticmethod
    def _create_task(candidate: GenerationCandidate):
        template = candidate.template
        return create_task_record(
            candidate.household_id,
            template.title,
            deadline=candidate.deadline,
            child_id=candidate.child_id,
            description=template.description,
            category=template.category.value,
            priority=template.priority.value,
            load_weight=candidate.weight,
            is_critical=template.critical,
            source=TaskSource.CATALOG,
            template_id=template.id,
            generation_key=candidate.generation_key,
        )

    def _promote(self, existing: GeneratedTask, candidate: GenerationCandidate) -> MaterializeResult:
        entry = self.ledger.lock(existing.id)
        if entry.status != GenerationStatus.PENDING:
            return MaterializeResult(
                created=False,
                generation_key=entry.generation_key,
                status=entry.status,
                task_id=entry.task_id,
                entry_id=entry.id,
            )
        task = self._create_task(candidate)
        entry.task_id = task.id
        entry.status = GenerationStatus.CREATED
        entry.save(update_fields=['task_id', 'status', 'updated_at'])
        return MaterializeResult(
            created=True,
            generation_key=entry.generation_key,
            status=entry.status,
            task_id=task.id,
            entry_id=entry.id,
        )

    def materialize(self, candidate: GenerationCandidate) -> MaterializeResult:
        """
        Create the task for a candidate, at most once per generation key.

        A pending ledger row is promoted to created. Raises PersistenceError
        on storage failures; nothing is left half written.
        """
        try:
            with transaction.atomic():
                try:
                    entry = self.ledger.insert(candidate, GenerationStatus.CREATED)
                except DuplicateGenerationDetected as dup:
                    return self._promote(dup.existing, candidate)
                task = self._create_task(candidate)
                entry.task_id = task.id
                entry.save(update_fields=['task_id', 'updated_at'])
        except DatabaseError as e:
            raise PersistenceError(f"Could not materialize {candidate.generation_key}: {e}") from e

        logger.info(f"Materialized {candidate.generation_key} as task {task.id}")
        return MaterializeResult(
            created=True,
            generation_key=candidate.generation_key,
            status=entry.status,
            task_id=task.id,
            entry_id=entry.id,
        )

    def record_pending(self, candidate: GenerationCandidate):
        """Record a candidate awaiting confirmation. Returns a LedgerInsert."""
        return self.ledger.insert_if_absent(candidate, GenerationStatus.PENDING)

    def skip(self, candidate: GenerationCandidate, actor_id: Optional[int] = None) -> SkipResult:
        """
        Record that the family declined a candidate.

        Raises:
            ValueError: the template is critical and cannot be skipped
        """
        if not candidate.can_skip:
            raise ValueError(f"Task {candidate.template.title} is mandatory and cannot be skipped")

        try:
            with transaction.atomic():
                try:
                    entry = self.ledger.insert(candidate, GenerationStatus.SKIPPED, actor_id=actor_id)
                except DuplicateGenerationDetected as dup:
                    entry = self.ledger.lock(dup.existing.id)
                    if entry.status != GenerationStatus.PENDING:
                        return SkipResult(
                            skipped=False,
                            generation_key=entry.generation_key,
                            status=entry.status,
                            entry_id=entry.id,
                        )
                    entry.status = GenerationStatus.SKIPPED
                    entry.acknowledged = True
                    entry.acknowledged_at = timezone.now()
                    entry.acknowledged_by_id = actor_id
                    entry.save(update_fields=[
                        'status', 'acknowledged', 'acknowledged_at', 'acknowledged_by_id', 'updated_at',
                    ])
        except DatabaseError as e:
            raise PersistenceError(f"Could not skip {candidate.generation_key}: {e}") from e

        logger.info(f"Skipped {candidate.generation_key} (actor={actor_id})")
        return SkipResult(
            skipped=True,
            generation_key=entry.generation_key,
            status=entry.status,
            entry_id=entry.id,
        )

    # =========================================================================
    # Batches
    # =========================================================================

    def materialize_batch(self, candidates: Iterable[GenerationCandidate]) -> TaskGenerationResult:
        """Materialize each candidate; already generated keys count as skipped."""
        return self._run_batch(candidates, lambda c: self.materialize(c).created)

    def record_pending_batch(self, candidates: Iterable[GenerationCandidate]) -> TaskGenerationResult:
        """Record each candidate as pending; keys already in the ledger count as skipped."""
        return self._run_batch(candidates, lambda c: self.record_pending(c).created)

    @staticmethod
    def _run_batch(candidates, action) -> TaskGenerationResult:
        generated = skipped = errors = 0
        details = []
        for candidate in candidates:
            try:
                created = action(candidate)
            except PersistenceError as e:
                logger.exception(f"Generation failed for {candidate.generation_key}: {e}")
                errors += 1
                details.append(GenerationDetail(
                    template_id=candidate.template_id,
                    child_id=candidate.child_id,
                    success=False,
                    error=str(e),
                ))
                continue
            if created:
                generated += 1
            else:
                skipped += 1
            details.append(GenerationDetail(
                template_id=candidate.template_id,
                child_id=candidate.child_id,
                success=True,
                created=created,
            ))
        return TaskGenerationResult(generated=generated, skipped=skipped, errors=errors, details=details)
