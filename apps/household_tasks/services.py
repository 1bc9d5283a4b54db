"""
Service layer for Household Tasks app.
Task rows and user-defined recurring series.
"""
import logging
import uuid
from datetime import date, datetime
from typing import List, Optional, Tuple
from uuid import UUID

from django.db import IntegrityError, transaction
from django.db.models import Exists, OuterRef
from django.utils import timezone

from apps.recurrence.dtos import coerce_rule
from apps.recurrence.services import next_occurrence
from .dtos import RecurringProcessResult, TaskDTO
from .models import Task, TaskPriority, TaskSource, TaskStatus

logger = logging.getLogger(__name__)


def _to_dto(task: Task) -> TaskDTO:
    return TaskDTO(
        id=task.id,
        household_id=task.household_id,
        title=task.title,
        status=task.status,
        source=task.source,
        deadline=task.deadline,
        child_id=task.child_id,
        category=task.category,
        priority=task.priority,
        load_weight=task.load_weight,
        is_critical=task.is_critical,
        template_id=task.template_id,
        generation_key=task.generation_key,
        recurrence_rule=task.recurrence_rule,
        series_id=task.series_id,
        parent_task_id=task.parent_task_id,
        completed_at=task.completed_at,
        series_ended_at=task.series_ended_at,
    )


def create_task_record(
    household_id: UUID,
    title: str,
    *,
    deadline: Optional[date] = None,
    child_id: Optional[UUID] = None,
    description: str = "",
    category: str = "",
    priority: str = TaskPriority.MEDIUM,
    load_weight: int = 1,
    is_critical: bool = False,
    source: str = TaskSource.MANUAL,
    template_id: Optional[str] = None,
    generation_key: Optional[str] = None,
    recurrence_rule: Optional[dict] = None,
    series_id: Optional[UUID] = None,
    parent_task_id: Optional[UUID] = None,
    created_by_id: Optional[int] = None,
) -> TaskDTO:
    """
    Insert one task row.

    Runs inside the caller's transaction when there is one; the
    materializer relies on this to commit task and ledger row together.
    """
    if not title:
        raise ValueError("Task title is required")
    if priority not in TaskPriority.values:
        raise ValueError(f"Invalid priority: {priority}")

    task = Task.objects.create(
        household_id=household_id,
        child_id=child_id,
        title=title[:200],
        description=description or "",
        category=category or "",
        deadline=deadline,
        priority=priority,
        load_weight=load_weight,
        is_critical=is_critical,
        source=source,
        template_id=template_id,
        generation_key=generation_key,
        recurrence_rule=recurrence_rule,
        series_id=series_id,
        parent_task_id=parent_task_id,
        created_by_id=created_by_id,
    )
    return _to_dto(task)


def get_task(task_id: UUID) -> Optional[TaskDTO]:
    task = Task.objects.filter(id=task_id).first()
    return _to_dto(task) if task else None


# =============================================================================
# Recurring series
# =============================================================================

def create_recurring_task(
    household_id: UUID,
    title: str,
    rule,
    deadline: date,
    **fields,
) -> Tuple[TaskDTO, UUID]:
    """
    Create the first task of a recurring series.

    Returns the task and the new series id. Raises RecurrenceValidationError
    for an invalid rule before anything is written.
    """
    rule = coerce_rule(rule)
    if rule is None:
        raise ValueError("A recurrence rule is required")

    series_id = uuid.uuid4()
    task = create_task_record(
        household_id,
        title,
        deadline=deadline,
        recurrence_rule=rule.to_dict(),
        series_id=series_id,
        **fields,
    )
    logger.info(f"Recurring series {series_id} created for household {household_id}")
    return task, series_id


def complete_task(task_id: UUID, completed_at: Optional[datetime] = None, generate_next: bool = True) -> Optional[TaskDTO]:
    """
    Mark a task done. For a recurring task, the next occurrence is created
    straight away unless `generate_next` is False.

    Returns the next occurrence, if one was created.
    """
    with transaction.atomic():
        task = Task.objects.select_for_update().filter(id=task_id).first()
        if task is None:
            raise ValueError(f"Task {task_id} not found")
        if task.status == TaskStatus.CANCELLED:
            raise ValueError("Cannot complete a cancelled task")
        if task.status != TaskStatus.DONE:
            task.status = TaskStatus.DONE
            task.completed_at = completed_at or timezone.now()
            task.save(update_fields=['status', 'completed_at', 'updated_at'])

    if generate_next and task.recurrence_rule:
        return generate_next_occurrence(task.id)
    return None


def _has_follow_up(task_id: UUID) -> bool:
    return Task.objects.filter(parent_task_id=task_id).exists()


def _mark_series_ended(task: Task):
    Task.objects.filter(id=task.id, series_ended_at__isnull=True).update(
        series_ended_at=timezone.now(),
        updated_at=timezone.now(),
    )


def generate_next_occurrence(completed_task_id: UUID) -> Optional[TaskDTO]:
    """
    Create the task following a completed occurrence of its series.

    The next date is computed after the later of the task's deadline and its
    completion date. Returns None when the series is exhausted (end date or
    count reached) or when the follow-up already exists.

    The unique constraint on parent_task_id decides between concurrent
    callers: the loser's insert fails and is reported as already generated.
    An exhausted series is stamped with series_ended_at so the periodic
    catch-up stops selecting it.
    """
    completed = Task.objects.filter(id=completed_task_id).first()
    if completed is None or not completed.recurrence_rule:
        return None

    rule = coerce_rule(completed.recurrence_rule)
    reference = timezone.localdate(completed.completed_at) if completed.completed_at else timezone.localdate()
    if completed.deadline and completed.deadline > reference:
        reference = completed.deadline

    next_date = next_occurrence(rule, reference)
    if next_date is None:
        logger.info(f"Series {completed.series_id} has ended after task {completed.id}")
        _mark_series_ended(completed)
        return None

    with transaction.atomic():
        if completed.series_id:
            # Serialises count checks within the series
            list(Task.objects.select_for_update().filter(series_id=completed.series_id).values_list('id', flat=True))
        if _has_follow_up(completed.id):
            return None
        if rule.count is not None and completed.series_id:
            existing = Task.objects.filter(series_id=completed.series_id).count()
            if existing >= rule.count:
                logger.info(f"Series {completed.series_id} reached its count of {rule.count}")
                _mark_series_ended(completed)
                return None

        try:
            with transaction.atomic():
                next_task = create_task_record(
                    completed.household_id,
                    completed.title,
                    deadline=next_date,
                    child_id=completed.child_id,
                    description=completed.description,
                    category=completed.category,
                    priority=completed.priority,
                    load_weight=completed.load_weight,
                    is_critical=completed.is_critical,
                    source=TaskSource.RECURRENCE,
                    template_id=completed.template_id,
                    recurrence_rule=completed.recurrence_rule,
                    series_id=completed.series_id,
                    parent_task_id=completed.id,
                    created_by_id=completed.created_by_id,
                )
        except IntegrityError:
            logger.info(f"Follow-up of task {completed.id} was created concurrently")
            return None

    logger.info(f"Next occurrence {next_task.id} on {next_date} for series {completed.series_id}")
    return next_task


def process_completed_recurring_tasks() -> RecurringProcessResult:
    """Create missing follow-ups for every completed recurring task whose series is still running."""
    follow_up = Task.objects.filter(parent_task_id=OuterRef('id'))
    completed_ids = list(
        Task.objects.filter(
            status=TaskStatus.DONE,
            recurrence_rule__isnull=False,
            series_id__isnull=False,
            series_ended_at__isnull=True,
        )
        .exclude(Exists(follow_up))
        .values_list('id', flat=True)
    )

    processed = generated = errors = 0
    for task_id in completed_ids:
        processed += 1
        try:
            if generate_next_occurrence(task_id):
                generated += 1
        except Exception as e:
            logger.exception(f"Error generating next occurrence for task {task_id}: {e}")
            errors += 1

    logger.info(f"Recurring tasks processed={processed} generated={generated} errors={errors}")
    return RecurringProcessResult(processed=processed, generated=generated, errors=errors)


def get_series_tasks(series_id: UUID) -> List[TaskDTO]:
    return [_to_dto(t) for t in Task.objects.filter(series_id=series_id).order_by('deadline', 'created_at')]


def get_recurring_tasks(household_id: UUID) -> List[TaskDTO]:
    """Pending tasks that belong to a recurring series."""
    tasks = Task.objects.filter(
        household_id=household_id,
        status=TaskStatus.PENDING,
        recurrence_rule__isnull=False,
    ).order_by('deadline')
    return [_to_dto(t) for t in tasks]


def cancel_series(series_id: UUID) -> int:
    """Cancel the pending occurrences of a series. Returns how many were cancelled."""
    cancelled = Task.objects.filter(series_id=series_id, status=TaskStatus.PENDING).update(
        status=TaskStatus.CANCELLED,
        updated_at=timezone.now(),
    )
    logger.info(f"Cancelled {cancelled} pending tasks of series {series_id}")
    return cancelled


def update_series_recurrence(series_id: UUID, rule) -> int:
    """Replace the rule on every task of the series. An ended series may resume under the new rule."""
    rule = coerce_rule(rule)
    if rule is None:
        raise ValueError("A recurrence rule is required")
    return Task.objects.filter(series_id=series_id).update(
        recurrence_rule=rule.to_dict(),
        series_ended_at=None,
        updated_at=timezone.now(),
    )
