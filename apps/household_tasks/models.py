import uuid
from django.db import models


class TaskStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    DONE = 'done', 'Done'
    CANCELLED = 'cancelled', 'Cancelled'


class TaskSource(models.TextChoices):
    MANUAL = 'manual', 'Manual'
    CATALOG = 'catalog', 'Catalog'
    RECURRENCE = 'recurrence', 'Recurrence'


class TaskPriority(models.TextChoices):
    CRITICAL = 'critical', 'Critical'
    HIGH = 'high', 'High'
    MEDIUM = 'medium', 'Medium'
    LOW = 'low', 'Low'


class Task(models.Model):
    """
    A household task. Written by users, by the catalog generator, or as the
    next occurrence of a recurring series.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    household_id = models.UUIDField(db_index=True)  # No FK - modular boundary
    child_id = models.UUIDField(null=True, blank=True, db_index=True)

    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=30, blank=True)
    deadline = models.DateField(null=True, blank=True)
    priority = models.CharField(max_length=10, choices=TaskPriority.choices, default=TaskPriority.MEDIUM)
    load_weight = models.PositiveSmallIntegerField(default=1)
    is_critical = models.BooleanField(default=False)

    status = models.CharField(max_length=10, choices=TaskStatus.choices, default=TaskStatus.PENDING)
    source = models.CharField(max_length=10, choices=TaskSource.choices, default=TaskSource.MANUAL)
    completed_at = models.DateTimeField(null=True, blank=True)

    # Catalog origin
    template_id = models.CharField(max_length=100, null=True, blank=True)
    generation_key = models.CharField(max_length=255, null=True, blank=True, db_index=True)

    # Recurring series
    recurrence_rule = models.JSONField(null=True, blank=True)
    series_id = models.UUIDField(null=True, blank=True, db_index=True)
    parent_task_id = models.UUIDField(null=True, blank=True, db_index=True)
    series_ended_at = models.DateTimeField(null=True, blank=True, help_text="Set once no follow-up will ever be created")

    created_by_id = models.IntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['deadline', 'created_at']
        indexes = [
            models.Index(fields=['household_id', 'status'], name='household_t_househo_7c1f0e_idx'),
        ]
        constraints = [
            # At most one follow-up per completed occurrence
            models.UniqueConstraint(
                fields=['parent_task_id'],
                condition=models.Q(parent_task_id__isnull=False),
                name='household_task_unique_follow_up',
            ),
        ]

    def __str__(self):
        return f"{self.title} ({self.deadline})"
