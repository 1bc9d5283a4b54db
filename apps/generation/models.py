import uuid
from django.db import models


class GenerationStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    CREATED = 'created', 'Created'
    SKIPPED = 'skipped', 'Skipped'
    EXPIRED = 'expired', 'Expired'


class GeneratedTask(models.Model):
    """
    Ledger of catalog generations, one row per template, child and deadline.

    The unique generation_key is what keeps concurrent generation runs from
    creating the same task twice. Created, skipped and expired are terminal.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    household_id = models.UUIDField(db_index=True)  # No FK - modular boundary
    child_id = models.UUIDField(db_index=True)
    template_id = models.CharField(max_length=100)
    task_id = models.UUIDField(null=True, blank=True, help_text="Set once the task row exists")

    deadline = models.DateField()
    generation_key = models.CharField(max_length=255, unique=True)
    status = models.CharField(
        max_length=10,
        choices=GenerationStatus.choices,
        default=GenerationStatus.PENDING,
    )

    acknowledged = models.BooleanField(default=False)
    acknowledged_at = models.DateTimeField(null=True, blank=True)
    acknowledged_by_id = models.IntegerField(null=True, blank=True)

    generated_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['deadline', 'template_id']
        indexes = [
            models.Index(fields=['household_id', 'status'], name='generation__househo_3a9d2b_idx'),
            models.Index(fields=['status', 'deadline'], name='generation__status_5e8c41_idx'),
        ]

    def __str__(self):
        return f"{self.generation_key} ({self.status})"
