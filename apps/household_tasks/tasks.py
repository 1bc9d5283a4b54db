"""Celery tasks for Household Tasks app."""
from celery import shared_task
from . import services


@shared_task
def process_completed_recurring_tasks():
    """
    Run periodically to create the follow-up of completed recurring tasks
    that were closed without generating their next occurrence.
    """
    result = services.process_completed_recurring_tasks()
    return f"Processed {result.processed}, generated {result.generated}, errors {result.errors}"
