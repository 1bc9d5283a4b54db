"""Celery tasks for Generation app."""
from uuid import UUID
from celery import shared_task
import logging

from . import services

logger = logging.getLogger(__name__)


@shared_task
def sweep_households():
    """
    Daily run: generate due catalog tasks for every active household,
    each on its own local date.
    """
    result = services.sweep_households()
    return (
        f"Swept {result.households} households: generated {result.generated}, "
        f"errors {result.errors}, failed households {result.failed_households}"
    )


@shared_task
def generate_for_household(household_id):
    """Generation for one household, e.g. right after a child is added."""
    try:
        result = services.generate_for_household(UUID(str(household_id)))
    except ValueError as e:
        logger.error(f"Generation skipped for household {household_id}: {e}")
        return
    return f"Generated {result.generated}, skipped {result.skipped}, errors {result.errors}"


@shared_task
def expire_pending_generations():
    """Hourly run: expire pending generations whose deadline has passed."""
    count = services.expire_pending()
    return f"Expired {count} pending generations"
