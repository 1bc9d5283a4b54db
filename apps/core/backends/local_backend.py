"""
Local Task Backend - Synchronous execution for development.

This backend executes jobs immediately in the same process.
No Redis or external dependencies required.

Usage:
    Set TASK_BACKEND=local in your .env file.
"""

import uuid
import logging
from typing import Any, Dict
from apps.core.task_service import TaskServiceInterface

logger = logging.getLogger(__name__)


# Task handler registry - maps task names to handler functions
TASK_HANDLERS = {}


def register_handler(task_name: str):
    """Decorator to register a task handler."""
    def decorator(func):
        TASK_HANDLERS[task_name] = func
        return func
    return decorator


class LocalTaskService(TaskServiceInterface):
    """
    Execute jobs synchronously in the same process.

    Used for local development and tests. Jobs run in the same request
    cycle, so they block the response.
    """

    def send_task(
        self,
        task_name: str,
        payload: Dict[str, Any],
        delay_seconds: int = 0,
    ) -> str:
        """Execute task synchronously."""
        task_id = str(uuid.uuid4())

        logger.info(f"[LOCAL] Executing task {task_name} (id={task_id})")

        if delay_seconds > 0:
            logger.warning(
                f"[LOCAL] delay_seconds={delay_seconds} ignored in local backend"
            )

        handler = TASK_HANDLERS.get(task_name)
        if handler:
            try:
                result = handler(**payload)
                logger.info(f"[LOCAL] Task {task_name} completed: {result}")
            except Exception as e:
                logger.exception(f"[LOCAL] Task {task_name} failed: {e}")
                raise
        else:
            logger.warning(f"[LOCAL] No handler registered for task: {task_name}")

        return task_id


# =============================================================================
# Task Handlers - Import and register actual job implementations
# =============================================================================

@register_handler("sweep_households")
def handle_sweep_households():
    from apps.generation import services
    result = services.sweep_households()
    return f"Swept {result.households} households, generated {result.generated}"


@register_handler("generate_for_household")
def handle_generate_for_household(household_id: str):
    from uuid import UUID
    from apps.generation import services
    result = services.generate_for_household(UUID(household_id))
    return f"Generated {result.generated}, skipped {result.skipped}, errors {result.errors}"


@register_handler("expire_pending_generations")
def handle_expire_pending_generations():
    from apps.generation import services
    count = services.expire_pending()
    return f"Expired {count} pending generations"


@register_handler("process_completed_recurring_tasks")
def handle_process_completed_recurring_tasks():
    from apps.household_tasks import services
    result = services.process_completed_recurring_tasks()
    return f"Processed {result.processed}, generated {result.generated}"
