"""
Celery Task Backend - Async execution via Celery + Redis.

Usage:
    Set TASK_BACKEND=celery in your .env file.
    Requires Redis and Celery worker running.
"""

import uuid
import logging
from typing import Any, Dict
from apps.core.task_service import TaskServiceInterface

logger = logging.getLogger(__name__)


# Map task names to Celery task functions
TASK_MAP = {
    "sweep_households": "apps.generation.tasks.sweep_households",
    "generate_for_household": "apps.generation.tasks.generate_for_household",
    "expire_pending_generations": "apps.generation.tasks.expire_pending_generations",
    "process_completed_recurring_tasks": "apps.household_tasks.tasks.process_completed_recurring_tasks",
}


def _get_celery_task(task_name: str):
    """Get the Celery task function for a task name."""
    task_path = TASK_MAP.get(task_name)
    if not task_path:
        raise ValueError(f"No Celery task mapped for: {task_name}")

    from celery import current_app
    return current_app.tasks.get(task_path)


class CeleryTaskService(TaskServiceInterface):
    """Execute jobs via Celery + Redis."""

    def send_task(
        self,
        task_name: str,
        payload: Dict[str, Any],
        delay_seconds: int = 0,
    ) -> str:
        """Queue task via Celery."""
        task_id = str(uuid.uuid4())

        logger.info(f"[CELERY] Queueing task {task_name} (id={task_id})")

        task = _get_celery_task(task_name)

        if task is None:
            logger.error(f"[CELERY] Task not found: {task_name}")
            raise ValueError(f"Celery task not found: {task_name}")

        if task_name == "generate_for_household":
            args = [payload.get("household_id")]
        else:
            args = []

        if delay_seconds > 0:
            task.apply_async(args=args, countdown=delay_seconds, task_id=task_id)
        else:
            task.apply_async(args=args, task_id=task_id)

        return task_id
