"""
TaskService - Abstraction layer for background job execution.

This module provides a platform-agnostic interface for running the
generation jobs. The actual backend is determined by the TASK_BACKEND
environment variable.

Usage:
    from apps.core.task_service import TaskService

    # Generate due catalog tasks for one household
    TaskService.generate_for_household(household_id=uuid)

    # Run the daily sweep
    TaskService.sweep_households()

Environment Configuration:
    TASK_BACKEND=local   # Sync execution (development, tests)
    TASK_BACKEND=celery  # Celery + Redis
"""

import os
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict
from uuid import UUID

logger = logging.getLogger(__name__)


class TaskServiceInterface(ABC):
    """
    Abstract interface for background job execution.

    Implementations:
    - LocalTaskService: Sync execution for development/testing
    - CeleryTaskService: Celery + Redis
    """

    @abstractmethod
    def send_task(
        self,
        task_name: str,
        payload: Dict[str, Any],
        delay_seconds: int = 0,
    ) -> str:
        """
        Queue a job for execution.

        Args:
            task_name: Identifier for the job handler
            payload: Data to pass to the job
            delay_seconds: Delay before execution (0 = immediate)

        Returns:
            Task ID for tracking
        """
        pass


def _get_backend() -> TaskServiceInterface:
    """Get the configured task backend based on TASK_BACKEND env var."""
    backend = os.getenv('TASK_BACKEND', 'local')

    if backend == 'local':
        from apps.core.backends.local_backend import LocalTaskService
        return LocalTaskService()
    elif backend == 'celery':
        from apps.core.backends.celery_backend import CeleryTaskService
        return CeleryTaskService()
    else:
        raise ValueError(f"Unknown TASK_BACKEND: {backend}")


class TaskService:
    """
    Facade for sending background jobs.

    This class provides static methods for each job type,
    delegating to the configured backend.
    """

    @staticmethod
    def sweep_households() -> str:
        """
        Queue generation for every active household.

        Used by: generate_tasks --queue. Celery beat runs the task directly.
        """
        logger.info("Queueing sweep_households task")
        return _get_backend().send_task(
            task_name="sweep_households",
            payload={}
        )

    @staticmethod
    def generate_for_household(household_id: UUID) -> str:
        """
        Queue generation for a single household.

        Used by: seed and generate_tasks --queue, after a household changes.
        """
        logger.info(f"Queueing generate_for_household task for household {household_id}")
        return _get_backend().send_task(
            task_name="generate_for_household",
            payload={"household_id": str(household_id)}
        )

    @staticmethod
    def expire_pending_generations() -> str:
        """Queue expiry of pending generations past their deadline."""
        logger.info("Queueing expire_pending_generations task")
        return _get_backend().send_task(
            task_name="expire_pending_generations",
            payload={}
        )

    @staticmethod
    def process_completed_recurring_tasks() -> str:
        """Queue creation of missing follow-ups for completed recurring tasks."""
        logger.info("Queueing process_completed_recurring_tasks task")
        return _get_backend().send_task(
            task_name="process_completed_recurring_tasks",
            payload={}
        )
