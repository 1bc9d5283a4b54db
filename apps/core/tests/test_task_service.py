"""
Tests for the background job facade and its backends.
"""
import os
from unittest import mock
from uuid import uuid4
from django.test import SimpleTestCase, TestCase

from apps.core.backends.celery_backend import CeleryTaskService
from apps.core.task_service import TaskService
from apps.generation.dtos import SweepResult
from apps.household_tasks.dtos import RecurringProcessResult


@mock.patch.dict(os.environ, {'TASK_BACKEND': 'local'})
class LocalBackendTest(TestCase):
    """The local backend runs the registered handler inline."""

    def test_sweep_runs_handler(self):
        with mock.patch('apps.generation.services.sweep_households', return_value=SweepResult(households=2)) as sweep:
            job_id = TaskService.sweep_households()
        sweep.assert_called_once_with()
        self.assertTrue(job_id)

    def test_generate_passes_household_id(self):
        household_id = uuid4()
        with mock.patch('apps.generation.services.generate_for_household') as generate:
            TaskService.generate_for_household(household_id)
        generate.assert_called_once_with(household_id)

    def test_handler_errors_propagate(self):
        with self.assertRaises(ValueError):
            TaskService.generate_for_household(uuid4())

    def test_recurring_processing(self):
        with mock.patch(
            'apps.household_tasks.services.process_completed_recurring_tasks',
            return_value=RecurringProcessResult(processed=1, generated=1),
        ) as process:
            TaskService.process_completed_recurring_tasks()
        process.assert_called_once_with()


class UnknownBackendTest(SimpleTestCase):

    @mock.patch.dict(os.environ, {'TASK_BACKEND': 'carrier-pigeon'})
    def test_unknown_backend(self):
        with self.assertRaises(ValueError):
            TaskService.expire_pending_generations()


class CeleryBackendTest(SimpleTestCase):
    """The celery backend only queues; nothing runs in-process."""

    def test_generate_sends_household_arg(self):
        task = mock.Mock()
        with mock.patch('apps.core.backends.celery_backend._get_celery_task', return_value=task):
            job_id = CeleryTaskService().send_task('generate_for_household', {'household_id': 'abc'})
        task.apply_async.assert_called_once_with(args=['abc'], task_id=job_id)

    def test_countdown(self):
        task = mock.Mock()
        with mock.patch('apps.core.backends.celery_backend._get_celery_task', return_value=task):
            job_id = CeleryTaskService().send_task('sweep_households', {}, delay_seconds=60)
        task.apply_async.assert_called_once_with(args=[], countdown=60, task_id=job_id)

    def test_missing_task(self):
        with mock.patch('apps.core.backends.celery_backend._get_celery_task', return_value=None):
            with self.assertRaises(ValueError):
                CeleryTaskService().send_task('sweep_households', {})

    def test_unmapped_task_name(self):
        with self.assertRaises(ValueError):
            CeleryTaskService().send_task('reticulate_splines', {})
