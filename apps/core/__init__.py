"""
Core app - Shared abstractions and utilities.

This app provides:
- Background job execution (TaskService) with local and Celery backends
- Calendar-date helpers used by recurrence and generation
- The engine's error taxonomy

Switch backends with TASK_BACKEND:
- local: sync execution (development, tests)
- celery: Celery + Redis workers
"""
