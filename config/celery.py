"""
Celery configuration for Tasknest project.
"""
import os
from celery import Celery
from celery.schedules import crontab

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

app = Celery('config')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()

# Celery Beat Schedule
app.conf.beat_schedule = {
    'sweep-households': {
        'task': 'apps.generation.tasks.sweep_households',
        'schedule': crontab(hour='3', minute='0'),
    },
    'expire-pending-generations': {
        'task': 'apps.generation.tasks.expire_pending_generations',
        'schedule': crontab(minute='15'),  # Every hour
    },
    'process-completed-recurring-tasks': {
        'task': 'apps.household_tasks.tasks.process_completed_recurring_tasks',
        'schedule': crontab(minute='*/30'),
    },
}
