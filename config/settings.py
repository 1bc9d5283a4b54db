"""
Django settings for Tasknest project.

Every deployment-specific value comes from the environment.
"""
import os
from pathlib import Path

from config.database import get_database_config

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.getenv('SECRET_KEY', 'django-insecure-dev-only-change-me')
DEBUG = os.getenv('DEBUG', 'false').lower() == 'true'
ALLOWED_HOSTS = [h.strip() for h in os.getenv('ALLOWED_HOSTS', 'localhost,127.0.0.1').split(',') if h.strip()]


# =============================================================================
# Applications
# =============================================================================

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    'apps.core',
    'apps.recurrence',
    'apps.catalog.apps.CatalogConfig',
    'apps.households',
    'apps.household_tasks',
    'apps.generation',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'config.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'config.wsgi.application'
ASGI_APPLICATION = 'config.asgi.application'

DATABASES = {
    'default': get_database_config(BASE_DIR),
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'


# =============================================================================
# Internationalization
# =============================================================================

LANGUAGE_CODE = 'fr'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'


# =============================================================================
# Task generation
# =============================================================================

# Days ahead shown in the upcoming task preview
GENERATION_LOOKAHEAD_DAYS = int(os.getenv('GENERATION_LOOKAHEAD_DAYS', '30'))
# How far past its deadline a due candidate is still generated
GENERATION_BACKFILL_DAYS = int(os.getenv('GENERATION_BACKFILL_DAYS', '30'))
GENERATION_DUE_SOON_DAYS = int(os.getenv('GENERATION_DUE_SOON_DAYS', '7'))
GENERATION_MILESTONE_LOOKAHEAD_MONTHS = int(os.getenv('GENERATION_MILESTONE_LOOKAHEAD_MONTHS', '2'))
# False: candidates are recorded as pending and wait for the family to confirm
GENERATION_AUTO_MATERIALIZE = os.getenv('GENERATION_AUTO_MATERIALIZE', 'true').lower() == 'true'

DEFAULT_HOUSEHOLD_COUNTRY = os.getenv('DEFAULT_HOUSEHOLD_COUNTRY', 'FR')
DEFAULT_HOUSEHOLD_TIMEZONE = os.getenv('DEFAULT_HOUSEHOLD_TIMEZONE', 'Europe/Paris')
DEFAULT_LOCALE = os.getenv('DEFAULT_LOCALE', 'fr')


# =============================================================================
# Background jobs
# =============================================================================

TASK_BACKEND = os.getenv('TASK_BACKEND', 'local')

CELERY_BROKER_URL = os.getenv('CELERY_BROKER_URL', 'redis://localhost:6379/0')
CELERY_RESULT_BACKEND = os.getenv('CELERY_RESULT_BACKEND', CELERY_BROKER_URL)
CELERY_ACCEPT_CONTENT = ['json']
CELERY_TASK_SERIALIZER = 'json'
CELERY_RESULT_SERIALIZER = 'json'
CELERY_TIMEZONE = TIME_ZONE


# =============================================================================
# Logging
# =============================================================================

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{asctime} {levelname} {name} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': LOG_LEVEL,
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': os.getenv('DJANGO_LOG_LEVEL', 'WARNING'),
            'propagate': False,
        },
        'apps': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
    },
}
