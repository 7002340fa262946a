"""Test settings.

Celery runs tasks inline and outgoing email is kept in memory.
"""

from .base import *  # noqa: F401,F403

if DATABASES['default']['ENGINE'].endswith('sqlite3'):  # noqa: F405
    # File-backed so threads in TransactionTestCase share one test database
    DATABASES['default']['TEST'] = {'NAME': str(BASE_DIR / 'test_db.sqlite3')}  # noqa: F405

DEBUG = False

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = False
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

STORAGES = {
    'default': {
        'BACKEND': 'django.core.files.storage.InMemoryStorage',
    },
    'staticfiles': {
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}

LOGGING["handlers"]["console"]["level"] = "WARNING"  # noqa: F405
