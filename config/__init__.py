"""Django project package for the campus room booking service.

Holds the settings modules for each environment, the URL root, the
Celery application and the WSGI/ASGI entry points.
"""

# Load the Celery application with Django so that @shared_task
# functions bind to it.
from .celery import app as celery_app  # noqa: F401
