import os
from celery import Celery

# -------------------------------------------------------------------
# Django settings
# -------------------------------------------------------------------
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

# -------------------------------------------------------------------
# Celery app
# -------------------------------------------------------------------
app = Celery("config")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
