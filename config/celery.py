import os
from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.local")

app = Celery("leadintake")
app.config_from_object("django.conf:settings", namespace="CELERY")

app.conf.imports = (
    "core.imports.tasks",
)

app.autodiscover_tasks()
