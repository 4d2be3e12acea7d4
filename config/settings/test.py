import os

from .base import *  # noqa

DEBUG = False
PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

if os.getenv("TEST_DB_ENGINE", "sqlite") == "postgres":
    DATABASES["default"]["NAME"] = "leadintake_test"
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": ":memory:",
        }
    }

DEFAULT_PARTNER_ID = None

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True

LOGGING["loggers"]["core"]["level"] = "WARNING"
