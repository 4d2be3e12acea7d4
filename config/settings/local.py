from .base import *  # noqa

DEBUG = True
ALLOWED_HOSTS = ["*"]

LOGGING["loggers"]["core"]["level"] = "DEBUG"
