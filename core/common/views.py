import logging

from django.db import connection
from django.conf import settings
from django.http import JsonResponse
from django.utils import timezone
import redis

logger = logging.getLogger(__name__)


def health_check(request):
    checks = {"db": False, "redis": False}

    try:
        with connection.cursor() as c:
            c.execute("SELECT 1")
        checks["db"] = True
    except Exception as e:
        logger.warning("Health check: database unavailable: %s", e)

    try:
        r = redis.Redis.from_url(settings.REDIS_URL, socket_connect_timeout=1, socket_timeout=1)
        r.ping()
        checks["redis"] = True
    except redis.RedisError as e:
        logger.warning("Health check: redis unavailable: %s", e)

    ok = all(checks.values())
    return JsonResponse(
        {"status": "ok" if ok else "degraded", "checks": checks, "timestamp": timezone.now().isoformat()},
        status=200 if ok else 503,
    )
