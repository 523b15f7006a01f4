import logging

from celery import current_app
from django.conf import settings
from django.core.cache import cache
from django.db import connection
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

logger = logging.getLogger(__name__)


@api_view(["GET"])
@permission_classes([AllowAny])
def health_check(request):
    """
    Health check endpoint for monitoring: database, cache and Celery workers.
    """
    checks = {}

    try:
        connection.ensure_connection()
        checks["database"] = "ok"
    except Exception as exc:
        logger.error("Health check database failure: %s", exc)
        checks["database"] = "error"

    try:
        cache.set("pulsezen:health_check", "ok", 10)
        checks["cache"] = "ok" if cache.get("pulsezen:health_check") == "ok" else "error"
    except Exception as exc:
        logger.error("Health check cache failure: %s", exc)
        checks["cache"] = "error"

    broker_url = (getattr(settings, "CELERY_BROKER_URL", "") or "").strip()
    if not broker_url or broker_url.startswith("memory://"):
        checks["celery"] = "not configured"
    else:
        try:
            inspector = current_app.control.inspect(timeout=1)
            stats = inspector.stats() if inspector else None
            checks["celery"] = "ok" if stats else "no workers"
        except Exception as exc:
            logger.error("Health check celery failure: %s", exc)
            checks["celery"] = "error"

    healthy = all(value == "ok" for value in checks.values())
    return Response(
        {
            "success": healthy,
            "data": {"status": "healthy" if healthy else "degraded", "checks": checks},
        },
        status=200 if healthy else 503,
    )
