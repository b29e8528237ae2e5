import time
from typing import Any, Callable, Dict

import structlog
from django.core.cache import cache
from django.db import DatabaseError, connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone

logger = structlog.get_logger()

CACHE_PROBE_KEY = "_health_check"


def _probe_database() -> None:
    conn = connections["default"]
    conn.ensure_connection()
    with conn.cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()


def _probe_cache() -> None:
    cache.set(CACHE_PROBE_KEY, "ok", 10)
    if cache.get(CACHE_PROBE_KEY) != "ok":
        raise ConnectionError("Cache read failed")


def _timed(name: str, probe: Callable[[], None]) -> Dict[str, Any]:
    start = time.monotonic()
    try:
        probe()
    except (DatabaseError, ConnectionError, OSError) as exc:
        logger.error("health_check.probe_failed", service=name, error=str(exc))
        return {"status": "down"}
    return {
        "status": "up",
        "response_time_ms": round((time.monotonic() - start) * 1000, 2),
    }


def health_check(request: HttpRequest) -> JsonResponse:
    """Liveness probe for the database and the cache (Redis when configured)."""
    services = {
        "database": _timed("database", _probe_database),
        "cache": _timed("cache", _probe_cache),
    }
    healthy = all(s["status"] == "up" for s in services.values())

    logger.info(
        "health_check.completed", status="healthy" if healthy else "unhealthy"
    )
    return JsonResponse(
        {
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=200 if healthy else 503,
    )
