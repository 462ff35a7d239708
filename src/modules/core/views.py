import time
from typing import Any, Dict

import structlog
from django.conf import settings
from django.http import HttpRequest, JsonResponse
from django.utils import timezone

from modules.core.store.factory import get_store_client

logger = structlog.get_logger(__name__)


def health_check(request: HttpRequest) -> JsonResponse:
    """Report whether every table the API depends on answers."""
    tables: Dict[str, Dict[str, Any]] = {}
    overall_healthy = True

    for table_name in (settings.CUSTOMERS_TABLE, settings.ADDRESSES_TABLE):
        try:
            start = time.monotonic()
            get_store_client(table_name).ping()
            tables[table_name] = {
                "status": "up",
                "response_time_ms": round((time.monotonic() - start) * 1000, 2),
            }
        except Exception as exc:
            tables[table_name] = {"status": "down"}
            overall_healthy = False
            logger.error("health_check.table_down", table=table_name, error=str(exc))

    status_code = 200 if overall_healthy else 503

    logger.info(
        "health_check.completed", status="healthy" if overall_healthy else "unhealthy"
    )

    return JsonResponse(
        {
            "status": "healthy" if overall_healthy else "unhealthy",
            "timestamp": timezone.now().isoformat(),
            "store_backend": settings.STORE_BACKEND,
            "tables": tables,
        },
        status=status_code,
    )
