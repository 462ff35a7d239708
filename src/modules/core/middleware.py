import re
import time
import uuid
from contextvars import ContextVar
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

REQUEST_ID_HEADER = "X-Request-ID"

# Ids are echoed into headers and every log line; anything else is replaced.
REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

logger = structlog.get_logger(__name__)


def resolve_request_id(raw: str | None) -> str:
    """Return ``raw`` when it is a usable request id, else a fresh UUID4."""
    if raw and REQUEST_ID_PATTERN.match(raw):
        return raw
    return str(uuid.uuid4())


def _elapsed_ms(started: float) -> float:
    return round((time.monotonic() - started) * 1000, 2)


class CorrelationIdMiddleware:
    """Tag every request, its log lines and its response with a correlation ID.

    The id comes from the ``X-Request-ID`` header when it is well formed,
    otherwise a UUID4 is generated.  The id, method and path are bound
    into structlog's context vars so Dao and store-client events logged
    while serving the request can be traced back to it.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = resolve_request_id(request.META.get("HTTP_X_REQUEST_ID"))
        correlation_id_var.set(cid)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            correlation_id=cid, method=request.method, path=request.path
        )
        started = time.monotonic()
        logger.info("request.started")

        try:
            response = self.get_response(request)
        except Exception:
            logger.exception("request.failed", duration_ms=_elapsed_ms(started))
            raise

        log = logger.warning if response.status_code >= 500 else logger.info
        log(
            "request.finished",
            status_code=response.status_code,
            duration_ms=_elapsed_ms(started),
        )

        response[REQUEST_ID_HEADER] = cid
        return response
