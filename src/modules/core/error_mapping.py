"""Mapping of failures to HTTP responses.

The HTTP response mapping to individual failure kinds::

    400 - InvalidInput, AddressInvalid, AddressNotSpecific
    404 - ObjectNotFound
    405 - MethodNotAllowed
    409 - ObjectExists
    500 - DataObjectError, anything unrecognized

``classify`` is the single translation point; it never raises, and
unrecognized failures get a generic message so internal details do not
leak to clients.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Type

import structlog
from django.http import Http404
from pydantic import ValidationError as PydanticValidationError
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response

from modules.core.exceptions import (
    AddressInvalid,
    AddressNotSpecific,
    DataObjectError,
    InvalidInput,
    MethodNotAllowed,
    ObjectExists,
    ObjectNotFound,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ErrorClassification:
    status_code: int
    message: str


UNCLASSIFIED = ErrorClassification(
    status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error!"
)

ERROR_TABLE: Dict[Type[BaseException], ErrorClassification] = {
    InvalidInput: ErrorClassification(status.HTTP_400_BAD_REQUEST, "Invalid Input"),
    ObjectNotFound: ErrorClassification(
        status.HTTP_404_NOT_FOUND,
        "Element for the provided id does not exist in the system",
    ),
    MethodNotAllowed: ErrorClassification(
        status.HTTP_405_METHOD_NOT_ALLOWED, "Method is not allowed"
    ),
    DataObjectError: ErrorClassification(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal System Failure"
    ),
    ObjectExists: ErrorClassification(status.HTTP_409_CONFLICT, "This id already exists"),
    AddressInvalid: ErrorClassification(
        status.HTTP_400_BAD_REQUEST, "Address provided is Invalid"
    ),
    AddressNotSpecific: ErrorClassification(
        status.HTTP_400_BAD_REQUEST, "Address is not specific enough"
    ),
}

# Framework failures that mean the same thing as one of our kinds.
FRAMEWORK_ALIASES: Dict[Type[BaseException], Type[BaseException]] = {
    PydanticValidationError: InvalidInput,
    drf_exceptions.ParseError: InvalidInput,
    drf_exceptions.ValidationError: InvalidInput,
    drf_exceptions.UnsupportedMediaType: InvalidInput,
    drf_exceptions.MethodNotAllowed: MethodNotAllowed,
    drf_exceptions.NotFound: ObjectNotFound,
    Http404: ObjectNotFound,
}


def classify(error: BaseException) -> ErrorClassification:
    """Return the ``(status_code, message)`` pair for ``error``.

    Walks the error's class hierarchy; the first class found in the table
    (directly or through a framework alias) wins.
    """
    for klass in type(error).__mro__:
        kind = FRAMEWORK_ALIASES.get(klass, klass)
        classification = ERROR_TABLE.get(kind)
        if classification is not None:
            return classification
    return UNCLASSIFIED


def send_http_response(callback: Callable[..., Any]) -> Callable[..., Any]:
    """Wrap a ``callback(error, body)`` completion with error classification.

    The returned handler calls ``callback(message)`` when given an error,
    and ``callback(None, body)`` otherwise.  Success bodies are forwarded
    untouched; the callback is invoked exactly once.
    """

    def handler(error: Optional[BaseException], body: Any = None) -> Any:
        if error is not None:
            classification = classify(error)
            logger.info(
                "error_mapping.classified",
                error_type=type(error).__name__,
                status_code=classification.status_code,
            )
            return callback(classification.message)
        return callback(None, body)

    return handler


def render_response(error: Optional[BaseException], body: Any = None,
                    success_status: int = status.HTTP_200_OK) -> Response:
    """Build the DRF ``Response`` for an ``(error, body)`` outcome."""

    def respond(message: Optional[str], payload: Any = None) -> Response:
        if message is not None:
            return Response({"detail": message}, status=classify(error).status_code)
        return Response(payload, status=success_status)

    return send_http_response(respond)(error, body)


def exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """DRF ``EXCEPTION_HANDLER``: every failure renders through ``classify``."""
    classification = classify(exc)
    view = context.get("view")
    log = logger.bind(
        view=type(view).__name__ if view is not None else None,
        error_type=type(exc).__name__,
        status_code=classification.status_code,
    )
    if classification.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        log.exception("request.failed", error=str(exc))
    else:
        log.warning("request.rejected", error=str(exc))

    response = render_response(exc)
    if isinstance(exc, drf_exceptions.MethodNotAllowed):
        allowed = getattr(view, "allowed_methods", None)
        if allowed:
            response["Allow"] = ", ".join(allowed)
    return response
