"""DRF exception handler rendering every failure as {"error", "message"}."""

from __future__ import annotations

import structlog
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from shared.domain.errors import Internal, ServiceError

logger = structlog.get_logger(__name__)

# DRF exception class -> stable error tag
_DRF_ERROR_TAGS: list[tuple[type[Exception], str]] = [
    (exceptions.NotFound, "not_found"),
    (Http404, "not_found"),
    (exceptions.ParseError, "invalid_request"),
    (exceptions.ValidationError, "invalid_request"),
    (exceptions.NotAuthenticated, "not_authenticated"),
    (exceptions.AuthenticationFailed, "not_authenticated"),
    (exceptions.PermissionDenied, "forbidden"),
    (exceptions.MethodNotAllowed, "method_not_allowed"),
    (exceptions.UnsupportedMediaType, "invalid_request"),
    (exceptions.Throttled, "throttled"),
]


def _tag_for(exc: Exception) -> str:
    for exc_type, tag in _DRF_ERROR_TAGS:
        if isinstance(exc, exc_type):
            return tag
    return "invalid_request"


def _message_from_detail(detail) -> str:
    if isinstance(detail, dict):
        for field, value in detail.items():
            message = _message_from_detail(value)
            return message if field == "non_field_errors" else f"{field}: {message}"
        return ""
    if isinstance(detail, list):
        return _message_from_detail(detail[0]) if detail else ""
    return str(detail)


def api_exception_handler(exc: Exception, context: dict) -> Response:
    """Map service errors, DRF errors and unexpected failures to one shape."""

    if isinstance(exc, ServiceError):
        if isinstance(exc, Internal):
            logger.error("request.internal_error", view=_view_name(context), error=exc.message)
        return Response(exc.as_body(), status=exc.status_code)

    response = drf_exception_handler(exc, context)
    if response is not None:
        detail = getattr(exc, "detail", None) or str(exc)
        response.data = {"error": _tag_for(exc), "message": _message_from_detail(detail)}
        return response

    # Storage and programming errors never leak their text to the caller.
    logger.exception("request.unhandled_error", view=_view_name(context), error_type=type(exc).__name__)
    return Response(Internal().as_body(), status=status.HTTP_500_INTERNAL_SERVER_ERROR)


def _view_name(context: dict) -> str:
    view = context.get("view")
    return view.__class__.__name__ if view is not None else "unknown"
