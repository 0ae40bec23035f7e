"""Custom exception handling to enforce the API error envelope."""

import logging
from typing import Any

from django.conf import settings
from django.db import DatabaseError
from rest_framework import status
from rest_framework.exceptions import (
    AuthenticationFailed,
    NotAuthenticated,
    PermissionDenied,
    ValidationError,
)
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from authentication.services import BlocklistUnavailable

logger = logging.getLogger(__name__)

FORBIDDEN_MESSAGE = "You do not have permission to perform this action on this resource."
UNAUTHORIZED_MESSAGE = (
    "Authentication credentials were not provided or are invalid, "
    "token revoked, or user is inactive."
)


class AuthorizationDenied(PermissionDenied):
    """403 raised by the authorization policies.

    ``reason`` is an internal code (``not_owner``, ``not_admin``,
    ``not_published``, ``self_report``) kept for logs and tests. Callers only
    ever see the generic forbidden message.
    """

    default_detail = FORBIDDEN_MESSAGE

    def __init__(self, reason: str, detail: Any = None):
        super().__init__(detail=detail)
        self.reason = reason


def _normalize_errors(payload: Any) -> list[Any]:
    """Convert DRF's response.data into a list for the envelope."""

    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and "detail" in payload:
        # Common DRF pattern: {"detail": "..."}
        return [payload["detail"]]
    return [payload]


def _error_response(message: str, errors: Any, status_code: int) -> Response:
    return Response({"data": None, "message": message, "errors": errors}, status=status_code)


def custom_exception_handler(exc: Exception, context: dict[str, Any]) -> Response:
    """Wrap errors in the `{ "data": null, "message": ..., "errors": [...] }` shape.

    - Uses DRF's default handler to produce the base response.
    - Validation errors become 422 and keep their field-level detail.
    - 401/403 messages are normalized so the cause is not leaked.
    - Anything DRF does not recognise is logged and returned as a generic 500.
    """

    view = context.get("view")

    # Token blocklist outages must fail closed.
    if isinstance(exc, BlocklistUnavailable):
        return _error_response(
            "Service unavailable.",
            ["Authentication service unavailable (blocklist)."],
            status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    if isinstance(exc, DatabaseError):
        logger.error("Database error in %s", type(view).__name__, exc_info=exc)
        return _error_response(
            "Service unavailable.",
            ["Service temporarily unavailable."],
            status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    if isinstance(exc, AuthorizationDenied):
        request = context.get("request")
        logger.info(
            "Authorization denied",
            extra={
                "reason": exc.reason,
                "view": type(view).__name__,
                "user_id": str(getattr(getattr(request, "user", None), "pk", None)),
            },
        )

    response = drf_exception_handler(exc, context)

    if response is None:
        logger.exception("Unhandled error in %s", type(view).__name__, exc_info=exc)
        return _error_response(
            "Server error.",
            ["An unexpected error occurred. Check server logs for details."],
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    # AuthenticationFailed/NotAuthenticated consistently produce 401.
    if isinstance(exc, (AuthenticationFailed, NotAuthenticated)):
        response.status_code = status.HTTP_401_UNAUTHORIZED

    if isinstance(exc, ValidationError):
        response.status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
        response.data = {
            "data": None,
            "message": "Validation failed.",
            "errors": response.data,
        }
        return response

    if response.status_code == status.HTTP_401_UNAUTHORIZED:
        if getattr(settings, "DEBUG_AUTH_ERRORS", False):
            errors = _normalize_errors(response.data)
        else:
            errors = [UNAUTHORIZED_MESSAGE]
        message = "Authentication required."
    elif response.status_code == status.HTTP_403_FORBIDDEN:
        errors = [FORBIDDEN_MESSAGE]
        message = "Forbidden."
    elif response.status_code == status.HTTP_404_NOT_FOUND:
        errors = _normalize_errors(response.data)
        message = "Not found."
    else:
        errors = _normalize_errors(response.data)
        message = "Request failed."

    response.data = {"data": None, "message": message, "errors": errors}
    return response


__all__ = ["AuthorizationDenied", "custom_exception_handler", "FORBIDDEN_MESSAGE"]
