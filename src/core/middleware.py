"""Bearer-token middleware: resolves the caller once per request."""

import logging
from typing import Any, Optional

from django.contrib.auth.models import AnonymousUser
from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed

from authentication.models import User
from authentication.services import BlocklistUnavailable, TokenService
from core.exceptions import UNAUTHORIZED_MESSAGE

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


class TokenRejected(Exception):
    """A bearer token was presented but cannot be used."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


def extract_bearer_token(header: str) -> Optional[str]:
    """Return the token from an ``Authorization: Bearer <token>`` header."""
    scheme, _, token = header.partition(" ")
    if scheme.lower() != BEARER_SCHEME:
        return None
    return token.strip() or None


def resolve_token(token: str) -> tuple[User, dict[str, Any]]:
    """Map a bearer token to its active user and decoded payload.

    Raises ``TokenRejected`` for bad, revoked or orphaned tokens and for
    inactive accounts. ``BlocklistUnavailable`` propagates.
    """
    try:
        payload = TokenService.decode_token(token, expected_type=TokenService.TOKEN_TYPE)
    except AuthenticationFailed as exc:
        raise TokenRejected(str(exc.detail)) from exc

    jti = payload.get("jti")
    if not jti:
        raise TokenRejected("missing jti")
    if TokenService.is_token_blocked(jti):
        raise TokenRejected("revoked")

    try:
        user = User.objects.get(id=payload.get("sub"))
    except (User.DoesNotExist, DjangoValidationError):
        raise TokenRejected("unknown user")
    if not user.is_active:
        raise TokenRejected("inactive user")
    return user, payload


class JWTAuthMiddleware(MiddlewareMixin):
    """Attach ``request.user`` and ``request.auth_token_payload``.

    Requests without a bearer header stay anonymous. A header carrying an
    unusable token is answered with 401 before any view runs; a blocklist
    outage with 503.
    """

    def process_request(self, request):  # type: ignore[override]
        token = extract_bearer_token(request.META.get("HTTP_AUTHORIZATION", ""))
        if token is None:
            request.user = AnonymousUser()
            request.auth_token_payload = None
            return None

        try:
            user, payload = resolve_token(token)
        except TokenRejected as exc:
            logger.info("Bearer token rejected", extra={"reason": exc.reason, "path": request.path})
            return _unauthorized()
        except BlocklistUnavailable:
            logger.error("Token blocklist unavailable", extra={"path": request.path})
            return _service_unavailable()

        request.user = user
        request.auth_token_payload = payload
        return None


def _unauthorized() -> JsonResponse:
    return JsonResponse(
        {"data": None, "message": "Authentication required.", "errors": [UNAUTHORIZED_MESSAGE]},
        status=status.HTTP_401_UNAUTHORIZED,
    )


def _service_unavailable() -> JsonResponse:
    return JsonResponse(
        {
            "data": None,
            "message": "Service unavailable.",
            "errors": ["Authentication service unavailable (blocklist)."],
        },
        status=status.HTTP_503_SERVICE_UNAVAILABLE,
    )


__all__ = ["JWTAuthMiddleware", "extract_bearer_token", "resolve_token"]
