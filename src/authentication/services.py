"""Token service for JWT creation, decoding, and per-token revocation."""

import logging
import time
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed

from core.redis_client import get_redis_client

logger = logging.getLogger(__name__)


class BlocklistUnavailable(Exception):
    """Raised when Redis blocklist cannot be checked (fail-closed)."""


class TokenService:
    """Handle bearer-token issuance, decoding, and blocklist operations.

    Every token carries its own ``jti``, so logging out revokes exactly the
    token presented on that request; other sessions of the same user keep
    working until they expire or log out themselves.
    """

    ALGORITHM = "HS256"
    TOKEN_TYPE = "access"
    BLOCKLIST_PREFIX = "blocklist:token:"

    @classmethod
    def access_ttl(cls) -> timedelta:
        return timedelta(minutes=settings.ACCESS_TOKEN_TTL_MINUTES)

    @classmethod
    def generate_token(cls, user) -> str:
        """Generate a signed access token for the given user."""

        payload = cls._build_payload(user, datetime.now(timezone.utc), cls.access_ttl())
        return jwt.encode(payload, settings.SECRET_KEY, algorithm=cls.ALGORITHM)

    @classmethod
    def _build_payload(cls, user, issued_at: datetime, ttl: timedelta) -> dict[str, Any]:
        exp = issued_at + ttl
        return {
            "sub": str(user.id),
            "jti": str(uuid.uuid4()),
            "exp": int(exp.timestamp()),
            "iat": int(issued_at.timestamp()),
            "role": getattr(user, "role", None),
            "type": cls.TOKEN_TYPE,
        }

    @classmethod
    def decode_token(cls, token: str, expected_type: str | None = None) -> dict[str, Any]:
        """Decode and validate a JWT; optionally enforce token type."""

        try:
            payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[cls.ALGORITHM])
        except jwt.ExpiredSignatureError as exc:  # pragma: no cover - simple mapping
            raise AuthenticationFailed("Token has expired") from exc
        except jwt.InvalidTokenError as exc:  # pragma: no cover - simple mapping
            raise AuthenticationFailed("Invalid token") from exc

        if expected_type and payload.get("type") != expected_type:
            raise AuthenticationFailed("Invalid token type")

        return payload

    @classmethod
    def revoke(cls, payload: dict[str, Any]) -> None:
        """Revoke the token described by ``payload`` until it would expire."""

        cls.block_token(payload["jti"], payload["exp"])
        logger.info("Token revoked", extra={"user_id": payload.get("sub"), "jti": payload["jti"]})

    @classmethod
    def block_token(cls, jti: str, exp: int) -> None:
        """Add token jti to blocklist until its expiration timestamp."""

        client = get_redis_client()
        ttl_seconds = max(1, exp - int(time.time()))
        try:
            client.setex(f"{cls.BLOCKLIST_PREFIX}{jti}", ttl_seconds, "1")
        except Exception as exc:  # pragma: no cover - network failure
            raise BlocklistUnavailable("Redis unavailable while blocklisting") from exc

    @classmethod
    def is_token_blocked(cls, jti: str) -> bool:
        """Check if a token jti is present in the blocklist."""

        client = get_redis_client()
        try:
            return client.get(f"{cls.BLOCKLIST_PREFIX}{jti}") is not None
        except Exception as exc:  # pragma: no cover - network failure
            raise BlocklistUnavailable("Redis unavailable while checking blocklist") from exc


__all__ = ["TokenService", "BlocklistUnavailable"]
