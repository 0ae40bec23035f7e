"""Shared helpers for tests (user creation, bearer clients, fake Redis)."""

from __future__ import annotations

from typing import Dict
from unittest import mock

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from authentication.managers import UserManager
from authentication.services import TokenService

User = get_user_model()


class FakeRedis:
    """Minimal Redis stub supporting the commands used by TokenService."""

    def __init__(self):
        self._store: Dict[str, str] = {}

    def setex(self, key: str, ttl_seconds: int, value: str) -> None:
        """Mimic Redis SETEX; TTL is ignored in tests, value stored in-memory."""
        self._store[key] = value

    def get(self, key: str):
        """Return stored value for key or None, matching Redis GET semantics."""
        return self._store.get(key)


def create_user(email: str, password: str = "Password123", role: str = User.Role.USER, **extra):
    """Create a user with a bcrypt-hashed password for tests."""

    extra.setdefault("name", email.split("@")[0].title())
    return User.objects.create(
        email=email,
        password_hash=UserManager.hash_password(password),
        role=role,
        **extra,
    )


def auth_client(user) -> APIClient:
    """APIClient carrying a freshly issued bearer token for ``user``."""

    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {TokenService.generate_token(user)}")
    return client


class RedisPatchedTestCase(TestCase):
    """TestCase with both Redis client lookups patched to an in-memory fake."""

    @classmethod
    def setUpClass(cls):
        """Patch Redis clients to use in-memory fake for all tests."""
        super().setUpClass()
        cls.fake_redis = FakeRedis()
        cls.patchers = [
            mock.patch("core.redis_client.get_redis_client", return_value=cls.fake_redis),
            mock.patch("authentication.services.get_redis_client", return_value=cls.fake_redis),
        ]
        for patcher in cls.patchers:
            patcher.start()

    @classmethod
    def tearDownClass(cls):
        """Stop Redis patches after all tests complete."""
        for patcher in cls.patchers:
            patcher.stop()
        super().tearDownClass()
