"""Tests for authentication flows (register, login, logout, profile)."""

from __future__ import annotations

import time
from unittest import mock

import jwt
from django.conf import settings
from django.db import DatabaseError
from rest_framework.test import APIClient

from authentication.models import User
from authentication.services import BlocklistUnavailable, TokenService
from tests.utils import RedisPatchedTestCase, create_user


class AuthFlowTests(RedisPatchedTestCase):
    """End-to-end tests covering auth endpoints and per-token revocation."""

    @classmethod
    def setUpTestData(cls):
        """Create a default active user for test cases."""
        cls.password = "StrongPass123"
        cls.user = create_user("user@example.com", cls.password, name="Regular User")

    def setUp(self):
        """Fresh DRF APIClient per test."""
        self.api_client: APIClient = APIClient()

    def _login(self) -> dict:
        return self.api_client.post(
            "/login",
            {"email": self.user.email, "password": self.password},
            format="json",
        ).json()["data"]

    def _client_for(self, token: str) -> APIClient:
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        return client

    def test_register_success(self):
        """Registration creates a User-role account and returns a token."""
        payload = {
            "name": "New Person",
            "email": "new@example.com",
            "password": "NewPass123!",
            "password_confirmation": "NewPass123!",
        }
        response = self.api_client.post("/register", payload, format="json")
        body = response.json()

        self.assertEqual(response.status_code, 201)
        self.assertEqual(body["errors"], [])
        self.assertEqual(body["data"]["user"]["email"], payload["email"])
        self.assertEqual(body["data"]["user"]["role"], "User")
        self.assertTrue(body["data"]["token"])

    def test_register_cannot_choose_role(self):
        """A role in the registration payload is ignored."""
        payload = {
            "name": "Sneaky",
            "email": "sneaky@example.com",
            "password": "NewPass123!",
            "password_confirmation": "NewPass123!",
            "role": "Admin",
        }
        response = self.api_client.post("/register", payload, format="json")

        self.assertEqual(response.status_code, 201)
        self.assertEqual(User.objects.get(email="sneaky@example.com").role, User.Role.USER)

    def test_register_password_mismatch_422(self):
        """Mismatched passwords yield 422 with field errors."""
        payload = {
            "name": "Someone",
            "email": "new2@example.com",
            "password": "Password123",
            "password_confirmation": "Mismatch123",
        }
        response = self.api_client.post("/register", payload, format="json")
        body = response.json()

        self.assertEqual(response.status_code, 422)
        self.assertIsNone(body["data"])
        self.assertIn("password", body["errors"])

    def test_register_duplicate_email_422(self):
        payload = {
            "name": "Dup",
            "email": "USER@example.com",
            "password": "Password123",
            "password_confirmation": "Password123",
        }
        response = self.api_client.post("/register", payload, format="json")

        self.assertEqual(response.status_code, 422)
        self.assertIn("email", response.json()["errors"])

    def test_login_success_returns_token(self):
        """Valid credentials return a bearer token and the profile."""
        response = self.api_client.post(
            "/login",
            {"email": self.user.email, "password": self.password},
            format="json",
        )
        body = response.json()

        self.assertEqual(response.status_code, 200)
        self.assertIn("token", body["data"])
        self.assertEqual(body["data"]["user"]["id"], str(self.user.id))
        self.assertEqual(body["errors"], [])
        self.user.refresh_from_db()
        self.assertIsNotNone(self.user.last_login)

    def test_login_invalid_credentials_401(self):
        """Bad password returns 401 with null data."""
        response = self.api_client.post(
            "/login",
            {"email": self.user.email, "password": "wrongpass"},
            format="json",
        )
        body = response.json()

        self.assertEqual(response.status_code, 401)
        self.assertIsNone(body["data"])
        self.assertTrue(body["errors"])

    def test_login_inactive_user_401(self):
        """Inactive user cannot log in and receives 401."""
        self.user.status = User.Status.INACTIVE
        self.user.save(update_fields=["status"])

        response = self.api_client.post(
            "/login",
            {"email": self.user.email, "password": self.password},
            format="json",
        )
        body = response.json()

        self.assertEqual(response.status_code, 401)
        self.assertIsNone(body["data"])
        self.assertTrue(body["errors"])

    def test_me_requires_token(self):
        response = self.api_client.get("/user")

        self.assertEqual(response.status_code, 401)
        self.assertIsNone(response.json()["data"])

    def test_me_returns_profile(self):
        client = self._client_for(self._login()["token"])
        response = client.get("/user")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["email"], self.user.email)

    def test_logout_revokes_only_current_token(self):
        """Logging out one session leaves the other session usable."""
        client_a = self._client_for(self._login()["token"])
        client_b = self._client_for(self._login()["token"])

        logout_response = client_a.post("/logout")
        self.assertEqual(logout_response.status_code, 200)
        self.assertEqual(logout_response.json()["message"], "Logged out successfully")

        self.assertEqual(client_a.get("/user").status_code, 401)
        self.assertEqual(client_b.get("/user").status_code, 200)

    def test_token_rejected_after_deactivation(self):
        """Existing tokens stop working once the account is inactive."""
        client = self._client_for(self._login()["token"])
        self.user.status = User.Status.INACTIVE
        self.user.save(update_fields=["status"])

        self.assertEqual(client.get("/user").status_code, 401)

    def test_logout_redis_down_returns_503(self):
        """If Redis is unavailable during logout, the API should fail-closed."""
        client = self._client_for(self._login()["token"])

        # Simulate Redis failure when block_token is invoked.
        with mock.patch.object(
                TokenService,
                "block_token",
                side_effect=BlocklistUnavailable("Redis unavailable while blocklisting"),
        ):
            response = client.post("/logout")

        body = response.json()
        self.assertEqual(response.status_code, 503)
        self.assertIsNone(body["data"])
        self.assertTrue(body["errors"])

    def test_expired_token_returns_401(self):
        """Expired access tokens are rejected with 401 Unauthorized."""
        now = int(time.time())
        payload = {
            "sub": str(self.user.id),
            "jti": "expired-jti",
            "exp": now - 60,  # expired 1 minute ago
            "iat": now - 120,
            "role": self.user.role,
            "type": "access",
        }
        expired = jwt.encode(payload, settings.SECRET_KEY, algorithm=TokenService.ALGORITHM)

        response = self._client_for(expired).get("/user")

        self.assertEqual(response.status_code, 401)
        self.assertIsNone(response.json()["data"])

    def test_profile_update_changes_name(self):
        client = self._client_for(self._login()["token"])
        response = client.put("/user/profile", {"name": "Renamed", "designation": "Editor"}, format="json")

        self.assertEqual(response.status_code, 200)
        self.user.refresh_from_db()
        self.assertEqual(self.user.name, "Renamed")
        self.assertEqual(self.user.designation, "Editor")

    def test_profile_cannot_change_email(self):
        """PUT /user/profile must not allow changing email."""
        client = self._client_for(self._login()["token"])
        response = client.put("/user/profile", {"email": "new@example.com"}, format="json")
        body = response.json()

        self.assertEqual(response.status_code, 422)
        self.assertIsNone(body["data"])
        self.assertIn("email", body["errors"])
        self.user.refresh_from_db()
        self.assertEqual(self.user.email, "user@example.com")

    def test_login_when_database_unavailable_returns_503_with_envelope(self):
        """Database errors surface as 503 with the JSON envelope."""
        with mock.patch.object(User.objects, "get", side_effect=DatabaseError("db down")):
            response = self.api_client.post(
                "/login",
                {"email": self.user.email, "password": self.password},
                format="json",
            )
        body = response.json()

        self.assertEqual(response.status_code, 503)
        self.assertIsNone(body["data"])
        self.assertTrue(body["errors"])
