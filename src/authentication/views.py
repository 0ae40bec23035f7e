"""Authentication endpoints and admin user management."""

import logging
from typing import Any

from django.contrib.auth import get_user_model
from django.db.models import Count, Q
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import AuthenticationFailed

from access_control.permissions import IsAdminRole, IsAuthenticatedUser
from core.response import BaseAPIView, BaseViewSet, UserPagination, api_response
from .serializers import (
    LoginSerializer,
    ProfileUpdateSerializer,
    RegisterSerializer,
    UserAdminSerializer,
    UserDetailSerializer,
)
from .services import TokenService

logger = logging.getLogger(__name__)

User = get_user_model()


class RegisterView(BaseAPIView):
    permission_classes: list[Any] = []

    # noinspection PyMethodMayBeStatic
    def post(self, request):
        """Register a new ``User``-role account and sign it in."""
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        token = TokenService.generate_token(user)
        logger.info("User registered", extra={"user_id": str(user.pk)})
        return api_response(
            {"user": UserDetailSerializer(user).data, "token": token},
            status=status.HTTP_201_CREATED,
            message="User registered successfully",
        )


class LoginView(BaseAPIView):
    permission_classes: list[Any] = []

    # noinspection PyMethodMayBeStatic
    def post(self, request):
        """Authenticate, record the login time and issue a bearer token."""
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data["user"]
        user.last_login = timezone.now()
        user.save(update_fields=["last_login"])
        token = TokenService.generate_token(user)
        return api_response({"token": token, "user": UserDetailSerializer(user).data})


class LogoutView(BaseAPIView):
    """Revoke the bearer token used on this request, and only that one."""

    permission_classes = [IsAuthenticatedUser]

    # noinspection PyMethodMayBeStatic
    def post(self, request):
        payload = request.auth
        if not payload:
            raise AuthenticationFailed("Missing token.")
        TokenService.revoke(payload)
        return api_response(None, message="Logged out successfully")


class MeView(BaseAPIView):
    permission_classes = [IsAuthenticatedUser]

    # noinspection PyMethodMayBeStatic
    def get(self, request):
        """Return the current user's profile."""
        return api_response(UserDetailSerializer(request.user).data)


class ProfileView(BaseAPIView):
    permission_classes = [IsAuthenticatedUser]

    # noinspection PyMethodMayBeStatic
    def put(self, request):
        """Update name/designation/image of the current user."""
        serializer = ProfileUpdateSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return api_response(UserDetailSerializer(request.user).data, message="Profile updated.")


class UserViewSet(BaseViewSet):
    """Admin CRUD over accounts plus the Active/Inactive toggle."""

    serializer_class = UserAdminSerializer
    permission_classes = [IsAdminRole]
    pagination_class = UserPagination
    lookup_value_regex = r"[0-9a-fA-F-]{36}"
    http_method_names = ["get", "post", "put", "delete", "head", "options"]

    def get_queryset(self):
        queryset = User.objects.all()
        if self.action != "list":
            return queryset

        status_filter = self.request.query_params.get("status")
        if status_filter in User.Status.values:
            queryset = queryset.filter(status=status_filter)

        search = self.request.query_params.get("search")
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search)
                | Q(email__icontains=search)
                | Q(designation__icontains=search)
            )
        return queryset

    def list(self, request, *args, **kwargs):
        """Paginated listing with global account counters alongside."""
        page = self.paginate_queryset(self.get_queryset())
        serializer = self.get_serializer(page, many=True)
        django_page = self.paginator.page
        return api_response(
            {
                "users": serializer.data,
                "current_page": django_page.number,
                "last_page": django_page.paginator.num_pages,
                "total": django_page.paginator.count,
                "stats": user_stats(),
            }
        )

    def perform_create(self, serializer):
        user = serializer.save()
        logger.info("User created by admin", extra={"user_id": str(user.pk), "admin_id": str(self.request.user.pk)})

    def perform_destroy(self, instance):
        logger.info("User deleted by admin", extra={"user_id": str(instance.pk), "admin_id": str(self.request.user.pk)})
        instance.delete()

    @action(detail=True, methods=["put"], url_path="status")
    def toggle_status(self, request, pk=None):
        """Flip Active/Inactive. Articles and comments are left untouched."""
        user = self.get_object()
        user.status = User.Status.INACTIVE if user.is_active else User.Status.ACTIVE
        user.save(update_fields=["status", "updated_at"])
        logger.info("User status toggled", extra={"user_id": str(user.pk), "status": user.status})
        return api_response({"id": str(user.pk), "status": user.status})


def user_stats() -> dict[str, int]:
    counts = User.objects.aggregate(
        total=Count("id"),
        active=Count("id", filter=Q(status=User.Status.ACTIVE)),
    )
    return {
        "total_users": counts["total"],
        "active_users": counts["active"],
        "inactive_users": counts["total"] - counts["active"],
    }


__all__ = [
    "RegisterView",
    "LoginView",
    "LogoutView",
    "MeView",
    "ProfileView",
    "UserViewSet",
    "user_stats",
]
