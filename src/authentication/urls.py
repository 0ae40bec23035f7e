"""URL patterns for authentication and user administration."""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import LoginView, LogoutView, MeView, ProfileView, RegisterView, UserViewSet

router = DefaultRouter(trailing_slash=False)
router.include_root_view = False
router.register(r"users", UserViewSet, basename="user")

urlpatterns = [
    path("register", RegisterView.as_view(), name="auth-register"),
    path("login", LoginView.as_view(), name="auth-login"),
    path("logout", LogoutView.as_view(), name="auth-logout"),
    path("user", MeView.as_view(), name="auth-me"),
    path("user/profile", ProfileView.as_view(), name="auth-profile"),
    path("", include(router.urls)),
]
