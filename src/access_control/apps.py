"""App configuration for the access_control Django application.

This app holds no models: it carries the authorization policies, the DRF
permission classes built on them, and the system checks for their wiring.
"""

from django.apps import AppConfig


class AccessControlConfig(AppConfig):
    """Application configuration for the access_control app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "access_control"

    def ready(self) -> None:
        """Register system checks when the app is loaded."""
        from . import checks  # noqa: F401
