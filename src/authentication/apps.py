"""App configuration for authentication components."""

from django.apps import AppConfig


class AuthenticationConfig(AppConfig):
    """Holds the User model, bcrypt hashing, bearer tokens and user admin."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "authentication"
