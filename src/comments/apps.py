"""App configuration for comments."""

from django.apps import AppConfig


class CommentsConfig(AppConfig):
    """Comments and their moderation workflow."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "comments"
