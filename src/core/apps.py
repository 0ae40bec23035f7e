"""App configuration for the shared project utilities."""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Settings, URL root, error envelope and bearer-token middleware."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "core"
    verbose_name = "CloudBlog core"
