from django.apps import AppConfig


class ScriptsConfig(AppConfig):
    """Operational management commands."""

    name = "scripts"
