"""System checks for article configuration."""

from django.conf import settings
from django.core.checks import Error, register


@register()
def article_default_status_is_valid(app_configs, **kwargs):
    """ARTICLE_DEFAULT_STATUS must name an existing article status."""
    from articles.models import Article

    value = getattr(settings, "ARTICLE_DEFAULT_STATUS", None)
    if value in Article.Status.values:
        return []
    return [
        Error(
            f"ARTICLE_DEFAULT_STATUS={value!r} is not a valid article status.",
            hint=f"Use one of: {', '.join(Article.Status.values)}.",
            id="articles.E001",
        )
    ]


@register()
def blob_backend_is_known(app_configs, **kwargs):
    backend = getattr(settings, "BLOB_BACKEND", None)
    if backend in ("local", "s3"):
        return []
    return [
        Error(
            f"BLOB_BACKEND={backend!r} is not supported.",
            hint="Use 'local' or 's3'.",
            id="articles.E002",
        )
    ]
