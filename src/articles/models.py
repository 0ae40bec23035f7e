"""Article model and its Published/Archived lifecycle field."""

from django.conf import settings
from django.db import models


class Article(models.Model):
    """Blog article owned by exactly one user.

    Comments reference articles with ``on_delete=CASCADE``; removing an
    article removes its comments in the database, not in application code.
    """

    class Status(models.TextChoices):
        PUBLISHED = "Published", "Published"
        ARCHIVED = "Archived", "Archived"

    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="articles")
    title = models.CharField(max_length=255)
    body = models.TextField()
    # Blob storage key, e.g. "images/articles/<name>.jpg".
    image = models.CharField(max_length=512, blank=True, null=True)
    tags = models.JSONField(default=list, blank=True)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PUBLISHED)
    publish_date = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-publish_date", "-created_at"]
        indexes = [models.Index(fields=["status", "-publish_date"], name="article_status_pubdate_idx")]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.title


__all__ = ["Article"]
