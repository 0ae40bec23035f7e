"""Comment model: moderation status plus an independent report flag."""

from django.conf import settings
from django.db import models


class Comment(models.Model):
    """Reader comment on an article.

    ``status`` and ``is_reported`` are independent: an Approved comment can
    be reported, and resolving a report never touches the status.
    """

    class Status(models.TextChoices):
        PENDING = "Pending", "Pending"
        APPROVED = "Approved", "Approved"
        REJECTED = "Rejected", "Rejected"

    article = models.ForeignKey("articles.Article", on_delete=models.CASCADE, related_name="comments")
    author = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="comments")
    content = models.TextField(max_length=1000)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    is_reported = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Comment {self.pk} on article {self.article_id}"


__all__ = ["Comment"]
