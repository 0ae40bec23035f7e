"""Article lifecycle: creation, content edits, status transitions, deletion.

Callers are expected to have passed the authorization policies already;
these functions only enforce the state machine and the blob side effects.
"""

import logging
from typing import Any, Optional

from django.conf import settings
from django.db.models import Count, Q
from django.utils import timezone

from authentication.models import User
from comments.models import Comment
from .models import Article
from .storage import ARTICLE_IMAGE_DIR, get_blob_store

logger = logging.getLogger(__name__)


def initial_status() -> str:
    """Status for new articles, from ``ARTICLE_DEFAULT_STATUS``."""
    return settings.ARTICLE_DEFAULT_STATUS


def create_article(owner, data: dict[str, Any], image_file=None) -> Article:
    article = Article(
        owner=owner,
        title=data["title"],
        body=data["body"],
        tags=data.get("tags") or [],
        status=initial_status(),
        publish_date=timezone.now(),
    )
    if image_file is not None:
        article.image = get_blob_store().put(ARTICLE_IMAGE_DIR, image_file)
        logger.info("Article image uploaded", extra={"key": article.image, "user_id": str(owner.pk)})
    article.save()
    logger.info("Article created", extra={"article_id": article.pk, "status": article.status})
    return article


def update_article_content(article: Article, data: dict[str, Any], image_file=None) -> Article:
    """Apply title/body/tags changes and swap the image if a new one is sent.

    Status is not part of content and is never changed here.
    """
    for field in ("title", "body", "tags"):
        if field in data:
            setattr(article, field, data[field])

    if image_file is not None:
        replace_image(article, image_file)

    article.save()
    return article


def replace_image(article: Article, image_file) -> bool:
    """Upload a new image, then drop the old blob.

    A failed upload is logged and leaves ``article.image`` as it was; the old
    blob is only removed once the new one is stored.
    """
    old_key = article.image
    try:
        new_key = get_blob_store().put(ARTICLE_IMAGE_DIR, image_file)
    except Exception:
        logger.exception("Failed to upload article image", extra={"article_id": article.pk})
        return False
    article.image = new_key
    logger.info("Article image replaced", extra={"article_id": article.pk, "key": new_key})
    if old_key:
        remove_blob(old_key, article.pk)
    return True


def remove_blob(key: str, article_id: Optional[int]) -> bool:
    """Best-effort removal of an article image.

    Returns whether the blob was deleted. Storage errors are logged and
    swallowed so the owning article write always proceeds.
    """
    try:
        store = get_blob_store()
        if not store.exists(key):
            return False
        store.delete(key)
    except Exception:
        logger.exception("Failed to delete article image", extra={"article_id": article_id, "key": key})
        return False
    logger.info("Article image deleted", extra={"article_id": article_id, "key": key})
    return True


def delete_article(article: Article) -> None:
    """Delete the blob first, then the row; comments go with the row."""
    article_id = article.pk
    if article.image:
        remove_blob(article.image, article_id)
    article.delete()
    logger.info("Article deleted", extra={"article_id": article_id})


def archive(article: Article, actor) -> bool:
    """Move to Archived. Returns False when the article already was."""
    if article.status == Article.Status.ARCHIVED:
        return False
    article.status = Article.Status.ARCHIVED
    article.save(update_fields=["status", "updated_at"])
    logger.info("Article archived by Admin", extra={"article_id": article.pk, "admin_id": str(actor.pk)})
    return True


def publish(article: Article, actor) -> bool:
    """Move to Published and refresh publish_date. False if already published."""
    if article.status == Article.Status.PUBLISHED:
        return False
    article.status = Article.Status.PUBLISHED
    article.publish_date = timezone.now()
    article.save(update_fields=["status", "publish_date", "updated_at"])
    logger.info("Article published by Admin", extra={"article_id": article.pk, "admin_id": str(actor.pk)})
    return True


def dashboard_stats() -> dict[str, dict[str, int]]:
    """User, article and comment counters for the admin dashboard."""
    users = User.objects.aggregate(
        total=Count("id"),
        active=Count("id", filter=Q(status=User.Status.ACTIVE)),
    )
    articles = Article.objects.aggregate(
        total=Count("id"),
        published=Count("id", filter=Q(status=Article.Status.PUBLISHED)),
        archived=Count("id", filter=Q(status=Article.Status.ARCHIVED)),
    )
    comments = Comment.objects.aggregate(
        total=Count("id"),
        pending=Count("id", filter=Q(status=Comment.Status.PENDING)),
        reported=Count("id", filter=Q(is_reported=True)),
    )
    return {"userStats": users, "articleStats": articles, "commentStats": comments}


__all__ = [
    "initial_status",
    "create_article",
    "update_article_content",
    "replace_image",
    "remove_blob",
    "delete_article",
    "archive",
    "publish",
    "dashboard_stats",
]
