"""Read-side queries for comments: per-article visibility and the dashboard."""

from typing import Optional

from django.db.models import Count, Q, QuerySet

from access_control.policies import is_admin, is_authenticated
from .models import Comment

REPORTED_FILTER = "Reported"
ALL_FILTER = "all"


def visible_comments_for(article, user) -> QuerySet:
    """Comments on ``article`` that ``user`` may read.

    Approved and Pending comments are public. A Rejected comment is shown
    to its author and to Admins only.
    """
    visibility = Q(status__in=[Comment.Status.APPROVED, Comment.Status.PENDING])
    if is_authenticated(user):
        visibility |= Q(author=user, status=Comment.Status.REJECTED)
    if is_admin(user):
        visibility |= Q(status__isnull=False)
    return (
        Comment.objects.filter(article=article)
        .filter(visibility)
        .select_related("author")
        .order_by("-created_at", "-id")
    )


def moderation_queryset(
    status: Optional[str] = None,
    article_id: Optional[str] = None,
    search: Optional[str] = None,
) -> QuerySet:
    """Filtered comment list for the admin dashboard.

    ``status`` is a comment status or ``"Reported"``; any other value means
    no status filter. ``article_id`` of ``"all"`` or empty means every
    article. ``search`` matches content, author name and article title.
    """
    queryset = (
        Comment.objects.filter(author__isnull=False, article__isnull=False)
        .select_related("author", "article")
        .order_by("-created_at", "-id")
    )

    if status == REPORTED_FILTER:
        queryset = queryset.filter(is_reported=True)
    elif status in Comment.Status.values:
        queryset = queryset.filter(status=status)

    if article_id and article_id != ALL_FILTER:
        queryset = queryset.filter(article_id=article_id)

    if search:
        queryset = queryset.filter(
            Q(content__icontains=search)
            | Q(author__name__icontains=search)
            | Q(article__title__icontains=search)
        )
    return queryset


def moderation_stats() -> dict[str, int]:
    """Whole-table counters; never affected by dashboard filters."""
    return Comment.objects.aggregate(
        total=Count("id"),
        pending=Count("id", filter=Q(status=Comment.Status.PENDING)),
        reported=Count("id", filter=Q(is_reported=True)),
    )


__all__ = ["visible_comments_for", "moderation_queryset", "moderation_stats"]
