"""Comment moderation state machine.

Every write by the author sends the comment back to Pending. Only Admins
move it to Approved or Rejected. The report flag is independent of status.
"""

import logging

from .models import Comment

logger = logging.getLogger(__name__)

MODERATION_STATUSES = (Comment.Status.APPROVED, Comment.Status.REJECTED)


def create_comment(article, author, content: str) -> Comment:
    comment = Comment.objects.create(
        article=article,
        author=author,
        content=content,
        status=Comment.Status.PENDING,
        is_reported=False,
    )
    logger.info("Comment created", extra={"comment_id": comment.pk, "article_id": article.pk})
    return comment


def edit_comment(comment: Comment, content: str) -> Comment:
    """Replace the content and re-enter moderation."""
    comment.content = content
    comment.status = Comment.Status.PENDING
    comment.save(update_fields=["content", "status", "updated_at"])
    logger.info("Comment edited, awaiting moderation", extra={"comment_id": comment.pk})
    return comment


def moderate(comment: Comment, new_status: str, actor) -> Comment:
    if new_status not in MODERATION_STATUSES:
        raise ValueError(f"Unsupported moderation status {new_status!r}")
    previous = comment.status
    comment.status = new_status
    comment.save(update_fields=["status", "updated_at"])
    logger.info(
        "Comment moderated",
        extra={
            "comment_id": comment.pk,
            "from_status": previous,
            "to_status": new_status,
            "admin_id": str(actor.pk),
        },
    )
    return comment


def report(comment: Comment, reporter) -> bool:
    """Flag the comment. Returns False when it was already flagged."""
    if comment.is_reported:
        return False
    comment.is_reported = True
    comment.save(update_fields=["is_reported", "updated_at"])
    logger.info("Comment reported", extra={"comment_id": comment.pk, "reporter_id": str(reporter.pk)})
    return True


def resolve_report(comment: Comment, actor) -> Comment:
    """Clear the report flag; status stays as it is."""
    comment.is_reported = False
    comment.save(update_fields=["is_reported", "updated_at"])
    logger.info("Comment report resolved", extra={"comment_id": comment.pk, "admin_id": str(actor.pk)})
    return comment


def delete_comment(comment: Comment, actor) -> None:
    comment_id = comment.pk
    comment.delete()
    logger.info("Comment deleted", extra={"comment_id": comment_id, "user_id": str(actor.pk)})


__all__ = [
    "MODERATION_STATUSES",
    "create_comment",
    "edit_comment",
    "moderate",
    "report",
    "resolve_report",
    "delete_comment",
]
