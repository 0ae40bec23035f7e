"""Authorization matrix for articles and comments.

Each policy takes the caller (possibly anonymous) and the target object and
returns a ``Decision``. A denial carries an internal reason code; the API
folds every reason into the same 403 response so callers cannot tell a
missing role from a missing ownership, or an archived article from one they
simply may not see.
"""

from dataclasses import dataclass
from typing import Any, Optional

NOT_AUTHENTICATED = "not_authenticated"
NOT_OWNER = "not_owner"
NOT_ADMIN = "not_admin"
NOT_PUBLISHED = "not_published"
SELF_REPORT = "self_report"

ADMIN_ROLE = "Admin"
PUBLISHED = "Published"


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = Decision(True)


def deny(reason: str) -> Decision:
    return Decision(False, reason)


def is_authenticated(user: Any) -> bool:
    return bool(user is not None and getattr(user, "is_authenticated", False))


def is_admin(user: Any) -> bool:
    """Elevated privilege: an authenticated user holding the Admin role."""
    return is_authenticated(user) and getattr(user, "role", None) == ADMIN_ROLE


def is_owner(user: Any, obj: Any, owner_field: str = "owner") -> bool:
    if not is_authenticated(user):
        return False
    owner_id = getattr(obj, f"{owner_field}_id", None)
    return owner_id is not None and owner_id == user.pk


def _admin_only(user: Any) -> Decision:
    if not is_authenticated(user):
        return deny(NOT_AUTHENTICATED)
    return ALLOW if is_admin(user) else deny(NOT_ADMIN)


# Articles


def can_view_article(user: Any, article: Any) -> Decision:
    """Published articles are public; archived ones are owner/Admin only."""
    if article.status == PUBLISHED:
        return ALLOW
    if is_owner(user, article) or is_admin(user):
        return ALLOW
    return deny(NOT_PUBLISHED)


def can_edit_article(user: Any, article: Any) -> Decision:
    """Title, body, tags and image belong to the owner, whatever the status."""
    return ALLOW if is_owner(user, article) else deny(NOT_OWNER)


def can_delete_article(user: Any, article: Any) -> Decision:
    if is_owner(user, article) or is_admin(user):
        return ALLOW
    return deny(NOT_OWNER)


def can_change_article_status(user: Any, article: Any = None) -> Decision:
    """Archive/publish transitions are reserved to Admins."""
    return _admin_only(user)


# Comments


def can_edit_comment(user: Any, comment: Any) -> Decision:
    return ALLOW if is_owner(user, comment, "author") else deny(NOT_OWNER)


def can_delete_comment(user: Any, comment: Any) -> Decision:
    if is_owner(user, comment, "author"):
        return ALLOW
    return ALLOW if is_admin(user) else deny(NOT_OWNER)


def can_report_comment(user: Any, comment: Any) -> Decision:
    """Any authenticated user except the author may flag a comment."""
    if not is_authenticated(user):
        return deny(NOT_AUTHENTICATED)
    if is_owner(user, comment, "author"):
        return deny(SELF_REPORT)
    return ALLOW


def can_moderate_comment(user: Any, comment: Any = None) -> Decision:
    """Approve/reject and report resolution are Admin actions."""
    return _admin_only(user)


__all__ = [
    "Decision",
    "ALLOW",
    "deny",
    "is_authenticated",
    "is_admin",
    "is_owner",
    "can_view_article",
    "can_edit_article",
    "can_delete_article",
    "can_change_article_status",
    "can_edit_comment",
    "can_delete_comment",
    "can_report_comment",
    "can_moderate_comment",
    "NOT_AUTHENTICATED",
    "NOT_OWNER",
    "NOT_ADMIN",
    "NOT_PUBLISHED",
    "SELF_REPORT",
]
