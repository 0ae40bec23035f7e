"""DRF permission classes backed by the authorization policies."""

from rest_framework import permissions

from core.exceptions import AuthorizationDenied, FORBIDDEN_MESSAGE
from . import policies


class IsAuthenticatedUser(permissions.BasePermission):
    """Require a resolved bearer token; anonymous callers get 401."""

    def has_permission(self, request, view) -> bool:
        return policies.is_authenticated(getattr(request, "user", None))


class IsAdminRole(permissions.BasePermission):
    """Require the Admin role.

    Anonymous callers fall through to DRF's 401 handling; authenticated
    non-admins are rejected with the ``not_admin`` reason.
    """

    message = FORBIDDEN_MESSAGE

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        if not policies.is_authenticated(user):
            return False
        if not policies.is_admin(user):
            raise AuthorizationDenied(policies.NOT_ADMIN)
        return True


class ObjectPolicyPermission(permissions.BasePermission):
    """Apply the view's per-action object policy.

    Views declare ``object_policies``: a mapping of action name to a policy
    callable ``(user, obj) -> Decision``. Actions without an entry are
    allowed at object level. A denial raises ``AuthorizationDenied`` with the
    policy's reason code.
    """

    message = FORBIDDEN_MESSAGE

    def has_permission(self, request, view) -> bool:
        return True

    def has_object_permission(self, request, view, obj) -> bool:
        policy = getattr(view, "object_policies", {}).get(getattr(view, "action", None))
        if policy is None:
            return True

        decision = policy(getattr(request, "user", None), obj)
        if decision.allowed:
            return True
        raise AuthorizationDenied(decision.reason)


__all__ = ["IsAuthenticatedUser", "IsAdminRole", "ObjectPolicyPermission"]
