"""System checks for the authorization wiring."""

from django.core.checks import Error, register

from access_control.permissions import ObjectPolicyPermission


@register()
def object_policy_views_declare_policies(app_configs, **kwargs):
    """Ensure views using ObjectPolicyPermission declare ``object_policies``.

    Without the mapping every object-level check would silently allow, so
    the project refuses to start instead. Only the known viewsets are
    inspected; new policy-protected views should be added here.
    """
    errors: list[Error] = []

    # Import here to avoid circular imports at module load time.
    from articles.views import ArticleViewSet
    from comments.views import CommentViewSet

    policy_views = [ArticleViewSet, CommentViewSet]

    for view_cls in policy_views:
        permission_classes = getattr(view_cls, "permission_classes", [])
        if ObjectPolicyPermission in permission_classes:
            policies = getattr(view_cls, "object_policies", None)
            if not policies:
                errors.append(
                    Error(
                        f"{view_cls.__name__} uses ObjectPolicyPermission but does not "
                        f"define object_policies.",
                        obj=view_cls,
                        id="access_control.E001",
                    )
                )

    return errors
