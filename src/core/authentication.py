"""Bridge between the bearer-token middleware and DRF authentication.

``JWTAuthMiddleware`` resolves the bearer token before the view runs. DRF
still asks its authentication classes who the caller is, so this module
surfaces what the middleware already attached: the user becomes
``request.user`` and the decoded token payload becomes ``request.auth``.
"""

from typing import Any, Optional, Tuple

from rest_framework.authentication import BaseAuthentication


class MiddlewareUserAuthentication(BaseAuthentication):
    """Expose the middleware-resolved user and token payload to DRF.

    No credential parsing happens here. Anonymous requests return ``None`` so
    DRF falls back to ``AnonymousUser`` and permission failures become 401.
    """

    def authenticate(self, request) -> Optional[Tuple[Any, Optional[dict]]]:
        django_request = getattr(request, "_request", None)
        if django_request is None:
            return None

        user = getattr(django_request, "user", None)
        if user is None or not getattr(user, "is_authenticated", False):
            return None

        return user, getattr(django_request, "auth_token_payload", None)

    def authenticate_header(self, request) -> str:
        return "Bearer"


__all__ = ["MiddlewareUserAuthentication"]
