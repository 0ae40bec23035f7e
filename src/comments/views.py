"""Comment endpoints: per-article threads, author edits, reports, moderation."""

import logging

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response

from access_control import policies
from access_control.permissions import IsAdminRole, IsAuthenticatedUser, ObjectPolicyPermission
from articles.models import Article
from core.exceptions import AuthorizationDenied
from core.response import BaseAPIView, BaseViewSet, api_response
from . import selectors, services
from .models import Comment
from .serializers import (
    CommentSerializer,
    CommentWriteSerializer,
    ModerateSerializer,
    ModerationCommentSerializer,
    ModerationFilterSerializer,
)

logger = logging.getLogger(__name__)


class CommentViewSet(BaseViewSet):
    queryset = Comment.objects.select_related("author")
    serializer_class = CommentSerializer
    permission_classes = [ObjectPolicyPermission]
    lookup_value_regex = r"\d+"
    http_method_names = ["put", "delete", "options"]

    object_policies = {
        "update": policies.can_edit_comment,
        "destroy": policies.can_delete_comment,
        "report": policies.can_report_comment,
        "moderate": policies.can_moderate_comment,
        "report_toggle": policies.can_moderate_comment,
    }

    def get_permissions(self):
        if self.action in ("moderate", "report_toggle"):
            return [IsAdminRole(), ObjectPolicyPermission()]
        return [IsAuthenticatedUser(), ObjectPolicyPermission()]

    def update(self, request, *args, **kwargs):
        """Author edit; the comment goes back to Pending."""
        comment = self.get_object()
        serializer = CommentWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        comment = services.edit_comment(comment, serializer.validated_data["content"])
        return api_response(CommentSerializer(comment).data, message="Comment updated and awaiting moderation.")

    def destroy(self, request, *args, **kwargs):
        comment = self.get_object()
        services.delete_comment(comment, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["put"])
    def report(self, request, pk=None):
        comment = self.get_object()
        if not services.report(comment, request.user):
            return api_response(CommentSerializer(comment).data, message="Comment has already been reported.")
        return api_response(CommentSerializer(comment).data, message="Comment reported.")

    @action(detail=True, methods=["put"])
    def moderate(self, request, pk=None):
        comment = self.get_object()
        serializer = ModerateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        comment = services.moderate(comment, serializer.validated_data["status"], request.user)
        return api_response(CommentSerializer(comment).data, message=f"Comment {comment.status.lower()}.")

    @action(detail=True, methods=["put"], url_path="report-toggle")
    def report_toggle(self, request, pk=None):
        """Resolve a report: clears the flag and leaves the status alone."""
        comment = self.get_object()
        comment = services.resolve_report(comment, request.user)
        return api_response(CommentSerializer(comment).data, message="Report resolved.")


class ArticleCommentsView(BaseAPIView):
    """Comment thread of one article.

    GET is public and filtered by the visibility rules. POST needs a token
    and an article the caller is allowed to see.
    """

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsAuthenticatedUser()]
        return []

    @staticmethod
    def _visible_article(request, article_id):
        article = get_object_or_404(Article, pk=article_id)
        decision = policies.can_view_article(request.user, article)
        if not decision:
            raise AuthorizationDenied(decision.reason)
        return article

    def get(self, request, article_id):
        article = self._visible_article(request, article_id)
        comments = selectors.visible_comments_for(article, request.user)
        return api_response(CommentSerializer(comments, many=True).data)

    def post(self, request, article_id):
        article = self._visible_article(request, article_id)
        serializer = CommentWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        comment = services.create_comment(article, request.user, serializer.validated_data["content"])
        return api_response(CommentSerializer(comment).data, status=status.HTTP_201_CREATED, message="Comment posted.")


class AdminCommentsView(BaseAPIView):
    """Moderation dashboard: filtered list plus whole-table counters."""

    permission_classes = [IsAdminRole]

    # noinspection PyMethodMayBeStatic
    def get(self, request):
        filters = ModerationFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        comments = selectors.moderation_queryset(**filters.validated_data)
        return api_response(
            {
                "comments": ModerationCommentSerializer(comments, many=True).data,
                "stats": selectors.moderation_stats(),
            }
        )


__all__ = ["CommentViewSet", "ArticleCommentsView", "AdminCommentsView"]
