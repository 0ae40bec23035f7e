"""Article endpoints: public reads, owner writes, Admin status transitions."""

import logging

from rest_framework import status
from rest_framework.decorators import action

from access_control import policies
from access_control.permissions import IsAdminRole, IsAuthenticatedUser, ObjectPolicyPermission
from core.response import ArticlePagination, BaseAPIView, BaseViewSet, api_response
from . import services
from .models import Article
from .serializers import ArticleSerializer, ArticleWriteSerializer

logger = logging.getLogger(__name__)


class ArticleViewSet(BaseViewSet):
    serializer_class = ArticleSerializer
    pagination_class = ArticlePagination
    permission_classes = [ObjectPolicyPermission]
    lookup_value_regex = r"\d+"
    http_method_names = ["get", "post", "put", "delete", "head", "options"]

    object_policies = {
        "retrieve": policies.can_view_article,
        "update": policies.can_edit_article,
        "destroy": policies.can_delete_article,
        "archive": policies.can_change_article_status,
        "publish": policies.can_change_article_status,
    }

    def get_permissions(self):
        if self.action in ("create", "update", "destroy"):
            return [IsAuthenticatedUser(), ObjectPolicyPermission()]
        if self.action in ("archive", "publish", "stats"):
            return [IsAdminRole(), ObjectPolicyPermission()]
        return [ObjectPolicyPermission()]

    def get_queryset(self):
        queryset = Article.objects.select_related("owner")
        if self.action == "list":
            return queryset.filter(status=Article.Status.PUBLISHED).order_by("-publish_date", "-id")
        return queryset

    def create(self, request, *args, **kwargs):
        """Create an article owned by the caller, with optional image upload."""
        serializer = ArticleWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        image_file = data.pop("image", None)
        article = services.create_article(request.user, data, image_file=image_file)
        return api_response(
            ArticleSerializer(article).data,
            status=status.HTTP_201_CREATED,
            message="Article created successfully.",
        )

    def update(self, request, *args, **kwargs):
        """Owner-only content edit; a status field in the payload is ignored."""
        article = self.get_object()
        serializer = ArticleWriteSerializer(data=request.data, partial=kwargs.get("partial", False))
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        image_file = data.pop("image", None)
        article = services.update_article_content(article, data, image_file=image_file)
        return api_response(ArticleSerializer(article).data, message="Article successfully updated.")

    def destroy(self, request, *args, **kwargs):
        article = self.get_object()
        services.delete_article(article)
        return api_response(None, message="Article successfully deleted.")

    @action(detail=True, methods=["put"])
    def archive(self, request, pk=None):
        article = self.get_object()
        if not services.archive(article, request.user):
            return api_response(ArticleSerializer(article).data, message="Article is already archived.")
        return api_response(ArticleSerializer(article).data, message="Article successfully archived.")

    @action(detail=True, methods=["put"])
    def publish(self, request, pk=None):
        article = self.get_object()
        if not services.publish(article, request.user):
            return api_response(ArticleSerializer(article).data, message="Article is already published.")
        return api_response(ArticleSerializer(article).data, message="Article successfully published.")

    @action(detail=False, methods=["get"])
    def stats(self, request):
        """Global counters for the admin dashboard."""
        return api_response(services.dashboard_stats())


class AdminArticleListView(BaseAPIView):
    """Every article, Published and Archived, newest first."""

    permission_classes = [IsAdminRole]

    # noinspection PyMethodMayBeStatic
    def get(self, request):
        articles = Article.objects.select_related("owner").order_by("-publish_date", "-id")
        return api_response(ArticleSerializer(articles, many=True).data)


class MyArticleListView(BaseAPIView):
    """The caller's own articles in both statuses."""

    permission_classes = [IsAuthenticatedUser]

    # noinspection PyMethodMayBeStatic
    def get(self, request):
        articles = Article.objects.select_related("owner").filter(owner=request.user).order_by("-created_at")
        return api_response(ArticleSerializer(articles, many=True).data)


__all__ = ["ArticleViewSet", "AdminArticleListView", "MyArticleListView"]
