"""Routing for comment endpoints."""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import AdminCommentsView, ArticleCommentsView, CommentViewSet

router = DefaultRouter(trailing_slash=False)
router.include_root_view = False
router.register(r"comments", CommentViewSet, basename="comment")

urlpatterns = [
    path("articles/<int:article_id>/comments", ArticleCommentsView.as_view(), name="article-comments"),
    path("admin/comments", AdminCommentsView.as_view(), name="admin-comments"),
    path("", include(router.urls)),
]
