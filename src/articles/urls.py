"""Routing for article endpoints."""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import AdminArticleListView, ArticleViewSet, MyArticleListView

router = DefaultRouter(trailing_slash=False)
router.include_root_view = False
router.register(r"articles", ArticleViewSet, basename="article")

urlpatterns = [
    path("admin/articles", AdminArticleListView.as_view(), name="admin-articles"),
    path("user/articles", MyArticleListView.as_view(), name="my-articles"),
    path("", include(router.urls)),
]
