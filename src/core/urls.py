"""Root URL configuration for the CloudBlog API."""
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

urlpatterns = [
    path("schema", SpectacularAPIView.as_view(), name="schema"),
    path("docs", SpectacularSwaggerView.as_view(url_name="schema"), name="docs"),
    path("", include("authentication.urls")),
    path("", include("articles.urls")),
    path("", include("comments.urls")),
]
