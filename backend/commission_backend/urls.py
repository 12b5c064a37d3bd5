# File: backend/commission_backend/urls.py
from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse
from django.views.generic import RedirectView
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from core.views import healthz


def root(_r):
    return JsonResponse({
        "service": "commission-backend",
        "docs": "/api/docs/",
        "health": "/api/core/healthz/",
    })


urlpatterns = [
    path("health", healthz),
    path("admin", RedirectView.as_view(url="/admin/", permanent=False)),
    path("admin/", admin.site.urls),

    # API docs
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),

    # Feature routers
    path("api/core/", include("core.urls")),
    path("api/", include("orders.urls")),
    path("api/", include("periods.urls")),
    path("api/", include("brands.urls")),
    path("api/", include("auditapp.urls")),
    path("api/", include("settingsapp.urls")),
    path("api/", include("analyticsapp.urls")),

    path("", root),
]
