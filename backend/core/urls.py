from django.urls import path

from .views import healthz, VersionView, DeepHealthView

urlpatterns = [
    path('healthz/', healthz),
    path('version/', VersionView.as_view()),
    path('deep-health/', DeepHealthView.as_view()),
]
