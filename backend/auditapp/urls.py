from rest_framework.routers import DefaultRouter
from django.urls import path, include
from .views import AuditLogViewSet

router = DefaultRouter(trailing_slash=False)
router.register(r'audit', AuditLogViewSet, basename='audit')

urlpatterns = [path('', include(router.urls))]
