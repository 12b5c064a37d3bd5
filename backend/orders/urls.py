from rest_framework.routers import DefaultRouter
from django.urls import path, include
from .views import ServiceOrderViewSet

router = DefaultRouter(trailing_slash=False)
router.register(r'orders', ServiceOrderViewSet, basename='order')

urlpatterns = [path('', include(router.urls))]
