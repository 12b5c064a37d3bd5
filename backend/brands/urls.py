from rest_framework.routers import DefaultRouter
from django.urls import path, include
from .views import BrandViewSet

router = DefaultRouter(trailing_slash=False)
router.register(r'brands', BrandViewSet, basename='brand')

urlpatterns = [path('', include(router.urls))]
