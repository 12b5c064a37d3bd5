from rest_framework.routers import DefaultRouter
from django.urls import path, include
from .views import PeriodViewSet

router = DefaultRouter(trailing_slash=False)
router.register(r'periods', PeriodViewSet, basename='period')

urlpatterns = [path('', include(router.urls))]
