from django.urls import path
from .views import CommissionSettingsView

urlpatterns = [path('settings', CommissionSettingsView.as_view(), name='settings')]
