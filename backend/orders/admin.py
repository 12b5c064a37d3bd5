from django.contrib import admin
from .models import ServiceOrder


@admin.register(ServiceOrder)
class ServiceOrderAdmin(admin.ModelAdmin):
    """Read-only: edits must go through the API so period totals stay in sync."""
    list_display = ("sequence_number", "entry_date", "customer_name", "brand", "service_value",
                    "commission_value", "status", "period")
    list_filter = ("status", "payment_method")
    search_fields = ("customer_name", "=sequence_number")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
