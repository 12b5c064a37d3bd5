from django.contrib import admin
from .models import Period


@admin.register(Period)
class PeriodAdmin(admin.ModelAdmin):
    list_display = ("start_date", "end_date", "paid", "paid_at", "total_orders", "total_service_value", "total_commission")
    list_filter = ("paid",)
    readonly_fields = ("paid", "paid_at", "total_orders", "total_service_value", "total_commission")
