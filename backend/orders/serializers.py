from decimal import Decimal
from rest_framework import serializers
from auditapp.serializers import AuditLogSerializer
from .models import ServiceOrder, OrderStatus, PaymentMethod

DATE_INPUT_FORMATS = ["iso-8601", "%Y-%m-%dT%H:%M:%S.%fZ", "%Y-%m-%dT%H:%M:%SZ", "%Y-%m-%dT%H:%M:%S"]


class ServiceOrderSerializer(serializers.ModelSerializer):
    brand_name = serializers.CharField(source="brand.name", read_only=True)
    period_start = serializers.DateField(source="period.start_date", read_only=True, default=None)
    period_end = serializers.DateField(source="period.end_date", read_only=True, default=None)

    class Meta:
        model = ServiceOrder
        fields = "__all__"
        read_only_fields = [f.name for f in ServiceOrder._meta.fields]


class ServiceOrderDetailSerializer(ServiceOrderSerializer):
    history = AuditLogSerializer(source="audit_logs", many=True, read_only=True)


class ServiceOrderWriteSerializer(serializers.Serializer):
    """
    Shape/type validation only. Business rules (period lock, OS uniqueness,
    brand resolution, commission) live in orders.services.
    """
    sequence_number = serializers.IntegerField(min_value=1)
    entry_date = serializers.DateField(input_formats=DATE_INPUT_FORMATS)
    customer_name = serializers.CharField(max_length=200)
    brand = serializers.CharField(max_length=120, help_text="Brand id or brand name")
    service_value = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.01"))
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices, required=False, allow_blank=True, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ServiceOrderPatchSerializer(ServiceOrderWriteSerializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices, required=False)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for field in self.fields.values():
            field.required = False


class BulkStatusSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)
    status = serializers.ChoiceField(choices=OrderStatus.choices)


class BulkDeleteSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)
