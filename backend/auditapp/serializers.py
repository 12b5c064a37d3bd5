from rest_framework import serializers
from .models import AuditLog


class AuditLogSerializer(serializers.ModelSerializer):
    sequence_number = serializers.IntegerField(source="order.sequence_number", read_only=True, default=None)

    class Meta:
        model = AuditLog
        fields = ("id", "order", "sequence_number", "user_id", "action", "details", "timestamp")
        read_only_fields = fields
