from rest_framework import serializers
from .models import CommissionSettings


class CommissionSettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = CommissionSettings
        fields = [
            "commission_rate", "company_name", "company_tax_id", "company_address",
            "company_contact", "company_logo_url", "primary_color", "updated_at",
        ]
        read_only_fields = ["updated_at"]

    def validate_primary_color(self, value):
        if value and not (len(value) == 7 and value.startswith("#")):
            raise serializers.ValidationError("Use a hex colour such as #1d4ed8.")
        return value
