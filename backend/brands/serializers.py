from rest_framework import serializers
from .models import Brand


class BrandSerializer(serializers.ModelSerializer):
    order_count = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = Brand
        fields = ["id", "name", "order_count", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]
        extra_kwargs = {"name": {"validators": []}}  # uniqueness is enforced by brands.services
