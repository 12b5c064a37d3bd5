from django.db.models import Count
from rest_framework import mixins, status
from rest_framework.response import Response

from common.mixins import EngineModelViewSet
from . import services
from .models import Brand
from .serializers import BrandSerializer


class BrandViewSet(mixins.CreateModelMixin,
                   mixins.UpdateModelMixin,
                   mixins.DestroyModelMixin,
                   EngineModelViewSet):
    """Brands, alphabetical. `q` searches by name."""
    queryset = Brand.objects.annotate(order_count=Count("orders"))
    serializer_class = BrandSerializer
    pagination_class = None

    search_fields = ("name",)
    ordering_fields = ("name", "created_at")
    default_ordering = ("name",)

    def create(self, request, *args, **kwargs):
        ser = self.get_serializer(data=request.data)
        ser.is_valid(raise_exception=True)
        brand = services.create_brand(ser.validated_data["name"])
        return Response(BrandSerializer(brand).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        ser = self.get_serializer(data=request.data)
        ser.is_valid(raise_exception=True)
        brand = services.rename_brand(kwargs["pk"], ser.validated_data["name"])
        return Response(BrandSerializer(brand).data)

    def destroy(self, request, *args, **kwargs):
        services.delete_brand(kwargs["pk"])
        return Response(status=status.HTTP_204_NO_CONTENT)
