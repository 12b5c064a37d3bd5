from rest_framework import mixins, status
from rest_framework.decorators import action
from rest_framework.response import Response

from auditapp.serializers import AuditLogSerializer
from common.mixins import EngineModelViewSet
from . import services
from .models import ServiceOrder
from .serializers import (
    ServiceOrderSerializer, ServiceOrderDetailSerializer, ServiceOrderWriteSerializer,
    ServiceOrderPatchSerializer, BulkStatusSerializer, BulkDeleteSerializer,
)


class ServiceOrderViewSet(mixins.CreateModelMixin,
                          mixins.UpdateModelMixin,
                          mixins.DestroyModelMixin,
                          EngineModelViewSet):
    """
    Orders. Reads are plain queries; every write goes through orders.services
    so period locking, commission and aggregates stay consistent.
    - q: searches customer name, description, brand name
    - status / period / brand / payment_method: exact filters
    - entry_date__gte / entry_date__lte: date range
    """
    queryset = ServiceOrder.objects.select_related("brand", "period")
    serializer_class = ServiceOrderSerializer

    filterset_fields = {
        "status": ["exact", "in"],
        "period": ["exact", "isnull"],
        "brand": ["exact"],
        "payment_method": ["exact"],
        "entry_date": ["gte", "lte"],
    }
    search_fields = ("customer_name", "description", "brand__name")
    ordering_fields = ("entry_date", "sequence_number", "service_value", "commission_value", "created_at")
    default_ordering = ("-entry_date", "-sequence_number")

    def get_serializer_class(self):
        if self.action == "create":
            return ServiceOrderWriteSerializer
        if self.action in ("update", "partial_update"):
            return ServiceOrderPatchSerializer
        if self.action == "retrieve":
            return ServiceOrderDetailSerializer
        return super().get_serializer_class()

    def create(self, request, *args, **kwargs):
        ser = self.get_serializer(data=request.data)
        ser.is_valid(raise_exception=True)
        order = services.create_order(**ser.validated_data)
        return Response(ServiceOrderSerializer(order).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        # PUT and PATCH are both partial: callers send only the fields they change
        ser = ServiceOrderPatchSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        order = services.update_order(kwargs["pk"], ser.validated_data)
        return Response(ServiceOrderSerializer(order).data)

    def destroy(self, request, *args, **kwargs):
        services.delete_order(kwargs["pk"])
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["POST"], url_path="duplicate")
    def duplicate(self, request, pk=None):
        order = services.duplicate_order(pk)
        return Response(ServiceOrderSerializer(order).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["GET"], url_path="history")
    def history(self, request, pk=None):
        order = self.get_object()
        return Response(AuditLogSerializer(order.audit_logs.all(), many=True).data)

    @action(detail=False, methods=["POST"], url_path="bulk-status")
    def bulk_status(self, request):
        ser = BulkStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        orders = services.bulk_update_status(ser.validated_data["ids"], ser.validated_data["status"])
        return Response({"updated": len(orders), "results": ServiceOrderSerializer(orders, many=True).data})

    @action(detail=False, methods=["POST"], url_path="bulk-delete")
    def bulk_delete(self, request):
        ser = BulkDeleteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        deleted = services.bulk_delete_orders(ser.validated_data["ids"])
        return Response({"deleted": deleted})
