from rest_framework import mixins, status
from rest_framework.decorators import action
from rest_framework.response import Response

from common.mixins import EngineModelViewSet
from . import services
from .models import Period
from .serializers import PeriodSerializer, PeriodCreateSerializer


class PeriodViewSet(mixins.CreateModelMixin,
                    mixins.DestroyModelMixin,
                    EngineModelViewSet):
    """
    Settlement periods (newest first).
    Periods normally appear on their own when an order lands in a new bucket;
    POST creates one by hand with explicit dates.
    """
    queryset = Period.objects.all()
    serializer_class = PeriodSerializer

    filterset_fields = {
        "paid": ["exact"],
        "start_date": ["exact", "gte", "lte"],
        "end_date": ["exact", "gte", "lte"],
    }
    ordering_fields = ("start_date", "end_date", "total_commission", "total_orders")
    default_ordering = ("-start_date",)

    def get_serializer_class(self):
        if self.action == "create":
            return PeriodCreateSerializer
        return super().get_serializer_class()

    def create(self, request, *args, **kwargs):
        ser = self.get_serializer(data=request.data)
        ser.is_valid(raise_exception=True)
        period = services.create_period(ser.validated_data["start_date"], ser.validated_data["end_date"])
        return Response(PeriodSerializer(period).data, status=status.HTTP_201_CREATED)

    def destroy(self, request, *args, **kwargs):
        released = services.delete_period(kwargs["pk"])
        return Response({"success": True, "orders_released": released})

    @action(detail=True, methods=["POST"], url_path="pay")
    def pay(self, request, pk=None):
        closure = services.pay_period(pk)
        return Response({
            "success": True,
            "orders_paid": closure.orders_paid,
            "period": PeriodSerializer(closure.period).data,
        })

    @action(detail=True, methods=["POST"], url_path="recompute")
    def recompute(self, request, pk=None):
        period = services.recompute_period(pk)
        return Response(PeriodSerializer(period).data)
