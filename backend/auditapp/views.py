from common.mixins import EngineModelViewSet
from common.pagination import AuditPagination
from .models import AuditLog
from .serializers import AuditLogSerializer


class AuditLogViewSet(EngineModelViewSet):
    """
    Read-only audit trail, newest first.
    ?page=&limit= paginate; ?order=<uuid> and ?action=<ACTION> narrow it down.
    """
    queryset = AuditLog.objects.select_related("order")
    serializer_class = AuditLogSerializer
    pagination_class = AuditPagination

    filterset_fields = {
        "order": ["exact", "isnull"],
        "action": ["exact"],
        "timestamp": ["gte", "lte"],
    }
    search_fields = ("details",)
    default_ordering = ("-timestamp", "-id")

    def _apply_ordering(self, qs):
        # fixed order; the `order` query param is the order-id filter here
        return qs.order_by(*self.default_ordering)
