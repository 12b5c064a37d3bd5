# backend/common/mixins.py
from __future__ import annotations

from typing import Iterable, Dict, Any
from django.db.models import Q, Model
from django.core.exceptions import FieldDoesNotExist
from rest_framework import mixins, viewsets

from .pagination import DefaultPagination


# -----------------------------
# Base query-aware ViewSet
# -----------------------------
class QueryableViewSetMixin:
    """
    Generic list plumbing shared by the engine's read endpoints:

    - Adds simple "q" search (icontains across `search_fields`) and "order" (comma-separated).
    - Applies simple exact filters from query params that match model fields.

    Override:
      - `search_fields` (tuple of field names)
      - `ordering_fields` (tuple of field names allowed for ordering)
      - `default_ordering` (sequence)
    """
    pagination_class = DefaultPagination

    search_fields: Iterable[str] = tuple()
    ordering_fields: Iterable[str] = tuple()
    default_ordering: Iterable[str] = ("-created_at",)

    # ---- Queryset plumbing ----
    def _model_class(self) -> type[Model]:
        if getattr(self, "queryset", None) is not None:
            return self.queryset.model
        return self.get_serializer().Meta.model  # type: ignore[attr-defined]

    def _has_field(self, field_name: str) -> bool:
        try:
            self._model_class()._meta.get_field(field_name)
            return True
        except FieldDoesNotExist:
            return False

    def _apply_search(self, qs):
        q = self.request.query_params.get("q")
        if not q:
            return qs
        fields = tuple(self.search_fields) or tuple(
            f for f in ("name", "customer_name", "description") if self._has_field(f)
        )
        if not fields:
            return qs
        cond = Q()
        for f in fields:
            cond |= Q(**{f"{f}__icontains": q})
        return qs.filter(cond)

    def _apply_ordering(self, qs):
        order_param = self.request.query_params.get("order")
        fields_allowed = set(self.ordering_fields or ())
        if order_param:
            items = [s.strip() for s in order_param.split(",") if s.strip()]
            cleaned = []
            for it in items:
                base = it[1:] if it.startswith("-") else it
                if not fields_allowed or base in fields_allowed:
                    cleaned.append(it)
            if cleaned:
                return qs.order_by(*cleaned)
        return qs.order_by(*self.default_ordering) if self.default_ordering else qs

    def _apply_simple_filters(self, qs):
        """
        For any query param that matches a real model field (and is not a control param),
        apply an exact filter. For 'in' semantics, allow CSV via <field>__in=a,b,c
        """
        if getattr(self, "filterset_fields", None):
            return qs  # DjangoFilterBackend owns field filters for this view
        IGNORE = {"q", "order", "page", "page_size", "limit"}
        params = self.request.query_params
        filters: Dict[str, Any] = {}

        for key, value in params.items():
            if key in IGNORE:
                continue
            base = key.split("__", 1)[0]
            if not self._has_field(base):
                continue
            if key.endswith("__in"):
                filters[key] = [v for v in value.split(",") if v != ""]
            else:
                filters[key] = value

        return qs.filter(**filters) if filters else qs

    def get_queryset(self):
        qs = super().get_queryset()  # type: ignore[misc]
        if self.action != "list":
            return qs
        qs = self._apply_simple_filters(qs)
        qs = self._apply_search(qs)
        qs = self._apply_ordering(qs)
        return qs


class EngineModelViewSet(QueryableViewSetMixin,
                         mixins.ListModelMixin,
                         mixins.RetrieveModelMixin,
                         viewsets.GenericViewSet):
    """
    Read side comes from DRF; writes are declared per ViewSet and routed to the
    engine services (create/update/destroy never call serializer.save() directly).
    """
