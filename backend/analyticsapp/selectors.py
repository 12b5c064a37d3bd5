"""
Read-only dashboard aggregates over service orders.

Monthly figures bucket orders by entry_date (calendar month, local time);
rankings cover all orders regardless of period or status.
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from django.db.models import Q, Sum
from django.utils import timezone

from orders.models import OrderStatus, ServiceOrder

ZERO = Decimal("0.00")
TOP_N = 5


def month_bounds(day: date) -> tuple[date, date]:
    """[first day of day's month, first day of the next month)"""
    start = day.replace(day=1)
    nxt = date(start.year + 1, 1, 1) if start.month == 12 else date(start.year, start.month + 1, 1)
    return start, nxt


def previous_month_start(day: date) -> date:
    start = day.replace(day=1)
    return date(start.year - 1, 12, 1) if start.month == 1 else date(start.year, start.month - 1, 1)


def _money(v) -> Decimal:
    return Decimal(v or ZERO).quantize(ZERO)


def growth_pct(current: Decimal, previous: Decimal) -> Decimal:
    if not previous:
        return Decimal("100")
    return ((current - previous) / previous * 100).quantize(ZERO)


def monthly_stats(today: Optional[date] = None) -> Dict:
    today = today or timezone.localdate()
    start, nxt = month_bounds(today)
    prev_start = previous_month_start(today)

    cur = ServiceOrder.objects.filter(entry_date__gte=start, entry_date__lt=nxt).aggregate(
        total=Sum("commission_value"),
        paid=Sum("commission_value", filter=Q(status=OrderStatus.PAID)),
        pending=Sum("commission_value", filter=Q(status=OrderStatus.PENDING)),
    )
    prev = ServiceOrder.objects.filter(entry_date__gte=prev_start, entry_date__lt=start).aggregate(
        total=Sum("commission_value"),
    )
    current_total, prev_total = _money(cur["total"]), _money(prev["total"])
    return {
        "current_month": {
            "start": start,
            "total": current_total,
            "paid": _money(cur["paid"]),
            "pending": _money(cur["pending"]),
        },
        "prev_month": {"start": prev_start, "total": prev_total},
        "growth": growth_pct(current_total, prev_total),
    }


def top_brands(limit: int = TOP_N) -> List[Dict]:
    rows = (
        ServiceOrder.objects.values("brand__name")
        .annotate(value=Sum("commission_value"))
        .order_by("-value", "brand__name")[:limit]
    )
    return [{"name": r["brand__name"], "value": _money(r["value"])} for r in rows]


def top_customers(limit: int = TOP_N) -> List[Dict]:
    rows = (
        ServiceOrder.objects.values("customer_name")
        .annotate(value=Sum("service_value"))
        .order_by("-value", "customer_name")[:limit]
    )
    return [{"name": r["customer_name"], "value": _money(r["value"])} for r in rows]


def dashboard_summary(today: Optional[date] = None) -> Dict:
    return {
        "monthly_stats": monthly_stats(today),
        "rankings": {"top_brands": top_brands(), "top_customers": top_customers()},
    }
