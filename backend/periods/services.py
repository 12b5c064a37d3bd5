"""
Period-side operations of the commission engine.

- ensure_period_exists: find-or-create the bucket an entry date falls into.
- recompute_totals (PeriodAggregator): rewrite the cached totals from members.
- pay_period / delete_period (PeriodCloser): atomic multi-row transitions.
- create_period: manual override that bypasses the resolver.

Every write here runs in transaction.atomic; a raised error leaves no
partial state behind.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Count, Sum
from django.utils import timezone

from auditapp.models import AuditAction
from auditapp.services.audit import log_events
from common.exceptions import AlreadyPaid, ValidationFailure
from common.lookups import get_or_not_found
from .models import Period
from .resolver import PeriodStrategy, resolve

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


@dataclass(frozen=True, slots=True)
class PeriodTotals:
    total_orders: int
    total_service_value: Decimal
    total_commission: Decimal


@dataclass(frozen=True, slots=True)
class PeriodClosure:
    period: Period
    orders_paid: int


def _as_date(day) -> date:
    if isinstance(day, datetime):
        return timezone.localtime(day).date() if timezone.is_aware(day) else day.date()
    return day


def default_strategy() -> PeriodStrategy:
    return PeriodStrategy(getattr(settings, "COMMISSION_PERIOD_STRATEGY", PeriodStrategy.BIWEEKLY))


def get_period(period_id, *, lock: bool = False) -> Period:
    qs = Period.objects.select_for_update() if lock else Period.objects.all()
    return get_or_not_found(qs, period_id, "Period")


@transaction.atomic
def ensure_period_exists(day, strategy: Optional[PeriodStrategy | str] = None) -> Period:
    """
    Return the Period whose [start, end] the resolver assigns to `day`, creating
    it (unpaid, zero totals) on first touch. Concurrent first touches of one
    bucket meet at the (start_date, end_date) unique constraint; the loser's
    IntegrityError is caught in a savepoint and the winner's row re-selected.
    """
    boundary = resolve(_as_date(day), strategy or default_strategy())
    lookup = {"start_date": boundary.start, "end_date": boundary.end}
    try:
        return Period.objects.get(**lookup)
    except Period.DoesNotExist:
        pass
    try:
        with transaction.atomic():
            period = Period.objects.create(**lookup)
    except IntegrityError:
        logger.info("Period %s .. %s created concurrently; re-selecting", boundary.start, boundary.end)
        return Period.objects.get(**lookup)
    logger.info("Period %s created", period)
    return period


def recompute_totals(period_id) -> PeriodTotals:
    """
    Overwrite the period's cached totals with the aggregate over its current
    members. Idempotent; does nothing else.
    """
    from orders.models import ServiceOrder

    agg = ServiceOrder.objects.filter(period_id=period_id).aggregate(
        total_orders=Count("id"),
        total_service_value=Sum("service_value"),
        total_commission=Sum("commission_value"),
    )
    totals = PeriodTotals(
        total_orders=agg["total_orders"] or 0,
        total_service_value=Decimal(agg["total_service_value"] or ZERO).quantize(ZERO),
        total_commission=Decimal(agg["total_commission"] or ZERO).quantize(ZERO),
    )
    Period.objects.filter(pk=period_id).update(
        total_orders=totals.total_orders,
        total_service_value=totals.total_service_value,
        total_commission=totals.total_commission,
        updated_at=timezone.now(),
    )
    return totals


@transaction.atomic
def recompute_period(period_id) -> Period:
    period = get_period(period_id, lock=True)
    recompute_totals(period.pk)
    period.refresh_from_db()
    return period


@transaction.atomic
def pay_period(period_id, *, user_id: Optional[str] = None) -> PeriodClosure:
    """
    Lock the period and flip all of its non-paid orders to PAID with one
    set-based UPDATE, writing one STATUS_CHANGE entry per flipped order.
    Totals are left alone: sums are over service/commission value, not status.
    """
    from orders.models import OrderStatus, ServiceOrder

    period = get_period(period_id, lock=True)
    if period.paid:
        raise AlreadyPaid()

    now = timezone.now()
    period.paid = True
    period.paid_at = now
    period.save(update_fields=["paid", "paid_at", "updated_at"])

    pending_ids = list(
        ServiceOrder.objects.select_for_update()
        .filter(period=period)
        .exclude(status=OrderStatus.PAID)
        .values_list("id", flat=True)
    )
    if pending_ids:
        ServiceOrder.objects.filter(id__in=pending_ids).update(
            status=OrderStatus.PAID, paid_at=now, updated_at=now
        )
        log_events(order_ids=pending_ids, action=AuditAction.STATUS_CHANGE,
                   details="Period closed and paid", user_id=user_id, timestamp=now)

    logger.info("Period %s closed; %d order(s) marked paid", period, len(pending_ids))
    return PeriodClosure(period=period, orders_paid=len(pending_ids))


@transaction.atomic
def delete_period(period_id, *, user_id: Optional[str] = None) -> int:
    """
    Administrative override: unlink every member (period cleared, status forced
    to PENDING, paid_at cleared) and drop the period row, paid or not.
    Returns the number of orders released.
    """
    from orders.models import OrderStatus, ServiceOrder

    period = get_period(period_id, lock=True)
    members = list(
        ServiceOrder.objects.select_for_update()
        .filter(period=period)
        .values_list("id", "status")
    )
    now = timezone.now()
    released = ServiceOrder.objects.filter(period=period).update(
        period=None, status=OrderStatus.PENDING, paid_at=None, updated_at=now
    )
    reset_ids = [oid for oid, status in members if status == OrderStatus.PAID]
    log_events(order_ids=reset_ids, action=AuditAction.STATUS_CHANGE,
               details="Period deleted; status reset to PENDING", user_id=user_id, timestamp=now)

    label = str(period)
    period.delete()
    logger.info("Period %s deleted; %d order(s) released", label, released)
    return released


@transaction.atomic
def create_period(start: date, end: date) -> Period:
    """Manual override: the boundary is taken as given, not resolved."""
    if start > end:
        raise ValidationFailure("start_date must be on or before end_date.")
    if Period.objects.filter(start_date=start, end_date=end).exists():
        raise ValidationFailure("A period with these dates already exists.")
    try:
        with transaction.atomic():
            period = Period.objects.create(start_date=start, end_date=end)
    except IntegrityError as exc:
        raise ValidationFailure("A period with these dates already exists.") from exc
    logger.info("Period %s created manually", period)
    return period


__all__ = [
    "PeriodTotals", "PeriodClosure", "default_strategy", "get_period", "ensure_period_exists",
    "recompute_totals", "recompute_period", "pay_period", "delete_period", "create_period",
]
