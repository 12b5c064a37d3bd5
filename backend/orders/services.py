"""
OrderLifecycle: create / update / delete of service orders.

States are PENDING and PAID. An order is settled (read-only) once it is PAID
or its period is paid; every write path below checks that under a row lock
on the order and its period before touching anything, and every path ends by
bringing the affected period totals back in line with their members.
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional

from django.db import IntegrityError, transaction
from django.db.models import Max
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from auditapp.models import AuditAction
from auditapp.services.audit import log_event, purge_order_trail
from brands.resolver import resolve as resolve_brand
from common.exceptions import DuplicateSequenceNumber, Immutable, PeriodLocked, ValidationFailure
from common.lookups import get_or_not_found
from periods.models import Period
from periods.services import ensure_period_exists, get_period, recompute_totals
from settingsapp.selectors import current_commission_rate
from .commission import compute_commission, to_money
from .models import OrderStatus, PaymentMethod, ServiceOrder

logger = logging.getLogger(__name__)

FIRST_SEQUENCE_FLOOR = 1000

UPDATABLE_FIELDS = {
    "sequence_number", "entry_date", "customer_name", "brand",
    "service_value", "payment_method", "description", "status",
}


# ---- Input coercion ----

def _as_date(value) -> date:
    if isinstance(value, datetime):
        return timezone.localtime(value).date() if timezone.is_aware(value) else value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        parsed = parse_date(value)
        if parsed is None:
            dt = parse_datetime(value)
            parsed = _as_date(dt) if dt else None
        if parsed is not None:
            return parsed
    raise ValidationFailure("entry_date must be a date (YYYY-MM-DD).")


def _as_service_value(value) -> Decimal:
    try:
        money = to_money(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationFailure("service_value must be a number.") from None
    if money <= 0:
        raise ValidationFailure("service_value must be positive.")
    return money


def _as_sequence_number(value) -> int:
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationFailure("sequence_number must be an integer.")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationFailure("sequence_number must be an integer.") from None
    if number <= 0:
        raise ValidationFailure("sequence_number must be a positive integer.")
    return number


def _as_payment_method(value) -> Optional[str]:
    if value in (None, ""):
        return None
    if value not in PaymentMethod.values:
        raise ValidationFailure(f"payment_method must be one of {', '.join(PaymentMethod.values)}.")
    return value


def _as_customer_name(value) -> str:
    name = (value or "").strip()
    if not name:
        raise ValidationFailure("customer_name is required.")
    return name


def _as_status(value) -> str:
    if value not in OrderStatus.values:
        raise ValidationFailure(f"status must be one of {', '.join(OrderStatus.values)}.")
    return value


# ---- Persistence helpers ----

def _save_order(order: ServiceOrder, **save_kwargs) -> None:
    """Save inside a savepoint; a clash on the OS number becomes a typed failure."""
    try:
        with transaction.atomic():
            order.save(**save_kwargs)
    except IntegrityError as exc:
        clash = ServiceOrder.objects.filter(sequence_number=order.sequence_number).exclude(pk=order.pk).exists()
        if clash:
            raise DuplicateSequenceNumber(f"OS number {order.sequence_number} already exists.") from exc
        raise


def _ensure_sequence_free(number: int, *, exclude_pk=None) -> None:
    qs = ServiceOrder.objects.filter(sequence_number=number)
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    if qs.exists():
        raise DuplicateSequenceNumber(f"OS number {number} already exists.")


def _open_period_for(day: date) -> Period:
    """Resolve (creating if needed) and lock the period for `day`; refuse paid ones."""
    period = get_period(ensure_period_exists(day).pk, lock=True)
    if period.paid:
        raise PeriodLocked(f"Cannot add orders to the paid period {period}.")
    return period


def _load_for_write(order_id, *, target_day: Optional[date] = None, relink: bool = False):
    """
    Lock an order for writing and return ``(order, period, target)``.

    Period rows are locked before the order row, the same order pay_period and
    delete_period use. `target` is the period the order should end up in: the
    bucket for `target_day` when that differs from the entry date, the bucket for
    the entry date when the order is orphaned and `relink` is set, otherwise its
    current period. Raises Immutable for settled orders, PeriodLocked for a paid
    target, and Immutable if the order changed period between read and lock.
    """
    snapshot = get_or_not_found(ServiceOrder.objects.all(), order_id, "Order")

    target_id = snapshot.period_id
    if target_day is not None and target_day != snapshot.entry_date:
        target_id = ensure_period_exists(target_day).pk
    elif snapshot.period_id is None and relink:
        target_id = ensure_period_exists(snapshot.entry_date).pk

    wanted = {pk for pk in (snapshot.period_id, target_id) if pk is not None}
    locked = {p.pk: p for p in Period.objects.select_for_update().filter(pk__in=wanted).order_by("pk")}

    order = get_or_not_found(ServiceOrder.objects.select_for_update(), order_id, "Order")
    if order.period_id != snapshot.period_id or (order.period_id and order.period_id not in locked):
        raise Immutable(f"OS #{order.sequence_number} changed period concurrently; reload and retry.")
    period = locked.get(order.period_id) if order.period_id else None
    order.period = period
    if order.is_locked:
        raise Immutable(f"OS #{order.sequence_number} is settled and cannot be changed.")

    target = locked.get(target_id) if target_id else None
    if target_id and target is None:
        raise Immutable(f"OS #{order.sequence_number} changed period concurrently; reload and retry.")
    if target is not None and target.paid:
        raise PeriodLocked(f"Cannot move orders into the paid period {target}.")
    return order, period, target


def next_sequence_number() -> int:
    current = ServiceOrder.objects.aggregate(m=Max("sequence_number"))["m"] or 0
    return max(current, FIRST_SEQUENCE_FLOOR) + 1


# ---- Lifecycle ----

def _create(*, sequence_number, entry_date, customer_name, brand, service_value,
            payment_method=None, description=None, user_id=None,
            audit_action: str = AuditAction.CREATED, audit_details: Optional[str] = None) -> ServiceOrder:
    number = _as_sequence_number(sequence_number)
    day = _as_date(entry_date)
    name = _as_customer_name(customer_name)
    value = _as_service_value(service_value)
    method = _as_payment_method(payment_method)

    _ensure_sequence_free(number)
    period = _open_period_for(day)
    brand_obj = resolve_brand(brand)
    rate = current_commission_rate()

    order = ServiceOrder(
        sequence_number=number,
        entry_date=day,
        customer_name=name,
        brand=brand_obj,
        service_value=value,
        commission_rate=rate,
        commission_value=compute_commission(value, rate),
        status=OrderStatus.PENDING,
        payment_method=method,
        description=description or None,
        period=period,
    )
    _save_order(order, force_insert=True)

    log_event(order=order, action=audit_action, user_id=user_id,
              details=audit_details or f"Order created with value {value}")
    recompute_totals(period.pk)
    return order


@transaction.atomic
def create_order(*, sequence_number, entry_date, customer_name, brand, service_value,
                 payment_method=None, description=None, user_id=None) -> ServiceOrder:
    """
    New PENDING order in the period its entry date resolves to.

    Raises PeriodLocked if that period is paid, DuplicateSequenceNumber if the
    OS number is taken, ValidationFailure for malformed input.
    """
    return _create(
        sequence_number=sequence_number, entry_date=entry_date, customer_name=customer_name,
        brand=brand, service_value=service_value, payment_method=payment_method,
        description=description, user_id=user_id,
    )


@transaction.atomic
def update_order(order_id, patch: Dict[str, Any], *, user_id=None) -> ServiceOrder:
    """
    Apply a partial update to a non-settled order.

    entry_date moves the order to the period the new date resolves to (which
    must not be paid); service_value recomputes the commission at the current
    rate; status PAID stamps paid_at, PENDING clears it; brand is re-resolved.
    Orders orphaned by a period deletion are re-linked to their entry date's period.
    """
    unknown = set(patch) - UPDATABLE_FIELDS
    if unknown:
        raise ValidationFailure(f"Unknown or read-only field(s): {', '.join(sorted(unknown))}.")

    day = _as_date(patch["entry_date"]) if "entry_date" in patch else None
    order, old_period, new_period = _load_for_write(order_id, target_day=day, relink=True)
    changes: List[str] = []

    def _track(field: str, old, new):
        if old != new:
            changes.append(f"{field} ({old} -> {new})")

    if "sequence_number" in patch:
        number = _as_sequence_number(patch["sequence_number"])
        if number != order.sequence_number:
            _ensure_sequence_free(number, exclude_pk=order.pk)
        _track("sequence_number", order.sequence_number, number)
        order.sequence_number = number

    if "customer_name" in patch:
        name = _as_customer_name(patch["customer_name"])
        _track("customer_name", order.customer_name, name)
        order.customer_name = name

    if "description" in patch:
        description = patch["description"] or None
        _track("description", order.description, description)
        order.description = description

    if "payment_method" in patch:
        method = _as_payment_method(patch["payment_method"])
        _track("payment_method", order.payment_method, method)
        order.payment_method = method

    if day is not None:
        _track("entry_date", order.entry_date, day)
        order.entry_date = day
    if old_period is None or new_period.pk != old_period.pk:
        _track("period", old_period, new_period)
    order.period = new_period

    if "brand" in patch:
        brand = resolve_brand(patch["brand"])
        _track("brand", order.brand.name, brand.name)
        order.brand = brand

    if "service_value" in patch:
        value = _as_service_value(patch["service_value"])
        rate = current_commission_rate()
        commission = compute_commission(value, rate)
        _track("service_value", order.service_value, value)
        _track("commission_value", order.commission_value, commission)
        order.service_value = value
        order.commission_rate = rate
        order.commission_value = commission

    if "status" in patch:
        status = _as_status(patch["status"])
        _track("status", order.status, status)
        if status == OrderStatus.PAID and order.status != OrderStatus.PAID:
            order.paid_at = timezone.now()
        elif status == OrderStatus.PENDING:
            order.paid_at = None
        order.status = status

    _save_order(order)

    log_event(order=order, action=AuditAction.UPDATED, user_id=user_id,
              details=("Changed: " + ", ".join(changes)) if changes else "Order details updated")

    if old_period is not None:
        recompute_totals(old_period.pk)
    if old_period is None or new_period.pk != old_period.pk:
        recompute_totals(new_period.pk)
    return order


@transaction.atomic
def delete_order(order_id, *, user_id=None) -> None:
    """
    Remove a non-settled order. Its audit trail is deleted first, then the
    order; a DELETED entry without an order reference records the removal.
    """
    order, period, _ = _load_for_write(order_id)
    number = order.sequence_number

    purge_order_trail(order)
    order.delete()
    log_event(order=None, action=AuditAction.DELETED, user_id=user_id,
              details=f"OS #{number} deleted")

    if period is not None:
        recompute_totals(period.pk)


@transaction.atomic
def duplicate_order(order_id, *, user_id=None) -> ServiceOrder:
    """
    Copy customer, brand, value and payment method into a new order dated
    today with the next free OS number.
    """
    original = get_or_not_found(ServiceOrder.objects.select_related("brand"), order_id, "Order")
    return _create(
        sequence_number=next_sequence_number(),
        entry_date=timezone.localdate(),
        customer_name=original.customer_name,
        brand=original.brand,
        service_value=original.service_value,
        payment_method=original.payment_method,
        user_id=user_id,
        audit_action=AuditAction.DUPLICATED,
        audit_details=f"Duplicated from OS #{original.sequence_number}",
    )


@transaction.atomic
def bulk_update_status(order_ids: Iterable, status: str, *, user_id=None) -> List[ServiceOrder]:
    """All-or-nothing: one settled or missing order rolls back the batch."""
    status = _as_status(status)
    return [update_order(oid, {"status": status}, user_id=user_id) for oid in order_ids]


@transaction.atomic
def bulk_delete_orders(order_ids: Iterable, *, user_id=None) -> int:
    count = 0
    for oid in order_ids:
        delete_order(oid, user_id=user_id)
        count += 1
    return count


__all__ = [
    "create_order", "update_order", "delete_order", "duplicate_order",
    "bulk_update_status", "bulk_delete_orders", "next_sequence_number",
]
