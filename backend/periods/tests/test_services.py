import logging
from datetime import date
from decimal import Decimal

import pytest

from auditapp.models import AuditAction, AuditLog
from common.exceptions import AlreadyPaid, NotFound, ValidationFailure
from orders import services as order_services
from orders.models import OrderStatus, ServiceOrder
from periods import services
from periods.models import Period

pytestmark = pytest.mark.django_db


def test_ensure_period_exists_creates_once():
    first = services.ensure_period_exists(date(2024, 2, 20))
    again = services.ensure_period_exists(date(2024, 2, 29))

    assert first.pk == again.pk
    assert (first.start_date, first.end_date) == (date(2024, 2, 16), date(2024, 2, 29))
    assert first.paid is False
    assert first.total_orders == 0
    assert Period.objects.count() == 1


def test_ensure_period_exists_uses_configured_strategy(settings):
    settings.COMMISSION_PERIOD_STRATEGY = "MONTHLY"
    period = services.ensure_period_exists(date(2024, 6, 20))
    assert (period.start_date, period.end_date) == (date(2024, 6, 1), date(2024, 6, 30))


def test_recompute_totals_is_idempotent(make_order):
    order = make_order(service_value=Decimal("200"))
    make_order(service_value=Decimal("55.55"))

    first = services.recompute_totals(order.period_id)
    second = services.recompute_totals(order.period_id)

    assert first == second
    assert first.total_orders == 2
    assert first.total_service_value == Decimal("255.55")
    assert first.total_commission == Decimal("25.56")  # 20.00 + 5.56


def test_recompute_repairs_drifted_totals(make_order):
    order = make_order()
    Period.objects.filter(pk=order.period_id).update(total_orders=42, total_commission=Decimal("1"))

    period = services.recompute_period(order.period_id)

    assert period.total_orders == 1
    assert period.total_commission == Decimal("20.00")


def test_pay_period_flips_every_pending_order(make_order):
    pending = [make_order() for _ in range(3)]
    paid = [make_order() for _ in range(2)]
    for o in paid:
        order_services.update_order(o.pk, {"status": OrderStatus.PAID})
    period_id = pending[0].period_id
    before = AuditLog.objects.filter(action=AuditAction.STATUS_CHANGE).count()

    closure = services.pay_period(period_id)

    assert closure.orders_paid == 3
    period = Period.objects.get(pk=period_id)
    assert period.paid is True
    assert period.paid_at is not None
    members = ServiceOrder.objects.filter(period_id=period_id)
    assert members.count() == 5
    assert all(o.status == OrderStatus.PAID and o.paid_at is not None for o in members)
    assert AuditLog.objects.filter(action=AuditAction.STATUS_CHANGE).count() - before == 3
    assert set(
        AuditLog.objects.filter(action=AuditAction.STATUS_CHANGE, details="Period closed and paid")
        .values_list("order_id", flat=True)
    ) == {o.pk for o in pending}


def test_pay_period_leaves_totals_alone(make_order):
    order = make_order(service_value=Decimal("300"))
    services.pay_period(order.period_id)
    period = Period.objects.get(pk=order.period_id)
    assert period.total_orders == 1
    assert period.total_commission == Decimal("30.00")


def test_pay_empty_period():
    period = services.ensure_period_exists(date(2024, 1, 3))
    closure = services.pay_period(period.pk)
    assert closure.orders_paid == 0
    assert Period.objects.get(pk=period.pk).paid is True


def test_pay_period_twice_fails(make_order):
    order = make_order()
    services.pay_period(order.period_id)
    with pytest.raises(AlreadyPaid):
        services.pay_period(order.period_id)


def test_pay_missing_period():
    with pytest.raises(NotFound):
        services.pay_period("7d7cdd8c-8c5f-4a4e-9e0e-3b7b0f3f0a11")


def test_delete_period_releases_members(make_order):
    orders = [make_order() for _ in range(3)]
    order_services.update_order(orders[0].pk, {"status": OrderStatus.PAID})
    period_id = orders[0].period_id

    released = services.delete_period(period_id)

    assert released == 3
    assert not Period.objects.filter(pk=period_id).exists()
    for o in ServiceOrder.objects.filter(pk__in=[o.pk for o in orders]):
        assert o.period_id is None
        assert o.status == OrderStatus.PENDING
        assert o.paid_at is None
    resets = AuditLog.objects.filter(action=AuditAction.STATUS_CHANGE)
    assert list(resets.values_list("order_id", flat=True)) == [orders[0].pk]


def test_delete_paid_period_is_allowed(make_order):
    order = make_order()
    services.pay_period(order.period_id)
    services.delete_period(order.period_id)
    order.refresh_from_db()
    assert order.status == OrderStatus.PENDING
    assert order.period_id is None


def test_create_period_manual_override():
    period = services.create_period(date(2024, 1, 10), date(2024, 1, 20))
    assert (period.start_date, period.end_date) == (date(2024, 1, 10), date(2024, 1, 20))


def test_create_period_rejects_inverted_range():
    with pytest.raises(ValidationFailure):
        services.create_period(date(2024, 1, 20), date(2024, 1, 10))


def test_create_period_rejects_duplicate_boundary():
    services.create_period(date(2024, 1, 1), date(2024, 1, 15))
    with pytest.raises(ValidationFailure):
        services.create_period(date(2024, 1, 1), date(2024, 1, 15))
    assert Period.objects.count() == 1


def test_ensure_period_exists_reselects_after_losing_creation_race(lose_first_lookup, caplog):
    existing = Period.objects.create(start_date=date(2024, 5, 1), end_date=date(2024, 5, 15))
    lose_first_lookup(Period)

    with caplog.at_level(logging.INFO, logger="periods"):
        period = services.ensure_period_exists(date(2024, 5, 9))

    assert period.pk == existing.pk
    assert Period.objects.count() == 1
    assert "created concurrently" in caplog.text


def test_pay_period_rolls_back_when_a_step_fails(make_order, monkeypatch):
    orders = [make_order() for _ in range(2)]
    period_id = orders[0].period_id

    def audit_down(**kwargs):
        raise RuntimeError("audit store unavailable")

    monkeypatch.setattr(services, "log_events", audit_down)
    with pytest.raises(RuntimeError):
        services.pay_period(period_id)

    period = Period.objects.get(pk=period_id)
    assert period.paid is False
    assert period.paid_at is None
    for o in ServiceOrder.objects.filter(period_id=period_id):
        assert o.status == OrderStatus.PENDING
        assert o.paid_at is None


def test_close_and_delete_lock_period_before_orders(make_order, row_locks):
    order = make_order()
    row_locks.clear()

    services.pay_period(order.period_id)
    assert row_locks == ["Period", "ServiceOrder"]

    row_locks.clear()
    services.delete_period(order.period_id)
    assert row_locks == ["Period", "ServiceOrder"]
