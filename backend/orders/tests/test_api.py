from datetime import date

import pytest

from auditapp.models import AuditAction
from orders.models import OrderStatus, ServiceOrder
from periods import services as period_services

pytestmark = pytest.mark.django_db

PAYLOAD = {
    "sequence_number": 1001,
    "entry_date": "2024-03-05",
    "customer_name": "Ana Souza",
    "brand": "Samsung",
    "service_value": "200.00",
    "payment_method": "PIX",
}


def test_create_order(api_client):
    resp = api_client.post("/api/orders", PAYLOAD, format="json")

    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "PENDING"
    assert body["commission_value"] == "20.00"
    assert body["brand_name"] == "Samsung"
    assert body["period_start"] == "2024-03-01"
    assert body["period_end"] == "2024-03-15"


def test_create_accepts_iso_datetime(api_client):
    resp = api_client.post("/api/orders", {**PAYLOAD, "entry_date": "2024-03-20T00:00:00.000Z"}, format="json")
    assert resp.status_code == 201
    assert resp.json()["period_start"] == "2024-03-16"


def test_create_missing_fields(api_client):
    resp = api_client.post("/api/orders", {"customer_name": "Ana"}, format="json")
    assert resp.status_code == 400
    assert "sequence_number" in resp.json()


def test_duplicate_sequence_number_conflicts(api_client):
    api_client.post("/api/orders", PAYLOAD, format="json")
    resp = api_client.post("/api/orders", PAYLOAD, format="json")

    assert resp.status_code == 409
    assert resp.json()["code"] == "duplicate_sequence_number"


def test_create_into_paid_period(api_client, make_order):
    order = make_order()
    period_services.pay_period(order.period_id)

    resp = api_client.post("/api/orders", PAYLOAD, format="json")

    assert resp.status_code == 409
    assert resp.json()["code"] == "period_locked"


def test_patch_and_put_are_partial(api_client, make_order):
    order = make_order()

    resp = api_client.patch(f"/api/orders/{order.pk}", {"service_value": "300"}, format="json")
    assert resp.status_code == 200
    assert resp.json()["commission_value"] == "30.00"

    resp = api_client.put(f"/api/orders/{order.pk}", {"description": "screen swap"}, format="json")
    assert resp.status_code == 200
    assert resp.json()["description"] == "screen swap"
    assert resp.json()["service_value"] == "300.00"


def test_patch_paid_order_is_rejected(api_client, make_order):
    order = make_order()
    api_client.patch(f"/api/orders/{order.pk}", {"status": "PAID"}, format="json")

    resp = api_client.patch(f"/api/orders/{order.pk}", {"customer_name": "Other"}, format="json")

    assert resp.status_code == 409
    assert resp.json()["code"] == "immutable"


def test_delete_order(api_client, make_order):
    order = make_order()
    resp = api_client.delete(f"/api/orders/{order.pk}")
    assert resp.status_code == 204
    assert not ServiceOrder.objects.filter(pk=order.pk).exists()


def test_retrieve_includes_history(api_client, make_order):
    order = make_order()
    api_client.patch(f"/api/orders/{order.pk}", {"customer_name": "Bia"}, format="json")

    resp = api_client.get(f"/api/orders/{order.pk}")

    assert resp.status_code == 200
    actions = [h["action"] for h in resp.json()["history"]]
    assert actions == [AuditAction.UPDATED, AuditAction.CREATED]


def test_history_endpoint(api_client, make_order):
    order = make_order(sequence_number=1234)
    resp = api_client.get(f"/api/orders/{order.pk}/history")
    assert resp.status_code == 200
    assert resp.json()[0]["sequence_number"] == 1234


def test_unknown_order_is_404(api_client):
    resp = api_client.get("/api/orders/0b0d8f6e-6f3c-4a55-9d43-1f1b5d1d0c10")
    assert resp.status_code == 404


def test_list_filters(api_client, make_order):
    a = make_order(entry_date=date(2024, 3, 5), customer_name="Ana")
    make_order(entry_date=date(2024, 3, 20), customer_name="Bruno", brand="LG")
    api_client.patch(f"/api/orders/{a.pk}", {"status": "PAID"}, format="json")

    rows = api_client.get("/api/orders").json()["results"]
    assert [r["customer_name"] for r in rows] == ["Bruno", "Ana"]

    rows = api_client.get("/api/orders", {"status": "PAID"}).json()["results"]
    assert [r["customer_name"] for r in rows] == ["Ana"]

    rows = api_client.get("/api/orders", {"q": "lg"}).json()["results"]
    assert [r["customer_name"] for r in rows] == ["Bruno"]

    rows = api_client.get("/api/orders", {"period": str(a.period_id)}).json()["results"]
    assert [r["customer_name"] for r in rows] == ["Ana"]


def test_duplicate_endpoint(api_client, make_order):
    order = make_order(sequence_number=1500)
    resp = api_client.post(f"/api/orders/{order.pk}/duplicate")
    assert resp.status_code == 201
    assert resp.json()["sequence_number"] == 1501


def test_bulk_endpoints(api_client, make_order):
    ids = [str(make_order().pk) for _ in range(3)]

    resp = api_client.post("/api/orders/bulk-status", {"ids": ids[:2], "status": "PAID"}, format="json")
    assert resp.status_code == 200
    assert resp.json()["updated"] == 2
    assert ServiceOrder.objects.filter(status=OrderStatus.PAID).count() == 2

    resp = api_client.post("/api/orders/bulk-delete", {"ids": ids}, format="json")
    assert resp.status_code == 409  # two of them are settled
    assert ServiceOrder.objects.count() == 3

    resp = api_client.post("/api/orders/bulk-delete", {"ids": ids[2:]}, format="json")
    assert resp.status_code == 200
    assert resp.json()["deleted"] == 1
