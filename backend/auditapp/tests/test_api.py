import pytest

from auditapp.models import AuditAction, AuditLog
from auditapp.services.audit import log_events

pytestmark = pytest.mark.django_db


def test_list_is_newest_first_and_paginated(api_client, make_order):
    orders = [make_order() for _ in range(3)]

    resp = api_client.get("/api/audit", {"limit": 2})

    assert resp.status_code == 200
    body = resp.json()
    assert body["count"] == 3
    assert [r["order"] for r in body["results"]] == [str(orders[2].pk), str(orders[1].pk)]

    resp = api_client.get("/api/audit", {"limit": 2, "page": 2})
    assert [r["order"] for r in resp.json()["results"]] == [str(orders[0].pk)]


def test_filter_by_order_and_action(api_client, make_order):
    a = make_order()
    make_order()
    api_client.patch(f"/api/orders/{a.pk}", {"customer_name": "Other"}, format="json")

    rows = api_client.get("/api/audit", {"order": str(a.pk)}).json()["results"]
    assert [r["action"] for r in rows] == ["UPDATED", "CREATED"]

    rows = api_client.get("/api/audit", {"action": "UPDATED"}).json()["results"]
    assert len(rows) == 1


def test_deleted_entry_has_no_order(api_client, make_order):
    order = make_order(sequence_number=777)
    api_client.delete(f"/api/orders/{order.pk}")

    rows = api_client.get("/api/audit").json()["results"]
    assert rows[0]["action"] == "DELETED"
    assert rows[0]["order"] is None
    assert rows[0]["sequence_number"] is None
    assert rows[0]["details"] == "OS #777 deleted"


def test_log_events_writes_one_row_per_order(make_order):
    ids = [make_order().pk for _ in range(2)]
    rows = log_events(order_ids=ids, action=AuditAction.STATUS_CHANGE, details="x")
    assert len(rows) == 2
    assert AuditLog.objects.filter(action=AuditAction.STATUS_CHANGE).count() == 2
    assert log_events(order_ids=[], action=AuditAction.STATUS_CHANGE) == []
