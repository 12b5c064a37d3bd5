import pytest
from django.core.management import call_command

from periods.models import Period

pytestmark = pytest.mark.django_db


def test_healthz(client):
    resp = client.get("/api/core/healthz/")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}


def test_version(client):
    resp = client.get("/api/core/version/")
    assert resp.status_code == 200
    assert resp.json()["period_strategy"] == "BIWEEKLY"


def test_deep_health(client):
    resp = client.get("/api/core/deep-health/")
    assert resp.status_code == 200
    assert resp.json()["db"] == {"ok": True}


def test_request_id_is_propagated(client):
    resp = client.get("/api/core/healthz/", HTTP_X_REQUEST_ID="abc-123")
    assert resp["X-Request-ID"] == "abc-123"
    assert "X-Response-Time-ms" in resp


def test_core_check_passes(make_order, capsys):
    make_order()
    call_command("core_check", "--db", "--totals")
    assert "Overall: OK" in capsys.readouterr().out


def test_core_check_flags_stale_totals(make_order):
    order = make_order()
    Period.objects.filter(pk=order.period_id).update(total_orders=7)
    with pytest.raises(SystemExit):
        call_command("core_check", "--totals", "--json")
