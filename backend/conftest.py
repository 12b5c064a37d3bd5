import itertools
from datetime import date
from decimal import Decimal

import pytest
from rest_framework.test import APIClient


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def make_order(db):
    """Create orders through the lifecycle service; OS numbers auto-increment from 5001."""
    from orders import services as order_services

    seq = itertools.count(5001)

    def _make(**overrides):
        data = {
            "sequence_number": next(seq),
            "entry_date": date(2024, 3, 5),
            "customer_name": "Ana Souza",
            "brand": "Samsung",
            "service_value": Decimal("200.00"),
        }
        data.update(overrides)
        return order_services.create_order(**data)

    return _make


@pytest.fixture
def lose_first_lookup(monkeypatch):
    """
    Arm with a model: its next `.get()` misses as if another writer inserted
    the row right after the lookup, so the create hits the unique constraint.
    """
    from django.db.models import QuerySet

    real_get = QuerySet.get

    def _arm(model):
        state = {"missed": False}

        def racing_get(self, *args, **kwargs):
            if self.model is model and not state["missed"]:
                state["missed"] = True
                raise model.DoesNotExist
            return real_get(self, *args, **kwargs)

        monkeypatch.setattr(QuerySet, "get", racing_get)

    return _arm


@pytest.fixture
def row_locks(monkeypatch):
    """Model names in the order select_for_update querysets are built."""
    from django.db.models import QuerySet

    seen = []
    real = QuerySet.select_for_update

    def recording(self, *args, **kwargs):
        seen.append(self.model.__name__)
        return real(self, *args, **kwargs)

    monkeypatch.setattr(QuerySet, "select_for_update", recording)
    return seen
