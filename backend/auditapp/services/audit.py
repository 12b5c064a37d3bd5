from __future__ import annotations
from datetime import datetime
from typing import Iterable, List, Optional
from django.utils import timezone
from auditapp.models import AuditLog

MAX_DETAILS = 2000


def log_event(*, order, action: str, details: str = "", user_id: Optional[str] = None,
              timestamp: Optional[datetime] = None) -> AuditLog:
    return AuditLog.objects.create(
        order=order,
        user_id=user_id,
        action=action,
        details=(details or "")[:MAX_DETAILS],
        timestamp=timestamp or timezone.now(),
    )


def log_events(*, order_ids: Iterable, action: str, details: str = "", user_id: Optional[str] = None,
               timestamp: Optional[datetime] = None) -> List[AuditLog]:
    """One entry per order, written in a single INSERT."""
    ts = timestamp or timezone.now()
    rows = [
        AuditLog(order_id=oid, user_id=user_id, action=action, details=(details or "")[:MAX_DETAILS], timestamp=ts)
        for oid in order_ids
    ]
    return AuditLog.objects.bulk_create(rows) if rows else []


def purge_order_trail(order) -> int:
    deleted, _ = AuditLog.objects.filter(order=order).delete()
    return deleted
