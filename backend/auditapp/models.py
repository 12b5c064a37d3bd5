from django.db import models


class AuditAction(models.TextChoices):
    CREATED = "CREATED", "Created"
    UPDATED = "UPDATED", "Updated"
    STATUS_CHANGE = "STATUS_CHANGE", "Status change"
    DELETED = "DELETED", "Deleted"
    DUPLICATED = "DUPLICATED", "Duplicated"


class AuditLog(models.Model):
    """Append-only; rows are never updated. An order's own trail is removed with it."""
    id = models.BigAutoField(primary_key=True)
    order = models.ForeignKey(
        "orders.ServiceOrder", on_delete=models.SET_NULL, null=True, blank=True, related_name="audit_logs"
    )
    user_id = models.UUIDField(blank=True, null=True)
    action = models.CharField(max_length=40, choices=AuditAction.choices)
    details = models.TextField(blank=True, default="")
    timestamp = models.DateTimeField(db_index=True)

    class Meta:
        ordering = ("-timestamp", "-id")
        indexes = [models.Index(fields=["order", "timestamp"])]

    def __str__(self):
        return f"{self.action} {self.order_id or '-'} @ {self.timestamp:%Y-%m-%d %H:%M}"
