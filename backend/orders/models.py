from decimal import Decimal
from django.db import models
from django.db.models import Q
from common.models import BaseModel


class OrderStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    PAID = "PAID", "Paid"


class PaymentMethod(models.TextChoices):
    PIX = "PIX", "PIX"
    CASH = "CASH", "Cash"
    CARD = "CARD", "Card"
    TRANSFER = "TRANSFER", "Transfer"


class ServiceOrder(BaseModel):
    """
    One billable service event. Commission is a snapshot: `commission_value` and
    `commission_rate` are written by orders.services on create and whenever the
    service value is edited, never re-derived from the current global rate.
    """
    sequence_number = models.PositiveIntegerField(unique=True)  # "OS number", caller-assigned
    entry_date = models.DateField()
    customer_name = models.CharField(max_length=200)
    brand = models.ForeignKey("brands.Brand", on_delete=models.PROTECT, related_name="orders")

    service_value = models.DecimalField(max_digits=12, decimal_places=2)
    commission_rate = models.DecimalField(max_digits=5, decimal_places=2)  # percentage used for commission_value
    commission_value = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))

    status = models.CharField(max_length=10, choices=OrderStatus.choices, default=OrderStatus.PENDING)
    payment_method = models.CharField(max_length=10, choices=PaymentMethod.choices, blank=True, null=True)
    description = models.TextField(blank=True, null=True)

    period = models.ForeignKey(
        "periods.Period", on_delete=models.SET_NULL, null=True, blank=True, related_name="orders"
    )
    paid_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        ordering = ("-entry_date", "-sequence_number")
        constraints = [
            models.CheckConstraint(condition=Q(service_value__gt=0), name="order_service_value_positive"),
            models.CheckConstraint(
                condition=(Q(status=OrderStatus.PAID, paid_at__isnull=False)
                           | Q(status=OrderStatus.PENDING, paid_at__isnull=True)),
                name="order_paid_at_matches_status",
            ),
        ]
        indexes = [
            models.Index(fields=["period", "status"]),
            models.Index(fields=["entry_date"]),
            models.Index(fields=["customer_name"]),
        ]

    def __str__(self):
        return f"OS #{self.sequence_number}"

    @property
    def is_paid(self) -> bool:
        return self.status == OrderStatus.PAID

    @property
    def is_locked(self) -> bool:
        return self.is_paid or bool(self.period_id and self.period.paid)
