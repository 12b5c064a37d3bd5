from decimal import Decimal
from django.db import models
from django.db.models import F, Q
from common.models import BaseModel


class Period(BaseModel):
    """
    Settlement bucket. Totals are a materialized view over the linked orders,
    rewritten by periods.services.recompute_totals after every membership change.
    Once `paid` is set the period (and every order in it) is locked.
    """
    start_date = models.DateField()
    end_date = models.DateField()  # inclusive

    paid = models.BooleanField(default=False)
    paid_at = models.DateTimeField(blank=True, null=True)

    # cached aggregates
    total_orders = models.PositiveIntegerField(default=0)
    total_service_value = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0"))
    total_commission = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0"))

    class Meta:
        ordering = ("-start_date",)
        constraints = [
            models.UniqueConstraint(fields=["start_date", "end_date"], name="uniq_period_boundary"),
            models.CheckConstraint(condition=Q(end_date__gte=F("start_date")), name="period_end_after_start"),
        ]
        indexes = [
            models.Index(fields=["paid", "start_date"]),
        ]

    def __str__(self):
        return f"{self.start_date:%Y-%m-%d} .. {self.end_date:%Y-%m-%d}"
