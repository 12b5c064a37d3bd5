from decimal import Decimal
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from common.models import BaseModel


class CommissionSettings(BaseModel):
    """
    The single global settings row. Only `commission_rate` matters to the engine;
    the company fields feed report headers.
    """
    singleton_key = models.PositiveSmallIntegerField(default=1, unique=True, editable=False)

    commission_rate = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal("10.00"),
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
    )  # percentage, e.g. 10.00 for 10%

    company_name = models.CharField(max_length=200, blank=True, null=True)
    company_tax_id = models.CharField(max_length=40, blank=True, null=True)
    company_address = models.CharField(max_length=255, blank=True, null=True)
    company_contact = models.CharField(max_length=200, blank=True, null=True)
    company_logo_url = models.URLField(blank=True, null=True)
    primary_color = models.CharField(max_length=7, blank=True, null=True)  # hex, e.g. #1d4ed8

    class Meta:
        verbose_name = "settings"
        verbose_name_plural = "settings"

    def __str__(self):
        return f"rate={self.commission_rate}%"
