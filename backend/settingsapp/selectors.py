from decimal import Decimal
from django.conf import settings
from .models import CommissionSettings


def get_settings() -> CommissionSettings:
    """Fetch the settings row, creating it with the configured default rate on first use."""
    obj, _ = CommissionSettings.objects.get_or_create(
        singleton_key=1,
        defaults={"commission_rate": Decimal(str(getattr(settings, "COMMISSION_DEFAULT_RATE", "10")))},
    )
    return obj


def current_commission_rate() -> Decimal:
    return get_settings().commission_rate
