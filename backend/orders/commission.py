"""
CommissionCalculator.

The rate is an argument: callers fetch it (settingsapp.selectors) at the
moment of computation, so a later change of the global rate never reaches
orders that are not edited again.
"""
from decimal import Decimal, ROUND_HALF_UP

CURRENCY_QUANT = Decimal("0.01")
HUNDRED = Decimal("100")


def to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(CURRENCY_QUANT, rounding=ROUND_HALF_UP)


def compute_commission(service_value, rate) -> Decimal:
    """round(service_value * rate / 100, 2), half-up."""
    value = Decimal(str(service_value))
    pct = Decimal(str(rate))
    return (value * pct / HUNDRED).quantize(CURRENCY_QUANT, rounding=ROUND_HALF_UP)
