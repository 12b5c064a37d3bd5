import os
import sys
import random
from datetime import timedelta
from decimal import Decimal

import django

# --- Fix project path ---
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.append(os.path.join(BASE_DIR, "backend"))

# --- Set Django settings ---
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "commission_backend.settings.dev")
django.setup()

from django.utils import timezone

from orders import services as order_services
from orders.models import PaymentMethod, ServiceOrder
from periods import services as period_services
from periods.models import Period
from settingsapp.selectors import get_settings

BRANDS = ["Apple", "Samsung", "Motorola", "Xiaomi", "LG"]
CUSTOMERS = ["Ana Souza", "Bruno Lima", "Carla Dias", "Davi Rocha", "Elisa Melo", "Fabio Nunes"]
DAYS_BACK = 60


def seed_orders():
    settings_row = get_settings()
    settings_row.company_name = settings_row.company_name or "Commission System Pro"
    settings_row.save()

    today = timezone.localdate()
    number = order_services.next_sequence_number()
    created = 0
    for offset in range(DAYS_BACK, -1, -3):
        day = today - timedelta(days=offset)
        if Period.objects.filter(start_date__lte=day, end_date__gte=day, paid=True).exists():
            continue
        order_services.create_order(
            sequence_number=number,
            entry_date=day,
            customer_name=random.choice(CUSTOMERS),
            brand=random.choice(BRANDS),
            service_value=Decimal(random.uniform(80, 900)).quantize(Decimal("0.01")),
            payment_method=random.choice(PaymentMethod.values),
        )
        number += 1
        created += 1
    print(f"Created {created} orders")

    # close every period that has already ended
    for period in Period.objects.filter(paid=False, end_date__lt=today):
        closure = period_services.pay_period(period.pk)
        print(f"Closed {period} ({closure.orders_paid} orders paid)")


if __name__ == "__main__":
    seed_orders()
    print(f"Done: {ServiceOrder.objects.count()} orders across {Period.objects.count()} periods")
