import sys
import json
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import DatabaseError, connection
from django.db.models import Count, Sum
from django.utils import timezone
from django.conf import settings

from orders.models import ServiceOrder
from periods.models import Period

ZERO = Decimal("0.00")


class Command(BaseCommand):
    help = "Run internal health checks (DB, period totals) and print a summary for CI/CD pipelines."

    def add_arguments(self, parser):
        parser.add_argument(
            "--db", action="store_true", help="Check database connectivity"
        )
        parser.add_argument(
            "--totals", action="store_true",
            help="Compare every period's cached totals with the sums over its orders (read-only)"
        )
        parser.add_argument(
            "--json", action="store_true", help="Output as JSON (default is pretty text)"
        )

    def _check_db(self):
        try:
            with connection.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
            return {"ok": True}
        except DatabaseError as e:
            return {"ok": False, "error": str(e)}

    def _check_totals(self):
        sums = {
            row["period_id"]: row
            for row in ServiceOrder.objects.filter(period__isnull=False)
            .values("period_id")
            .annotate(n=Count("id"), sv=Sum("service_value"), cv=Sum("commission_value"))
        }
        drifted = []
        for p in Period.objects.all():
            row = sums.get(p.pk, {})
            expected = (row.get("n", 0), row.get("sv") or ZERO, row.get("cv") or ZERO)
            if (p.total_orders, p.total_service_value, p.total_commission) != expected:
                drifted.append(str(p))
        if drifted:
            return {"ok": False, "error": f"stale totals: {', '.join(drifted)}"}
        return {"ok": True}

    def handle(self, *args, **opts):
        results = {
            "time": timezone.now().isoformat(),
            "debug": bool(settings.DEBUG),
            "ok": True,
            "checks": {},
        }

        if opts.get("db"):
            results["checks"]["db"] = self._check_db()
        if opts.get("totals"):
            results["checks"]["totals"] = self._check_totals()
        results["ok"] = all(c["ok"] for c in results["checks"].values())

        if opts.get("json"):
            self.stdout.write(json.dumps(results, indent=2))
        else:
            self.stdout.write(f"\n=== Commission Health Check ({results['time']}) ===\n")
            for key, val in results["checks"].items():
                mark = "OK  " if val.get("ok") else "FAIL"
                err = f" ({val.get('error')})" if not val.get("ok") else ""
                self.stdout.write(f" {mark} {key.upper()}{err}\n")
            self.stdout.write(f"\nOverall: {'OK' if results['ok'] else 'FAILED'}\n")

        # Exit with code 1 on failure (for CI)
        if not results["ok"]:
            sys.exit(1)
