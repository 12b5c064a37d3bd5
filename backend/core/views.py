from django.conf import settings
from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.utils import timezone

from rest_framework.views import APIView
from rest_framework.response import Response


def healthz(_request):
    return JsonResponse({"ok": True})


class VersionView(APIView):
    def get(self, _):
        version = getattr(settings, "VERSION", None) or "dev"
        return Response({
            "ok": True,
            "version": str(version),
            "debug": bool(settings.DEBUG),
            "period_strategy": settings.COMMISSION_PERIOD_STRATEGY,
            "time": timezone.now().isoformat(),
        })


class DeepHealthView(APIView):
    """
    GET /api/core/deep-health/
    Checks database connectivity; 503 when it is unreachable.
    """
    def get(self, request):
        out = {"ok": True, "time": timezone.now().isoformat()}
        try:
            with connection.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
            out["db"] = {"ok": True}
        except DatabaseError as e:
            out["ok"] = False
            out["db"] = {"ok": False, "error": str(e)}
        return Response(out, status=200 if out["ok"] else 503)
