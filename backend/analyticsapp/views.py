from rest_framework.response import Response
from rest_framework.views import APIView

from .selectors import dashboard_summary


class DashboardView(APIView):
    """GET /api/dashboard: current vs previous month commission and top-5 rankings."""

    def get(self, request):
        return Response(dashboard_summary())
