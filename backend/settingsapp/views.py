import logging

from django.db import transaction
from rest_framework.response import Response
from rest_framework.views import APIView

from .selectors import get_settings
from .serializers import CommissionSettingsSerializer

logger = logging.getLogger(__name__)


class CommissionSettingsView(APIView):
    """
    GET  /api/settings  -> the settings row (created on first read)
    PUT  /api/settings  -> partial update; a new rate only affects orders
                           created or re-valued afterwards
    """

    def get(self, request):
        return Response(CommissionSettingsSerializer(get_settings()).data)

    @transaction.atomic
    def put(self, request):
        obj = get_settings()
        old_rate = obj.commission_rate
        ser = CommissionSettingsSerializer(obj, data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        obj = ser.save()
        if obj.commission_rate != old_rate:
            logger.info("Commission rate changed %s%% -> %s%%", old_rate, obj.commission_rate)
        return Response(ser.data)

    patch = put
