"""
Typed failures raised by the commission engine.

They are DRF exceptions so the service layer can raise them directly and the
request layer renders them as ``{"detail": ..., "code": ...}`` without a
translation step. Raising one inside ``transaction.atomic`` rolls the
operation back.
"""
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler


class CommissionError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Commission engine error."
    default_code = "commission_error"


class NotFound(CommissionError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class Immutable(CommissionError):
    """Edit/delete attempted on a paid order or an order in a paid period."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Order cannot be changed once paid or settled."
    default_code = "immutable"


class PeriodLocked(CommissionError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Cannot add orders to a paid period."
    default_code = "period_locked"


class AlreadyPaid(CommissionError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Period already paid."
    default_code = "already_paid"


class DuplicateSequenceNumber(CommissionError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "OS number already exists."
    default_code = "duplicate_sequence_number"


class ValidationFailure(CommissionError):
    default_detail = "Invalid input."
    default_code = "validation_failure"


def commission_exception_handler(exc, context):
    response = exception_handler(exc, context)
    if response is not None and isinstance(exc, CommissionError):
        response.data["code"] = exc.default_code
    return response
