from django.core.exceptions import ValidationError
from django.db.models import Model, QuerySet

from .exceptions import NotFound


def get_or_not_found(qs: QuerySet, pk, label: str) -> Model:
    """Fetch by primary key; malformed ids count as missing."""
    try:
        return qs.get(pk=pk)
    except (qs.model.DoesNotExist, ValidationError, ValueError, TypeError):
        raise NotFound(f"{label} not found.") from None
