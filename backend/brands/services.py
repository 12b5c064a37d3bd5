"""Brand management. Order submission auto-creates brands via brands.resolver."""
import logging

from django.db import IntegrityError, transaction
from django.db.models import ProtectedError

from common.exceptions import ValidationFailure
from common.lookups import get_or_not_found
from .models import Brand

logger = logging.getLogger(__name__)


def _clean_name(name) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationFailure("Brand name is required.")
    return name


def _save_unique(brand: Brand, **save_kwargs) -> Brand:
    try:
        with transaction.atomic():
            brand.save(**save_kwargs)
    except IntegrityError as exc:
        raise ValidationFailure(f"Brand {brand.name!r} already exists.") from exc
    return brand


@transaction.atomic
def create_brand(name) -> Brand:
    name = _clean_name(name)
    if Brand.objects.filter(name=name).exists():
        raise ValidationFailure(f"Brand {name!r} already exists.")
    return _save_unique(Brand(name=name), force_insert=True)


@transaction.atomic
def rename_brand(brand_id, name) -> Brand:
    brand = get_or_not_found(Brand.objects.select_for_update(), brand_id, "Brand")
    name = _clean_name(name)
    if name == brand.name:
        return brand
    if Brand.objects.filter(name=name).exclude(pk=brand.pk).exists():
        raise ValidationFailure(f"Brand {name!r} already exists.")
    brand.name = name
    return _save_unique(brand, update_fields=["name", "updated_at"])


@transaction.atomic
def delete_brand(brand_id) -> None:
    brand = get_or_not_found(Brand.objects.all(), brand_id, "Brand")
    try:
        with transaction.atomic():
            brand.delete()
    except ProtectedError as exc:
        raise ValidationFailure("Cannot delete brand while orders reference it.") from exc
    logger.info("Brand %r deleted", brand.name)
