"""
BrandResolver: turns a caller-supplied brand reference into a Brand row.

A reference is either a brand id or a display name. Ids that do not exist
fall back to name lookup, so a stale id never fails an order submission; it
degrades to find-or-create by the trimmed text.

Name creation relies on the unique constraint on ``Brand.name``: a concurrent
insert of the same name surfaces as IntegrityError inside a savepoint and is
answered by re-selecting the winner's row.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Union
from uuid import UUID

from django.db import IntegrityError, transaction

from common.exceptions import ValidationFailure
from .models import Brand

logger = logging.getLogger(__name__)

_UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class ById:
    brand_id: UUID
    raw: str


@dataclass(frozen=True, slots=True)
class ByName:
    name: str


BrandReference = Union[ById, ByName]


def classify(reference) -> BrandReference:
    if isinstance(reference, Brand):
        return ById(brand_id=reference.pk, raw=str(reference.pk))
    if isinstance(reference, UUID):
        return ById(brand_id=reference, raw=str(reference))
    text = str(reference or "").strip()
    if _UUID_RE.match(text):
        return ById(brand_id=UUID(text), raw=text)
    return ByName(name=text)


def find_or_create_by_name(name: str) -> Brand:
    name = (name or "").strip()
    if not name:
        raise ValidationFailure("Brand name is required.")
    try:
        return Brand.objects.get(name=name)
    except Brand.DoesNotExist:
        pass
    try:
        with transaction.atomic():
            brand = Brand.objects.create(name=name)
    except IntegrityError:
        logger.info("Brand %r created concurrently; re-selecting", name)
        return Brand.objects.get(name=name)
    logger.info("Brand %r created on first reference", name)
    return brand


def resolve(reference) -> Brand:
    ref = classify(reference)
    if isinstance(ref, ById):
        brand = Brand.objects.filter(pk=ref.brand_id).first()
        if brand is not None:
            return brand
        logger.info("Brand id %s not found; resolving by name", ref.raw)
        return find_or_create_by_name(ref.raw)
    return find_or_create_by_name(ref.name)


__all__ = ["ById", "ByName", "BrandReference", "classify", "find_or_create_by_name", "resolve"]
