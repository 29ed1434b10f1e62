# apps/discounts/services/lifecycle.py
"""
Effective status of a discount at read time.

Expiry is derived from the date window on every read. ``peek_status`` never
writes; ``resolve_by_code`` is the single path that persists an observed
expiry back onto the record, the first time it sees it.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.utils import timezone

from ..models import Discount, DiscountStatus

log = logging.getLogger("discounts")


def peek_status(discount: Discount, now=None) -> str:
    now = now or timezone.now()
    if discount.status != DiscountStatus.INACTIVE and now > discount.end_date:
        return DiscountStatus.EXPIRED
    return discount.status


def is_within_window(discount: Discount, now=None) -> bool:
    now = now or timezone.now()
    return discount.start_date <= now <= discount.end_date


def is_usable(discount: Discount, now=None) -> bool:
    now = now or timezone.now()
    return peek_status(discount, now) == DiscountStatus.ACTIVE and is_within_window(discount, now)


def resolve_by_code(code: str, now=None, *, store) -> Optional[Discount]:
    now = now or timezone.now()
    discount = store.find_by_code(code)
    if discount is None:
        return None

    effective = peek_status(discount, now)
    if effective == DiscountStatus.EXPIRED and discount.status != DiscountStatus.EXPIRED:
        discount.status = DiscountStatus.EXPIRED
        store.save(discount, update_fields=["status"])
        log.info("DISCOUNT_EXPIRED_PERSISTED code=%s dc_id=%s end=%s", code, discount.pk, discount.end_date)

    return discount
