# apps/discounts/stores/orm.py
from __future__ import annotations

import functools
import logging

from django.db import DatabaseError, transaction
from django.db.models import F

from ..exceptions import DiscountStoreUnavailable
from ..models import Discount, DiscountStatus
from .base import DiscountStore

log = logging.getLogger("discounts")


def _wrap_db_errors(fn):
    @functools.wraps(fn)
    def _inner(self, *args, **kwargs):
        try:
            return fn(self, *args, **kwargs)
        except DatabaseError as exc:
            log.error("DISCOUNT_STORE_ERROR op=%s err=%s", fn.__name__, exc)
            raise DiscountStoreUnavailable(str(exc)) from exc
    return _inner


class OrmDiscountStore(DiscountStore):
    name = "orm"

    @_wrap_db_errors
    def find_by_code(self, code):
        return Discount.objects.filter(code=code).first()

    @_wrap_db_errors
    def find_automatic_active(self, now):
        qs = Discount.objects.filter(
            is_automatic=True,
            status=DiscountStatus.ACTIVE,
            start_date__lte=now,
            end_date__gte=now,
        ).order_by("pk")
        return list(qs)

    @_wrap_db_errors
    def get(self, pk):
        return Discount.objects.filter(pk=pk).first()

    @_wrap_db_errors
    def all(self):
        return list(Discount.objects.order_by("-usage_count", "pk"))

    @_wrap_db_errors
    def save(self, discount, update_fields=None):
        discount.save(update_fields=update_fields)

    @_wrap_db_errors
    @transaction.atomic
    def increment_usage(self, pk, savings):
        updated = Discount.objects.filter(pk=pk).update(
            usage_count=F("usage_count") + 1,
            total_savings_amount=F("total_savings_amount") + savings,
        )
        if not updated:
            return None
        return Discount.objects.get(pk=pk)
