# apps/discounts/stores/memory.py
from __future__ import annotations

import copy
import itertools
import threading

from ..models import DiscountStatus
from .base import DiscountStore


class MemoryDiscountStore(DiscountStore):
    """
    Process-local store for demos and tests. Hands out copies so callers
    never hold a reference to the stored record.
    """

    name = "memory"

    def __init__(self, config=None, discounts=()):
        super().__init__(config)
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._rows = {}
        for d in discounts:
            self.save(d)

    def find_by_code(self, code):
        with self._lock:
            for row in self._rows.values():
                if row.code == code:
                    return copy.deepcopy(row)
        return None

    def find_automatic_active(self, now):
        with self._lock:
            rows = [
                copy.deepcopy(r)
                for _, r in sorted(self._rows.items())
                if r.is_automatic
                and r.status == DiscountStatus.ACTIVE
                and r.start_date <= now <= r.end_date
            ]
        return rows

    def get(self, pk):
        with self._lock:
            row = self._rows.get(pk)
            return copy.deepcopy(row) if row is not None else None

    def all(self):
        with self._lock:
            rows = [copy.deepcopy(r) for _, r in sorted(self._rows.items())]
        return sorted(rows, key=lambda r: -r.usage_count)

    def save(self, discount, update_fields=None):
        with self._lock:
            if discount.pk is None:
                discount.pk = next(self._ids)
            stored = self._rows.get(discount.pk)
            if stored is not None and update_fields:
                for name in update_fields:
                    setattr(stored, name, copy.deepcopy(getattr(discount, name)))
            else:
                self._rows[discount.pk] = copy.deepcopy(discount)

    def increment_usage(self, pk, savings):
        with self._lock:
            row = self._rows.get(pk)
            if row is None:
                return None
            row.usage_count = (row.usage_count or 0) + 1
            row.total_savings_amount = (row.total_savings_amount or 0) + savings
            return copy.deepcopy(row)
