# apps/discounts/services/usage.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Tuple

from django.conf import settings
from django.core.exceptions import ValidationError

from ..cart import to_decimal
from ..exceptions import DiscountNotFound, DiscountStoreUnavailable
from ..models import Discount
from ..stores import get_store
from ..utils import quantize_money
from .selector import MANUAL, DiscountDecision

log = logging.getLogger("discounts")


@dataclass
class DiscountStatistics:
    total_usage: int = 0
    total_savings: Decimal = Decimal("0")
    most_used: List[dict] = field(default_factory=list)


def record_usage(discount_id, savings, store=None) -> Discount:
    """
    Count one use of a discount and add ``savings`` to its running total.
    The increment happens inside the store against the persisted row, so
    concurrent checkouts do not overwrite each other.
    """
    store = store or get_store()
    savings = quantize_money(to_decimal(savings))
    if savings < 0:
        raise ValidationError("Savings amount cannot be negative.", code="negative_savings")

    discount = store.increment_usage(discount_id, savings)
    if discount is None:
        log.error("DISCOUNT_USAGE_MISSING dc_id=%s savings=%s", discount_id, savings)
        raise DiscountNotFound(f"Discount with ID {discount_id} not found")

    log.info(
        "DISCOUNT_USAGE_RECORDED dc_id=%s code=%s savings=%s usage=%s total_savings=%s",
        discount.pk,
        discount.code,
        savings,
        discount.usage_count,
        discount.total_savings_amount,
    )
    return discount


def automatic_shares(decision: DiscountDecision) -> List[Tuple[Discount, Decimal]]:
    """
    Savings per automatic rule. When the stacked sum was capped, the applied
    amount is split pro rata and the last rule takes the rounding remainder.
    Shares always add up to the applied automatic amount.
    """
    raw = sum((c.amount for c in decision.automatic), Decimal("0"))
    if raw <= 0 or decision.automatic_amount >= raw:
        return [(c.discount, quantize_money(c.amount)) for c in decision.automatic]

    shares, left = [], quantize_money(decision.automatic_amount)
    last = len(decision.automatic) - 1
    for i, c in enumerate(decision.automatic):
        share = left if i == last else min(left, quantize_money(c.amount * decision.automatic_amount / raw))
        left -= share
        shares.append((c.discount, share))
    return shares


def record_decision(decision: DiscountDecision, store=None) -> List[Discount]:
    """Commit the winning side of a decision, once, after checkout confirms."""
    store = store or get_store()
    if decision.winner == MANUAL:
        return [record_usage(decision.discount.pk, decision.manual_amount, store=store)]
    return [
        record_usage(discount.pk, share, store=store)
        for discount, share in automatic_shares(decision)
    ]


def get_statistics(store=None, top=None) -> DiscountStatistics:
    store = store or get_store()
    if top is None:
        top = int((getattr(settings, "DISCOUNTS", {}) or {}).get("STATISTICS_TOP", 5))

    try:
        discounts = store.all()
    except DiscountStoreUnavailable as e:
        log.error("DISCOUNT_STATS_FAILED err=%s", e)
        return DiscountStatistics()

    used = sorted(
        (d for d in discounts if d.usage_count > 0),
        key=lambda d: (-d.usage_count, d.pk),
    )
    return DiscountStatistics(
        total_usage=sum(d.usage_count for d in discounts),
        total_savings=sum((to_decimal(d.total_savings_amount) for d in discounts), Decimal("0")),
        most_used=[{"code": d.code, "usage_count": d.usage_count} for d in used[:top]],
    )
