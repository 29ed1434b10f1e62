# apps/discounts/services/selector.py
"""
Manual code vs. automatic discounts.

Both sides are computed; the decision reports the larger one and leaves
committing it (price mutation, usage tracking) to the caller.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Tuple

from django.utils import timezone

from .. import exceptions as exc
from ..cart import CartContext
from ..models import Discount, DiscountStatus, TargetType
from ..stores import get_store
from ..utils import compute_payable
from .amounts import Contribution, contributions, discount_amount, stacked_amount
from .lifecycle import is_usable, is_within_window, peek_status, resolve_by_code
from .targeting import applies, matching_lines, meets_minimum

log = logging.getLogger("discounts")

MANUAL = "manual"
AUTOMATIC = "automatic"


@dataclass(frozen=True)
class DiscountDecision:
    discount: Discount
    manual_amount: Decimal
    automatic: Tuple[Contribution, ...] = field(default_factory=tuple)
    automatic_amount: Decimal = Decimal("0")
    winner: str = MANUAL
    total_amount: Decimal = Decimal("0")
    valid: bool = True

    @property
    def automatic_rules(self) -> List[Discount]:
        return [c.discount for c in self.automatic]

    def payable_amount(self, order_total) -> Decimal:
        payable, _ = compute_payable(base_amount=order_total, discount_amount=self.total_amount)
        return payable


def _check_manual(discount: Optional[Discount], ctx: CartContext, now) -> Discount:
    if discount is None:
        raise exc.DiscountRejected(exc.INVALID_CODE)

    status = peek_status(discount, now)
    if status == DiscountStatus.EXPIRED:
        raise exc.DiscountRejected(exc.EXPIRED)
    # not yet started counts as inactive
    if status != DiscountStatus.ACTIVE or not is_within_window(discount, now):
        raise exc.DiscountRejected(exc.INACTIVE)

    if discount.target_type == TargetType.PRODUCTS and not matching_lines(discount, ctx):
        raise exc.DiscountRejected(exc.NOT_APPLICABLE)

    # the manual path only enforces the floor for whole-order discounts
    if (
        discount.target_type == TargetType.ALL
        and discount.min_order_amount
        and (ctx.total or Decimal("0")) < discount.min_order_amount
    ):
        raise exc.DiscountRejected(exc.BELOW_MINIMUM, minimum=discount.min_order_amount)

    return discount


def automatic_candidates(ctx: CartContext, now=None, *, store) -> List[Discount]:
    """Automatic discounts usable now that target this cart and meet their minimum."""
    now = now or timezone.now()
    return [
        d
        for d in store.find_automatic_active(now)
        if is_usable(d, now) and applies(d, ctx) and meets_minimum(d, ctx)
    ]


def find_automatic_discounts(ctx: CartContext, now=None, store=None) -> List[Contribution]:
    store = store or get_store()
    return contributions(automatic_candidates(ctx, now, store=store), ctx)


def resolve(code: str, ctx: CartContext, now=None, store=None) -> DiscountDecision:
    now = now or timezone.now()
    store = store or get_store()
    code = (code or "").strip()

    try:
        discount = _check_manual(resolve_by_code(code, now, store=store), ctx, now)
    except exc.DiscountRejected as e:
        log.info("DISCOUNT_REJECTED code=%s reason=%s", code, e.reason)
        raise

    manual = discount_amount(discount, ctx)

    auto = tuple(contributions(automatic_candidates(ctx, now, store=store), ctx))
    auto_total = stacked_amount(auto, ctx)

    winner = MANUAL if manual >= auto_total else AUTOMATIC
    decision = DiscountDecision(
        discount=discount,
        manual_amount=manual,
        automatic=auto,
        automatic_amount=auto_total,
        winner=winner,
        total_amount=max(manual, auto_total),
    )

    log.info(
        "DISCOUNT_RESOLVED code=%s dc_id=%s manual=%s auto=%s auto_rules=%s winner=%s",
        code,
        discount.pk,
        manual,
        auto_total,
        [c.discount.pk for c in auto],
        winner,
    )
    return decision
