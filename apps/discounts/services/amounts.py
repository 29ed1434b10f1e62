# apps/discounts/services/amounts.py
"""
Monetary effect of a discount.

Nothing here rounds: amounts stay exact Decimals until a price is actually
mutated (see ``apps.discounts.utils``), so stacking several rules does not
compound rounding error.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Optional

from django.conf import settings

from ..cart import CartContext, to_decimal
from ..models import Discount, TargetType
from .targeting import matching_lines

ZERO = Decimal("0")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class Contribution:
    discount: Discount
    amount: Decimal


def _convert(discount: Discount, base: Decimal) -> Decimal:
    if base <= ZERO:
        return ZERO
    value = to_decimal(discount.amount)
    if discount.is_percentage:
        return base * value / HUNDRED
    return max(ZERO, min(value, base))


def price_weighted_base(discount: Discount, ctx: CartContext) -> Decimal:
    return sum((line.subtotal for line in matching_lines(discount, ctx)), ZERO)


def _matching_lines_priced(discount: Discount, ctx: CartContext) -> bool:
    matched = matching_lines(discount, ctx)
    return bool(matched) and all(line.unit_price is not None for line in matched)


def proportional_base(discount: Discount, ctx: CartContext) -> Decimal:
    """
    Fallback when a matching line carries no price: the order amount split
    linearly by matching line count. Not price-weighted.
    """
    if not ctx.lines or ctx.order_amount is None:
        return ZERO
    matched = len(matching_lines(discount, ctx))
    if not matched:
        return ZERO
    return ctx.order_amount * Decimal(matched) / Decimal(len(ctx.lines))


def base_amount(discount: Discount, ctx: CartContext) -> Decimal:
    if discount.target_type in (TargetType.PRODUCTS, TargetType.CATEGORIES):
        # only the matched lines need prices
        if _matching_lines_priced(discount, ctx):
            return price_weighted_base(discount, ctx)
        return proportional_base(discount, ctx)
    return ctx.total or ZERO


def discount_amount(discount: Discount, ctx: CartContext) -> Decimal:
    return _convert(discount, base_amount(discount, ctx))


def amount_for_price(discount: Discount, price) -> Decimal:
    """Single-product variant: the product price is the base."""
    return _convert(discount, to_decimal(price))


def contributions(discounts: Iterable[Discount], ctx: CartContext) -> List[Contribution]:
    return [Contribution(d, discount_amount(d, ctx)) for d in discounts]


def _cap_enabled() -> bool:
    cfg = getattr(settings, "DISCOUNTS", {}) or {}
    return bool(cfg.get("CAP_STACKED_AUTOMATIC", False))


def stacked_amount(items: Iterable[Contribution], ctx: CartContext, cap: Optional[bool] = None) -> Decimal:
    """
    Sum of independently computed amounts. Uncapped unless the cap is
    switched on, in which case the sum is clamped to the order total.
    """
    total = sum((c.amount for c in items), ZERO)
    if cap is None:
        cap = _cap_enabled()
    if cap and ctx.total is not None:
        total = min(total, ctx.total)
    return total
