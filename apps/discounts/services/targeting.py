# apps/discounts/services/targeting.py
from __future__ import annotations

from typing import List

from ..cart import CartContext, CartLine
from ..models import Discount, TargetType


def matching_lines(discount: Discount, ctx: CartContext) -> List[CartLine]:
    """Cart lines the discount's target list selects ("all"/"customers" select every line)."""
    targets = discount.targets
    if discount.target_type == TargetType.PRODUCTS:
        return [line for line in ctx.lines if line.product_id in targets]
    if discount.target_type == TargetType.CATEGORIES:
        return [line for line in ctx.lines if line.category in targets]
    return list(ctx.lines)


def applies(discount: Discount, ctx: CartContext) -> bool:
    # unknown (None) first-purchase state stays eligible
    if discount.is_first_purchase_only and ctx.is_first_purchase is False:
        return False

    ttype = discount.target_type
    if ttype == TargetType.ALL:
        return True
    if ttype in (TargetType.PRODUCTS, TargetType.CATEGORIES):
        return bool(matching_lines(discount, ctx))
    if ttype == TargetType.CUSTOMERS:
        return ctx.customer_id is not None and ctx.customer_id in discount.targets
    return False


def meets_minimum(discount: Discount, ctx: CartContext) -> bool:
    """
    Minimum-order gate as applied to automatic discounts (every target type).
    An unknown order total passes.
    """
    if not discount.min_order_amount:
        return True
    total = ctx.total
    if total is None:
        return True
    return total >= discount.min_order_amount
