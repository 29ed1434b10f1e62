from decimal import ROUND_HALF_UP, Decimal
from typing import Tuple

from django.conf import settings

from .cart import to_decimal


def _places() -> int:
    cfg = getattr(settings, "DISCOUNTS", {}) or {}
    return int(cfg.get("CURRENCY_DECIMAL_PLACES", 2))


def quantize_money(value) -> Decimal:
    """Round to the currency's minor unit (half up)."""
    exp = Decimal(1).scaleb(-_places())
    return to_decimal(value).quantize(exp, rounding=ROUND_HALF_UP)


def compute_payable(*, base_amount, discount_amount) -> Tuple[Decimal, Decimal]:
    """
    Apply a discount to a price.
    Returns: (payable, applied_discount), both rounded; payable never goes below zero.
    """
    base = quantize_money(to_decimal(base_amount))
    # round the discount first so payable + applied == base to the minor unit
    discount = quantize_money(min(to_decimal(discount_amount), base))
    payable = max(base - discount, Decimal("0"))
    return payable, base - payable
