# apps/discounts/services/enrichment.py
"""
Display prices for catalog listings.

Each product gets the single best automatic discount that targets it; rules
are never summed here, unlike cart resolution.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional, Tuple

from django.utils import timezone

from ..cart import to_decimal
from ..exceptions import DiscountStoreUnavailable
from ..models import Discount, TargetType
from ..stores import get_store
from ..utils import quantize_money
from .amounts import ZERO, amount_for_price
from .lifecycle import is_usable

log = logging.getLogger("discounts")


@dataclass(frozen=True)
class CatalogProduct:
    id: str
    price: Decimal
    category: Optional[str] = None


@dataclass(frozen=True)
class PricedProduct:
    id: str
    original_price: Decimal
    display_price: Decimal
    is_discounted: bool = False
    discount_percentage: Optional[Decimal] = None
    discount_id: Optional[int] = None
    discount_type: Optional[str] = None
    discount_source: Optional[str] = None

    @classmethod
    def full_price(cls, product: CatalogProduct) -> "PricedProduct":
        price = to_decimal(product.price)
        return cls(id=str(product.id), original_price=price, display_price=quantize_money(price))


def targets_product(discount: Discount, product: CatalogProduct) -> bool:
    if discount.target_type == TargetType.ALL:
        return True
    if discount.target_type == TargetType.PRODUCTS:
        return str(product.id) in discount.targets
    if discount.target_type == TargetType.CATEGORIES:
        return product.category is not None and product.category in discount.targets
    return False


def best_discount(discounts: Iterable[Discount], price) -> Tuple[Optional[Discount], Decimal]:
    best, best_amount = None, ZERO
    for d in discounts:
        amount = amount_for_price(d, price)
        if best is None or amount > best_amount:
            best, best_amount = d, amount
    return best, best_amount


def price_product(product: CatalogProduct, discounts: Iterable[Discount]) -> PricedProduct:
    price = to_decimal(product.price)
    candidates = [d for d in discounts if targets_product(d, product)]
    best, amount = best_discount(candidates, price)
    if best is None or amount <= ZERO or price <= ZERO:
        return PricedProduct.full_price(product)

    if best.is_percentage:
        percentage = to_decimal(best.amount)
    else:
        percentage = (amount / price * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)

    return PricedProduct(
        id=str(product.id),
        original_price=price,
        display_price=quantize_money(price - amount),
        is_discounted=True,
        discount_percentage=percentage,
        discount_id=best.pk,
        discount_type=best.kind,
        discount_source="automatic",
    )


def enrich_products(products: Iterable[CatalogProduct], now=None, store=None) -> List[PricedProduct]:
    """Best-effort: any failure leaves the affected product at full price."""
    products = list(products)
    now = now or timezone.now()
    store = store or get_store()

    try:
        discounts = [d for d in store.find_automatic_active(now) if is_usable(d, now)]
    except DiscountStoreUnavailable as e:
        log.warning("ENRICH_STORE_FAILED products=%s err=%s", len(products), e)
        return [PricedProduct.full_price(p) for p in products]

    priced = []
    for p in products:
        try:
            priced.append(price_product(p, discounts))
        except Exception:
            log.exception("ENRICH_PRODUCT_FAILED product=%s", getattr(p, "id", None))
            priced.append(PricedProduct.full_price(p))
    return priced
