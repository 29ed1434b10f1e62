# apps/discounts/cart.py
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Tuple


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if value is None:
        return Decimal("0")
    # str() keeps floats like 0.1 from dragging binary noise into sums
    return Decimal(str(value))


@dataclass(frozen=True)
class CartLine:
    product_id: str
    category: Optional[str] = None
    unit_price: Optional[Decimal] = None
    quantity: int = 1

    def __post_init__(self):
        object.__setattr__(self, "product_id", str(self.product_id))
        if self.unit_price is not None:
            object.__setattr__(self, "unit_price", to_decimal(self.unit_price))
        object.__setattr__(self, "quantity", int(self.quantity or 0))

    @property
    def subtotal(self) -> Decimal:
        return to_decimal(self.unit_price) * self.quantity


@dataclass(frozen=True)
class CartContext:
    """
    What the caller knows about the cart at pricing time.

    ``order_amount`` may be given without ``lines`` (legacy call sites).
    ``is_first_purchase`` is tri-state: None means unknown.
    """

    lines: Tuple[CartLine, ...] = field(default_factory=tuple)
    order_amount: Optional[Decimal] = None
    customer_id: Optional[str] = None
    is_first_purchase: Optional[bool] = None

    def __post_init__(self):
        object.__setattr__(self, "lines", tuple(self.lines or ()))
        if self.order_amount is not None:
            object.__setattr__(self, "order_amount", to_decimal(self.order_amount))
        if self.customer_id is not None:
            object.__setattr__(self, "customer_id", str(self.customer_id))

    @property
    def product_ids(self) -> set:
        return {line.product_id for line in self.lines}

    @property
    def categories(self) -> set:
        return {line.category for line in self.lines if line.category}

    @property
    def has_prices(self) -> bool:
        return bool(self.lines) and all(line.unit_price is not None for line in self.lines)

    @property
    def total(self) -> Optional[Decimal]:
        if self.order_amount is not None:
            return self.order_amount
        if self.has_prices:
            return sum((line.subtotal for line in self.lines), Decimal("0"))
        return None
