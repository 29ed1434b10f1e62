from datetime import timedelta
from decimal import Decimal

from django.utils import timezone

from apps.discounts.cart import CartContext, CartLine
from apps.discounts.models import Discount

NOW = timezone.now().replace(microsecond=0)


def make_discount(**kw) -> Discount:
    """Unsaved Discount with sensible defaults (active, whole order, 10%)."""
    data = dict(
        code="SAVE10",
        name="Save 10",
        kind="percentage",
        amount=Decimal("10"),
        status="active",
        target_type="all",
        start_date=NOW - timedelta(days=1),
        end_date=NOW + timedelta(days=1),
        usage_count=0,
        total_savings_amount=Decimal("0"),
    )
    data.update(kw)
    for key in ("amount", "min_order_amount"):
        if data.get(key) is not None:
            data[key] = Decimal(str(data[key]))
    return Discount(**data)


def cart(*lines, **kw) -> CartContext:
    return CartContext(lines=[CartLine(*ln) if isinstance(ln, tuple) else ln for ln in lines], **kw)
