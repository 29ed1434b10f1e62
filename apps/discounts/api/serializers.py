from decimal import ROUND_HALF_UP

from rest_framework import serializers

from ..cart import CartContext, CartLine
from ..models import Discount
from ..services.enrichment import CatalogProduct
from ..services.lifecycle import peek_status

MONEY = dict(max_digits=16, decimal_places=2, rounding=ROUND_HALF_UP)


class CartLineIn(serializers.Serializer):
    product_id = serializers.CharField(max_length=64)
    category = serializers.CharField(max_length=128, required=False, allow_null=True, allow_blank=True)
    unit_price = serializers.DecimalField(min_value=0, required=False, allow_null=True, **MONEY)
    quantity = serializers.IntegerField(min_value=1, default=1)


class CartIn(serializers.Serializer):
    lines = CartLineIn(many=True, required=False, default=list)
    # legacy callers: bare product ids plus an optional id -> price map
    product_ids = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    product_prices = serializers.DictField(
        child=serializers.DecimalField(min_value=0, **MONEY), required=False, default=dict
    )
    order_amount = serializers.DecimalField(min_value=0, required=False, allow_null=True, **MONEY)
    customer_id = serializers.CharField(max_length=64, required=False, allow_null=True, allow_blank=True)
    is_first_purchase = serializers.BooleanField(required=False, allow_null=True, default=None)

    def to_context(self) -> CartContext:
        data = self.validated_data
        lines = [
            CartLine(
                product_id=ln["product_id"],
                category=ln.get("category") or None,
                unit_price=ln.get("unit_price"),
                quantity=ln.get("quantity") or 1,
            )
            for ln in data.get("lines") or []
        ]
        prices = data.get("product_prices") or {}
        for pid in data.get("product_ids") or []:
            lines.append(CartLine(product_id=pid, unit_price=prices.get(pid)))

        return CartContext(
            lines=lines,
            order_amount=data.get("order_amount"),
            customer_id=data.get("customer_id") or None,
            is_first_purchase=data.get("is_first_purchase"),
        )


class ValidateCodeIn(CartIn):
    code = serializers.CharField(max_length=64)

    def validate_code(self, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise serializers.ValidationError("Discount code is required.")
        return v


class DiscountOut(serializers.ModelSerializer):
    status = serializers.SerializerMethodField()

    class Meta:
        model = Discount
        fields = [
            "id", "code", "name", "description",
            "start_date", "end_date", "kind", "amount", "status",
            "target_type", "product_ids", "category_names", "customer_ids",
            "min_order_amount", "is_first_purchase_only", "is_automatic",
            "created_at", "updated_at",
        ]

    def get_status(self, obj):
        return peek_status(obj, self.context.get("now"))


class AdminDiscountOut(DiscountOut):
    class Meta(DiscountOut.Meta):
        fields = DiscountOut.Meta.fields + ["usage_count", "total_savings_amount"]


class ContributionOut(serializers.Serializer):
    discount = DiscountOut()
    amount = serializers.DecimalField(**MONEY)


class DecisionOut(serializers.Serializer):
    valid = serializers.BooleanField()
    discount = DiscountOut()
    discount_amount = serializers.DecimalField(source="manual_amount", **MONEY)
    automatic_discounts = ContributionOut(source="automatic", many=True)
    automatic_discount_amount = serializers.DecimalField(source="automatic_amount", **MONEY)
    better_discount_type = serializers.CharField(source="winner")
    total_discount_amount = serializers.DecimalField(source="total_amount", **MONEY)
    payable_amount = serializers.SerializerMethodField()

    def get_payable_amount(self, obj):
        total = self.context.get("order_total")
        if total is None:
            return None
        return str(obj.payable_amount(total))


class RejectionOut(serializers.Serializer):
    valid = serializers.BooleanField(default=False)
    reason = serializers.CharField()
    message = serializers.CharField()


class ProductIn(serializers.Serializer):
    id = serializers.CharField(max_length=64)
    price = serializers.DecimalField(min_value=0, **MONEY)
    category = serializers.CharField(max_length=128, required=False, allow_null=True, allow_blank=True)


class ProductsIn(serializers.Serializer):
    products = ProductIn(many=True)

    def to_products(self):
        return [
            CatalogProduct(id=p["id"], price=p["price"], category=p.get("category") or None)
            for p in self.validated_data["products"]
        ]


class PricedProductOut(serializers.Serializer):
    id = serializers.CharField()
    price = serializers.DecimalField(source="display_price", **MONEY)
    original_price = serializers.DecimalField(**MONEY)
    is_discounted = serializers.BooleanField()
    discount_percentage = serializers.DecimalField(max_digits=6, decimal_places=2, allow_null=True)
    discount_id = serializers.IntegerField(allow_null=True)
    discount_type = serializers.CharField(allow_null=True)
    discount_source = serializers.CharField(allow_null=True)


class UsageIn(serializers.Serializer):
    savings_amount = serializers.DecimalField(min_value=0, **MONEY)


class StatisticsOut(serializers.Serializer):
    total_usage = serializers.IntegerField()
    total_savings = serializers.DecimalField(**MONEY)
    most_used_discounts = serializers.ListField(source="most_used", child=serializers.DictField())
