from decimal import Decimal

from django.test import SimpleTestCase

from apps.discounts.cart import CartContext
from apps.discounts.services.targeting import applies, meets_minimum

from .helpers import cart, make_discount


class AppliesTest(SimpleTestCase):
    def test_all_always_applies(self):
        self.assertTrue(applies(make_discount(), CartContext(order_amount=Decimal("5"))))

    def test_products_needs_intersection(self):
        d = make_discount(target_type="products", product_ids=["p1", "p2"])
        self.assertTrue(applies(d, cart(("p2",), ("p9",))))
        self.assertFalse(applies(d, cart(("p3",))))

    def test_products_without_lines_never_applies(self):
        d = make_discount(target_type="products", product_ids=["p1"])
        self.assertFalse(applies(d, CartContext(order_amount=Decimal("500"))))

    def test_categories(self):
        d = make_discount(target_type="categories", category_names=["GPU"])
        self.assertTrue(applies(d, cart(("p1", "GPU"))))
        self.assertFalse(applies(d, cart(("p1", "CPU"))))

    def test_customers(self):
        d = make_discount(target_type="customers", customer_ids=["c1"])
        self.assertTrue(applies(d, CartContext(customer_id="c1")))
        self.assertFalse(applies(d, CartContext(customer_id="c2")))
        self.assertFalse(applies(d, CartContext()))

    def test_stale_lists_are_ignored(self):
        # product list left over from an earlier edit; the rule now targets categories
        d = make_discount(target_type="categories", category_names=["RAM"], product_ids=["p1"])
        self.assertFalse(applies(d, cart(("p1", "GPU"))))

    def test_first_purchase_gate(self):
        d = make_discount(is_first_purchase_only=True)
        self.assertFalse(applies(d, CartContext(is_first_purchase=False)))
        self.assertTrue(applies(d, CartContext(is_first_purchase=True)))

    def test_unknown_first_purchase_is_eligible(self):
        d = make_discount(is_first_purchase_only=True)
        self.assertTrue(applies(d, CartContext()))


class MeetsMinimumTest(SimpleTestCase):
    def test_below_and_above(self):
        d = make_discount(min_order_amount=100)
        self.assertFalse(meets_minimum(d, CartContext(order_amount=Decimal("99.99"))))
        self.assertTrue(meets_minimum(d, CartContext(order_amount=Decimal("100"))))

    def test_total_from_priced_lines(self):
        d = make_discount(target_type="products", product_ids=["p1"], min_order_amount=100)
        self.assertTrue(meets_minimum(d, cart(("p1", None, "60", 2))))

    def test_unknown_total_passes(self):
        d = make_discount(min_order_amount=100)
        self.assertTrue(meets_minimum(d, cart(("p1",))))
