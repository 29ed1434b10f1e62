from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient
from django.test import SimpleTestCase, TestCase

from apps.discounts.api.serializers import DecisionOut
from apps.discounts.exceptions import DiscountStoreUnavailable
from apps.discounts.models import Discount
from apps.discounts.services.selector import DiscountDecision

from .helpers import NOW, make_discount

User = get_user_model()


class DiscountApiTestBase(TestCase):
    def setUp(self):
        self.client = APIClient()
        now = timezone.now()
        self.ten = make_discount(code="TEN", amount=10, min_order_amount=100,
                                 start_date=now - timedelta(days=1), end_date=now + timedelta(days=1))
        self.ten.save()
        self.gpu = make_discount(code="GPUAUTO", is_automatic=True, target_type="categories",
                                 category_names=["GPU"], amount=15,
                                 start_date=now - timedelta(days=1), end_date=now + timedelta(days=1))
        self.gpu.save()
        self.old = make_discount(code="OLD", start_date=now - timedelta(days=9), end_date=now - timedelta(days=1))
        self.old.save()

    def login_admin(self):
        admin = User.objects.create_user(username="admin", password="pass", is_staff=True)
        self.client.force_authenticate(user=admin)


class ValidateDiscountApiTest(DiscountApiTestBase):
    def test_manual_wins(self):
        url = reverse("discounts:discount-validate")
        res = self.client.post(url, {"code": "TEN", "order_amount": "200"}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertTrue(res.data["valid"])
        self.assertEqual(res.data["discount_amount"], "20.00")
        self.assertEqual(res.data["better_discount_type"], "manual")
        self.assertEqual(res.data["payable_amount"], "180.00")
        self.assertEqual(res.data["discount"]["code"], "TEN")

    def test_automatic_wins_with_lines(self):
        url = reverse("discounts:discount-validate")
        payload = {
            "code": "TEN",
            "lines": [
                {"product_id": "p1", "category": "GPU", "unit_price": "1000", "quantity": 1},
                {"product_id": "p2", "category": "CPU", "unit_price": "100", "quantity": 1},
            ],
        }
        res = self.client.post(url, payload, format="json")
        self.assertEqual(res.status_code, 200)
        # manual 10% of 1100 = 110, automatic 15% of 1000 = 150
        self.assertEqual(res.data["discount_amount"], "110.00")
        self.assertEqual(res.data["automatic_discount_amount"], "150.00")
        self.assertEqual(res.data["better_discount_type"], "automatic")
        self.assertEqual(res.data["total_discount_amount"], "150.00")
        self.assertEqual(res.data["automatic_discounts"][0]["discount"]["code"], "GPUAUTO")

    def test_invalid_code_blocks(self):
        url = reverse("discounts:discount-validate")
        res = self.client.post(url, {"code": "NOPE", "order_amount": "200"}, format="json")
        self.assertEqual(res.status_code, 400)
        self.assertFalse(res.data["valid"])
        self.assertEqual(res.data["reason"], "invalid_code")

    def test_expired_code(self):
        url = reverse("discounts:discount-validate")
        res = self.client.post(url, {"code": "OLD", "order_amount": "200"}, format="json")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["reason"], "expired")

    def test_below_minimum(self):
        url = reverse("discounts:discount-validate")
        res = self.client.post(url, {"code": "TEN", "order_amount": "50"}, format="json")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["reason"], "below_minimum")

    def test_legacy_product_ids_and_prices(self):
        Discount.objects.filter(pk=self.ten.pk).update(
            target_type="products", product_ids=["p1"], min_order_amount=None
        )
        url = reverse("discounts:discount-validate")
        payload = {
            "code": "TEN",
            "order_amount": "300",
            "product_ids": ["p1", "p2"],
            "product_prices": {"p1": "250", "p2": "50"},
        }
        res = self.client.post(url, payload, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["discount_amount"], "25.00")

    def test_partial_legacy_price_map_still_prices_known_ids(self):
        Discount.objects.filter(pk=self.ten.pk).update(
            target_type="products", product_ids=["p1"], min_order_amount=None
        )
        url = reverse("discounts:discount-validate")
        payload = {
            "code": "TEN",
            "product_ids": ["p1", "p2"],
            "product_prices": {"p1": "250"},
        }
        res = self.client.post(url, payload, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["discount_amount"], "25.00")

    def test_missing_code_is_bad_request(self):
        url = reverse("discounts:discount-validate")
        res = self.client.post(url, {"order_amount": "10"}, format="json")
        self.assertEqual(res.status_code, 400)
        self.assertIn("code", res.data)

    def test_store_down_is_retryable(self):
        url = reverse("discounts:discount-validate")
        with mock.patch(
            "apps.discounts.stores.orm.OrmDiscountStore.find_by_code",
            side_effect=DiscountStoreUnavailable("db down"),
        ):
            res = self.client.post(url, {"code": "TEN", "order_amount": "200"}, format="json")
        self.assertEqual(res.status_code, 503)


class LookupApiTest(DiscountApiTestBase):
    def test_code_lookup_persists_expiry(self):
        res = self.client.get(reverse("discounts:discount-by-code", args=["OLD"]))
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["status"], "expired")
        self.old.refresh_from_db()
        self.assertEqual(self.old.status, "expired")

    def test_code_lookup_404(self):
        res = self.client.get(reverse("discounts:discount-by-code", args=["NOPE"]))
        self.assertEqual(res.status_code, 404)

    def test_admin_list_does_not_persist(self):
        self.login_admin()
        res = self.client.get(reverse("discounts:discount-admin-list"))
        self.assertEqual(res.status_code, 200)
        statuses = {d["code"]: d["status"] for d in res.data["discounts"]}
        self.assertEqual(statuses["OLD"], "expired")
        self.old.refresh_from_db()
        self.assertEqual(self.old.status, "active")

    def test_admin_list_requires_staff(self):
        res = self.client.get(reverse("discounts:discount-admin-list"))
        self.assertIn(res.status_code, (401, 403))

    def test_automatic_for_cart(self):
        payload = {"lines": [{"product_id": "p1", "category": "GPU", "unit_price": "200"}]}
        res = self.client.post(reverse("discounts:discount-automatic"), payload, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertEqual([d["discount"]["code"] for d in res.data["discounts"]], ["GPUAUTO"])
        self.assertEqual(res.data["discounts"][0]["amount"], "30.00")


class PricingAndUsageApiTest(DiscountApiTestBase):
    def test_price_products(self):
        payload = {"products": [
            {"id": "p1", "price": "1000", "category": "GPU"},
            {"id": "p2", "price": "500", "category": "CPU"},
        ]}
        res = self.client.post(reverse("discounts:discount-price-products"), payload, format="json")
        self.assertEqual(res.status_code, 200)
        p1, p2 = res.data["products"]
        self.assertEqual(p1["price"], "850.00")
        self.assertTrue(p1["is_discounted"])
        self.assertEqual(p2["price"], "500.00")
        self.assertFalse(p2["is_discounted"])

    def test_record_usage_and_statistics(self):
        self.login_admin()
        url = reverse("discounts:discount-record-usage", args=[self.ten.pk])
        res = self.client.post(url, {"savings_amount": "20"}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["usage_count"], 1)

        res = self.client.get(reverse("discounts:discount-statistics"))
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["total_usage"], 1)
        self.assertEqual(res.data["total_savings"], "20.00")
        self.assertEqual(res.data["most_used_discounts"], [{"code": "TEN", "usage_count": 1}])

    def test_record_usage_unknown(self):
        self.login_admin()
        url = reverse("discounts:discount-record-usage", args=[987654])
        res = self.client.post(url, {"savings_amount": "1"}, format="json")
        self.assertEqual(res.status_code, 404)

    def test_record_usage_requires_staff(self):
        url = reverse("discounts:discount-record-usage", args=[self.ten.pk])
        res = self.client.post(url, {"savings_amount": "1"}, format="json")
        self.assertIn(res.status_code, (401, 403))


class DecisionRenderingTest(SimpleTestCase):
    def test_half_minor_unit_rounds_up_and_adds_up(self):
        decision = DiscountDecision(
            discount=make_discount(), manual_amount=Decimal("0.125"), total_amount=Decimal("0.125")
        )
        out = DecisionOut(decision, context={"now": NOW, "order_total": Decimal("10")}).data
        self.assertEqual(out["discount_amount"], "0.13")
        self.assertEqual(out["total_discount_amount"], "0.13")
        self.assertEqual(out["payable_amount"], "9.87")
