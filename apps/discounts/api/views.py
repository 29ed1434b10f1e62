import logging

from django.utils import timezone
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from ..exceptions import DiscountNotFound, DiscountRejected, DiscountStoreUnavailable
from ..services.enrichment import enrich_products
from ..services.lifecycle import resolve_by_code
from ..services.selector import find_automatic_discounts, resolve
from ..services.usage import get_statistics, record_usage
from ..stores import get_store
from .serializers import (
    AdminDiscountOut,
    CartIn,
    ContributionOut,
    DecisionOut,
    DiscountOut,
    PricedProductOut,
    ProductsIn,
    RejectionOut,
    StatisticsOut,
    UsageIn,
    ValidateCodeIn,
)

log = logging.getLogger("discounts")

STORE_DOWN = {"detail": "Discount service is temporarily unavailable. Please retry."}


class ValidateDiscountView(APIView):
    """Resolve a manual code against the cart and compare it with automatic discounts."""

    permission_classes = [permissions.AllowAny]

    def post(self, request):
        s = ValidateCodeIn(data=request.data)
        s.is_valid(raise_exception=True)
        ctx = s.to_context()
        now = timezone.now()

        try:
            decision = resolve(s.validated_data["code"], ctx, now=now, store=get_store())
        except DiscountRejected as e:
            out = RejectionOut(dict(valid=False, reason=e.reason, message=e.message)).data
            return Response(out, status=status.HTTP_400_BAD_REQUEST)
        except DiscountStoreUnavailable:
            return Response(STORE_DOWN, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        out = DecisionOut(decision, context={"now": now, "order_total": ctx.total}).data
        return Response(out, status=status.HTTP_200_OK)


class AutomaticDiscountsView(APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        s = CartIn(data=request.data)
        s.is_valid(raise_exception=True)
        now = timezone.now()

        try:
            found = find_automatic_discounts(s.to_context(), now=now, store=get_store())
        except DiscountStoreUnavailable:
            return Response(STORE_DOWN, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        out = ContributionOut(found, many=True, context={"now": now}).data
        return Response({"success": True, "discounts": out})


class PriceProductsView(APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        s = ProductsIn(data=request.data)
        s.is_valid(raise_exception=True)
        priced = enrich_products(s.to_products(), store=get_store())
        return Response({"products": PricedProductOut(priced, many=True).data})


class DiscountByCodeView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request, code):
        now = timezone.now()
        try:
            discount = resolve_by_code(code, now, store=get_store())
        except DiscountStoreUnavailable:
            return Response(STORE_DOWN, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        if discount is None:
            return Response({"detail": f"Discount with code {code} not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(DiscountOut(discount, context={"now": now}).data)


class AdminDiscountListView(APIView):
    """All discounts with their effective status. Read only: expiry is not written back here."""

    permission_classes = [permissions.IsAdminUser]

    def get(self, request):
        now = timezone.now()
        try:
            discounts = get_store().all()
        except DiscountStoreUnavailable:
            return Response(STORE_DOWN, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        out = AdminDiscountOut(discounts, many=True, context={"now": now}).data
        return Response({"success": True, "discounts": out})


class DiscountStatisticsView(APIView):
    permission_classes = [permissions.IsAdminUser]

    def get(self, request):
        return Response(StatisticsOut(get_statistics(store=get_store())).data)


class RecordUsageView(APIView):
    permission_classes = [permissions.IsAdminUser]

    def post(self, request, pk):
        s = UsageIn(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            discount = record_usage(pk, s.validated_data["savings_amount"], store=get_store())
        except DiscountNotFound as e:
            return Response({"detail": str(e)}, status=status.HTTP_404_NOT_FOUND)
        except DiscountStoreUnavailable:
            return Response(STORE_DOWN, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        return Response(AdminDiscountOut(discount).data)
