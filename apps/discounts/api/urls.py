from django.urls import path
from .views import (
    AdminDiscountListView,
    AutomaticDiscountsView,
    DiscountByCodeView,
    DiscountStatisticsView,
    PriceProductsView,
    RecordUsageView,
    ValidateDiscountView,
)

urlpatterns = [
    path('validate/', ValidateDiscountView.as_view(), name='discount-validate'),
    path('automatic/', AutomaticDiscountsView.as_view(), name='discount-automatic'),
    path('price-products/', PriceProductsView.as_view(), name='discount-price-products'),
    path('code/<str:code>/', DiscountByCodeView.as_view(), name='discount-by-code'),
    path('admin/', AdminDiscountListView.as_view(), name='discount-admin-list'),
    path('statistics/', DiscountStatisticsView.as_view(), name='discount-statistics'),
    path('<int:pk>/usage/', RecordUsageView.as_view(), name='discount-record-usage'),
]
