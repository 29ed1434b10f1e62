from django.contrib import admin
from django.utils import timezone

from .models import Discount
from .services.lifecycle import peek_status


@admin.register(Discount)
class DiscountAdmin(admin.ModelAdmin):
    list_display = (
        "code",
        "name",
        "kind",
        "amount",
        "target_type",
        "is_automatic",
        "effective_status",
        "start_date",
        "end_date",
        "usage_count",
        "total_savings_amount",
    )
    list_filter = ("kind", "status", "target_type", "is_automatic", "is_first_purchase_only")
    search_fields = ("code", "name")
    # counters belong to the usage tracker
    readonly_fields = ("usage_count", "total_savings_amount", "created_at", "updated_at")
    ordering = ("-created_at",)
    list_per_page = 50

    @admin.display(description="Status")
    def effective_status(self, obj):
        return peek_status(obj, timezone.now())
