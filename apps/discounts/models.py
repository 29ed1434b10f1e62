from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models


class DiscountKind(models.TextChoices):
    PERCENTAGE = "percentage", "Percentage"
    FIXED = "fixed", "Fixed amount"


class DiscountStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    INACTIVE = "inactive", "Inactive"
    # only ever written by the code-lookup path
    EXPIRED = "expired", "Expired"


class TargetType(models.TextChoices):
    ALL = "all", "Whole order"
    PRODUCTS = "products", "Products"
    CATEGORIES = "categories", "Categories"
    CUSTOMERS = "customers", "Customers"


# target_type -> the list field that is authoritative for it
TARGET_FIELDS = {
    TargetType.PRODUCTS: "product_ids",
    TargetType.CATEGORIES: "category_names",
    TargetType.CUSTOMERS: "customer_ids",
}


class Discount(models.Model):
    code = models.CharField(max_length=64, unique=True, db_index=True)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")

    start_date = models.DateTimeField()
    end_date = models.DateTimeField()

    kind = models.CharField(max_length=20, choices=DiscountKind.choices)
    amount = models.DecimalField(
        max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal("0"))]
    )
    status = models.CharField(
        max_length=20, choices=DiscountStatus.choices, default=DiscountStatus.ACTIVE, db_index=True
    )

    # ───────────── Targeting ─────────────
    target_type = models.CharField(
        max_length=20, choices=TargetType.choices, default=TargetType.ALL
    )
    product_ids = models.JSONField(default=list, blank=True)
    category_names = models.JSONField(default=list, blank=True)
    customer_ids = models.JSONField(default=list, blank=True)

    min_order_amount = models.DecimalField(
        max_digits=14, decimal_places=2, null=True, blank=True,
        validators=[MinValueValidator(Decimal("0"))],
    )
    is_first_purchase_only = models.BooleanField(default=False)
    is_automatic = models.BooleanField(default=False, db_index=True)

    # ───────────── Usage (Usage Tracker only) ─────────────
    usage_count = models.PositiveIntegerField(default=0)
    total_savings_amount = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal("0"))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["is_automatic", "status"], name="discount_auto_status_idx"),
            models.Index(fields=["start_date", "end_date"], name="discount_window_idx"),
        ]

    def __str__(self):
        return f"{self.code} ({self.kind} {self.amount})"

    def clean(self):
        super().clean()

        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError(
                {"end_date": ValidationError("End date must be after start date.", code="invalid_window")}
            )

        if self.kind == DiscountKind.PERCENTAGE and self.amount is not None:
            if self.amount < 0 or self.amount > 100:
                raise ValidationError(
                    {"amount": ValidationError(
                        "Percentage discount must be between 0 and 100.", code="percentage_out_of_range"
                    )}
                )

        field = TARGET_FIELDS.get(self.target_type)
        if field and not getattr(self, field):
            raise ValidationError(
                {field: ValidationError(
                    f'At least one entry is required when target type is "{self.target_type}".',
                    code="missing_targets",
                )}
            )

    # ───────────── Properties ─────────────
    @property
    def targets(self) -> set:
        """The id/label set selected by target_type (empty for "all")."""
        field = TARGET_FIELDS.get(self.target_type)
        if not field:
            return set()
        return {str(x) for x in (getattr(self, field) or [])}

    @property
    def is_percentage(self) -> bool:
        return self.kind == DiscountKind.PERCENTAGE
