from decimal import Decimal

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Discount",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(db_index=True, max_length=64, unique=True)),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("start_date", models.DateTimeField()),
                ("end_date", models.DateTimeField()),
                ("kind", models.CharField(choices=[("percentage", "Percentage"), ("fixed", "Fixed amount")], max_length=20)),
                (
                    "amount",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("inactive", "Inactive"), ("expired", "Expired")],
                        db_index=True,
                        default="active",
                        max_length=20,
                    ),
                ),
                (
                    "target_type",
                    models.CharField(
                        choices=[
                            ("all", "Whole order"),
                            ("products", "Products"),
                            ("categories", "Categories"),
                            ("customers", "Customers"),
                        ],
                        default="all",
                        max_length=20,
                    ),
                ),
                ("product_ids", models.JSONField(blank=True, default=list)),
                ("category_names", models.JSONField(blank=True, default=list)),
                ("customer_ids", models.JSONField(blank=True, default=list)),
                (
                    "min_order_amount",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        max_digits=14,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                    ),
                ),
                ("is_first_purchase_only", models.BooleanField(default=False)),
                ("is_automatic", models.BooleanField(db_index=True, default=False)),
                ("usage_count", models.PositiveIntegerField(default=0)),
                ("total_savings_amount", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=16)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["is_automatic", "status"], name="discount_auto_status_idx"),
                    models.Index(fields=["start_date", "end_date"], name="discount_window_idx"),
                ],
            },
        ),
    ]
