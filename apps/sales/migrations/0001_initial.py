import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("core", "0001_initial"),
        ("inventory", "0001_initial"),
        ("crm", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Sale",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for the sale",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "sale_number",
                    models.CharField(
                        help_text="Sequential transaction number within the store (e.g., 'TRX-00000001')",
                        max_length=50,
                    ),
                ),
                (
                    "transaction_date",
                    models.DateTimeField(
                        db_index=True,
                        default=django.utils.timezone.now,
                        help_text="When the sale took place (may be back-dated for manual entries)",
                    ),
                ),
                (
                    "customer_name",
                    models.CharField(
                        default="Umum", help_text="Customer name at time of sale", max_length=255
                    ),
                ),
                (
                    "subtotal",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Sum of line totals before discount and tax",
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "discount_type",
                    models.CharField(
                        choices=[("FIXED", "Fixed amount"), ("PERCENTAGE", "Percentage")],
                        default="FIXED",
                        help_text="How the discount value was applied",
                        max_length=20,
                    ),
                ),
                (
                    "discount_value",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Discount as entered (amount or percentage)",
                        max_digits=14,
                    ),
                ),
                (
                    "discount_amount",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Discount amount, never more than the subtotal",
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "tax_type",
                    models.CharField(
                        choices=[("FIXED", "Fixed amount"), ("PERCENTAGE", "Percentage")],
                        default="PERCENTAGE",
                        help_text="How the tax value was applied",
                        max_length=20,
                    ),
                ),
                (
                    "tax_value",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Tax as entered (amount or percentage)",
                        max_digits=14,
                    ),
                ),
                (
                    "tax_amount",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Tax amount charged on the discounted subtotal",
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "total",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Grand total (subtotal - discount + tax)",
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "payment_method",
                    models.CharField(
                        choices=[
                            ("CASH", "Tunai"),
                            ("BANK_TRANSFER", "Transfer Bank"),
                            ("E_WALLET", "E-Wallet"),
                            ("BALANCE", "Saldo"),
                        ],
                        help_text="Payment method used",
                        max_length=20,
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True, db_index=True, help_text="When the sale was recorded"
                    ),
                ),
                (
                    "cashier",
                    models.ForeignKey(
                        blank=True,
                        help_text="User who processed the sale",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="sales_processed",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "customer",
                    models.ForeignKey(
                        blank=True,
                        help_text="Customer who made the purchase (optional for walk-in sales)",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="sales",
                        to="crm.customer",
                    ),
                ),
                (
                    "store",
                    models.ForeignKey(
                        help_text="Store that owns this sale",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="sales",
                        to="core.store",
                    ),
                ),
            ],
            options={
                "verbose_name": "Sale",
                "verbose_name_plural": "Sales",
                "db_table": "sales",
                "ordering": ["-transaction_date", "-created_at"],
                "indexes": [
                    models.Index(fields=["store", "-transaction_date"], name="sale_store_date_idx"),
                    models.Index(fields=["store", "payment_method"], name="sale_payment_idx"),
                    models.Index(fields=["store", "total"], name="sale_store_total_idx"),
                    models.Index(
                        fields=["customer", "-transaction_date"], name="sale_cust_date_idx"
                    ),
                ],
                "unique_together": {("store", "sale_number")},
            },
        ),
        migrations.CreateModel(
            name="SaleItem",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for the sale item",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "line_number",
                    models.PositiveSmallIntegerField(
                        default=1, help_text="Position of the line on the receipt"
                    ),
                ),
                (
                    "product_name",
                    models.CharField(help_text="Product name at time of sale", max_length=255),
                ),
                (
                    "brand",
                    models.CharField(blank=True, help_text="Brand at time of sale", max_length=100),
                ),
                (
                    "category",
                    models.CharField(
                        blank=True, help_text="Category at time of sale", max_length=100
                    ),
                ),
                (
                    "quantity",
                    models.PositiveIntegerField(
                        help_text="Quantity sold",
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                (
                    "unit_price",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Unit price at time of sale",
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "unit_cost",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Unit cost at time of sale (for profit reporting)",
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "line_total",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="quantity * unit_price",
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        blank=True,
                        help_text="Product that was sold",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="sale_items",
                        to="inventory.product",
                    ),
                ),
                (
                    "sale",
                    models.ForeignKey(
                        help_text="Sale that this item belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="sales.sale",
                    ),
                ),
            ],
            options={
                "verbose_name": "Sale Item",
                "verbose_name_plural": "Sale Items",
                "db_table": "sale_items",
                "ordering": ["sale", "line_number"],
                "indexes": [
                    models.Index(fields=["sale"], name="saleitem_sale_idx"),
                    models.Index(fields=["product"], name="saleitem_product_idx"),
                ],
            },
        ),
    ]
