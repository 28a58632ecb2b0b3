import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("core", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for the product",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "name",
                    models.CharField(help_text="Product name (e.g., 'Kopi Hitam')", max_length=255),
                ),
                (
                    "brand",
                    models.CharField(
                        blank=True,
                        help_text="Brand or manufacturer (e.g., 'Kapal Api')",
                        max_length=100,
                    ),
                ),
                (
                    "category",
                    models.CharField(
                        blank=True,
                        help_text="Free-text category (e.g., 'Minuman', 'Makanan')",
                        max_length=100,
                    ),
                ),
                (
                    "cost_price",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Cost price (what we paid)",
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Selling price (what we charge)",
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "stock",
                    models.PositiveIntegerField(default=0, help_text="Units currently in stock"),
                ),
                (
                    "icon",
                    models.CharField(
                        blank=True,
                        help_text="Icon name shown on the POS product grid",
                        max_length=50,
                    ),
                ),
                (
                    "icon_color",
                    models.CharField(
                        blank=True,
                        help_text="Icon background color (hex format)",
                        max_length=7,
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True, help_text="When the product was added to the catalog"
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True, help_text="When the product was last updated"
                    ),
                ),
                (
                    "store",
                    models.ForeignKey(
                        help_text="Store that owns this product",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="products",
                        to="core.store",
                    ),
                ),
            ],
            options={
                "verbose_name": "Product",
                "verbose_name_plural": "Products",
                "db_table": "inventory_products",
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["store", "name"], name="prod_store_name_idx"),
                    models.Index(fields=["store", "category"], name="prod_store_category_idx"),
                    models.Index(fields=["store", "stock"], name="prod_store_stock_idx"),
                ],
            },
        ),
    ]
