import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Store",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for the store",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(help_text="Name of the store", max_length=255)),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True, help_text="Timestamp when the store was created"
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True, help_text="Timestamp when the store was last updated"
                    ),
                ),
                (
                    "owner",
                    models.OneToOneField(
                        help_text="User who owns and operates this store",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="store",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Store",
                "verbose_name_plural": "Stores",
                "db_table": "stores",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="StoreSettings",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "store_name",
                    models.CharField(
                        default="POS Keren", help_text="Name printed on receipts", max_length=255
                    ),
                ),
                ("store_address", models.CharField(blank=True, max_length=255)),
                ("store_phone", models.CharField(blank=True, max_length=30)),
                ("store_email", models.EmailField(blank=True, max_length=254)),
                (
                    "currency",
                    models.CharField(
                        default="IDR",
                        help_text="ISO 4217 currency code used for display",
                        max_length=3,
                    ),
                ),
                (
                    "tax_rate",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("11.00"),
                        help_text="Default tax percentage applied to new carts",
                        max_digits=5,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0.00")),
                            django.core.validators.MaxValueValidator(Decimal("100.00")),
                        ],
                    ),
                ),
                (
                    "low_stock_alert",
                    models.PositiveIntegerField(
                        default=5,
                        help_text="Products at or below this stock level are reported as low stock",
                    ),
                ),
                (
                    "receipt_footer",
                    models.CharField(
                        blank=True, default="Terima kasih atas kunjungan Anda!", max_length=255
                    ),
                ),
                (
                    "paper_size",
                    models.CharField(
                        choices=[("80mm", "Thermal 80mm"), ("A4", "A4")],
                        default="80mm",
                        max_length=10,
                    ),
                ),
                (
                    "receipt_copies",
                    models.PositiveSmallIntegerField(
                        default=1,
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(5),
                        ],
                    ),
                ),
                ("auto_print", models.BooleanField(default=False)),
                (
                    "theme",
                    models.CharField(
                        choices=[("light", "Light"), ("dark", "Dark"), ("auto", "Follow system")],
                        default="light",
                        max_length=10,
                    ),
                ),
                (
                    "theme_color",
                    models.CharField(
                        default="#6366f1",
                        help_text="Primary brand color (hex format)",
                        max_length=7,
                        validators=[
                            django.core.validators.RegexValidator(
                                "^#[0-9A-Fa-f]{6}$", "Enter a hex color such as #6366f1."
                            )
                        ],
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "store",
                    models.OneToOneField(
                        help_text="Store that owns these settings",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="settings",
                        to="core.store",
                    ),
                ),
            ],
            options={
                "verbose_name": "Store Settings",
                "verbose_name_plural": "Store Settings",
                "db_table": "store_settings",
            },
        ),
    ]
