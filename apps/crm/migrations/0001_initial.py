import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("core", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Customer",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for the customer",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(help_text="Customer full name", max_length=255)),
                ("phone", models.CharField(blank=True, help_text="Phone number", max_length=30)),
                (
                    "email",
                    models.EmailField(blank=True, help_text="Email address", max_length=254),
                ),
                (
                    "gender",
                    models.CharField(
                        blank=True,
                        choices=[("Laki-laki", "Laki-laki"), ("Perempuan", "Perempuan")],
                        help_text="Customer gender",
                        max_length=20,
                    ),
                ),
                ("address", models.TextField(blank=True, help_text="Customer address")),
                (
                    "wallet",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Stored balance usable for balance payments",
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True, help_text="When the customer was created"
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True, help_text="When the customer was last updated"
                    ),
                ),
                (
                    "store",
                    models.ForeignKey(
                        help_text="Store this customer belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="customers",
                        to="core.store",
                    ),
                ),
            ],
            options={
                "verbose_name": "Customer",
                "verbose_name_plural": "Customers",
                "db_table": "crm_customers",
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["store", "name"], name="cust_store_name_idx"),
                    models.Index(fields=["store", "phone"], name="cust_store_phone_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="WalletTransaction",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for the wallet transaction",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "transaction_type",
                    models.CharField(
                        choices=[
                            ("TOP_UP", "Top-up"),
                            ("ADJUSTMENT", "Manual Adjustment"),
                            ("PAYMENT", "Payment"),
                        ],
                        help_text="Type of wallet transaction",
                        max_length=20,
                    ),
                ),
                (
                    "amount",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Signed amount (positive adds to the wallet, negative deducts)",
                        max_digits=14,
                    ),
                ),
                (
                    "balance_after",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Wallet balance after this transaction",
                        max_digits=14,
                    ),
                ),
                (
                    "description",
                    models.CharField(help_text="Description of the transaction", max_length=255),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True, help_text="When the transaction was created"
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        help_text="User who made the change (for manual top-ups and adjustments)",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "customer",
                    models.ForeignKey(
                        help_text="Customer this transaction belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="wallet_transactions",
                        to="crm.customer",
                    ),
                ),
            ],
            options={
                "verbose_name": "Wallet Transaction",
                "verbose_name_plural": "Wallet Transactions",
                "db_table": "crm_wallet_transactions",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["customer", "-created_at"], name="wallet_cust_date_idx"),
                    models.Index(
                        fields=["customer", "transaction_type"], name="wallet_cust_type_idx"
                    ),
                ],
            },
        ),
    ]
