"""
Core models for the POS Keren point-of-sale platform.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator, RegexValidator
from django.db import models


class Store(models.Model):
    """
    Core store model.

    Each store represents one small business using the point of sale.
    Products, customers and sales all belong to exactly one store, and
    every API query is scoped to the store owned by the requesting user.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the store",
    )

    owner = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="store",
        help_text="User who owns and operates this store",
    )

    name = models.CharField(max_length=255, help_text="Name of the store")

    # Timestamps
    created_at = models.DateTimeField(
        auto_now_add=True, help_text="Timestamp when the store was created"
    )

    updated_at = models.DateTimeField(
        auto_now=True, help_text="Timestamp when the store was last updated"
    )

    class Meta:
        db_table = "stores"
        ordering = ["-created_at"]
        verbose_name = "Store"
        verbose_name_plural = "Stores"

    def __str__(self):
        return self.name

    def get_settings(self):
        """Return the store settings, creating them with defaults on first access."""
        store_settings, _ = StoreSettings.objects.get_or_create(
            store=self,
            defaults={
                "store_name": self.name,
                "currency": settings.POS_DEFAULT_CURRENCY,
                "tax_rate": Decimal(settings.POS_DEFAULT_TAX_RATE),
                "low_stock_alert": settings.POS_DEFAULT_LOW_STOCK_ALERT,
            },
        )
        return store_settings


class StoreSettings(models.Model):
    """
    Store-specific business settings and receipt configuration.

    Read once per request and turned into a StoreConfig, so calculation and
    receipt code never reach for ambient state.
    """

    THEME_LIGHT = "light"
    THEME_DARK = "dark"
    THEME_AUTO = "auto"

    THEME_CHOICES = [
        (THEME_LIGHT, "Light"),
        (THEME_DARK, "Dark"),
        (THEME_AUTO, "Follow system"),
    ]

    PAPER_80MM = "80mm"
    PAPER_A4 = "A4"

    PAPER_SIZE_CHOICES = [
        (PAPER_80MM, "Thermal 80mm"),
        (PAPER_A4, "A4"),
    ]

    store = models.OneToOneField(
        Store,
        on_delete=models.CASCADE,
        related_name="settings",
        help_text="Store that owns these settings",
    )

    # Business information
    store_name = models.CharField(
        max_length=255,
        default="POS Keren",
        help_text="Name printed on receipts",
    )
    store_address = models.CharField(max_length=255, blank=True)
    store_phone = models.CharField(max_length=30, blank=True)
    store_email = models.EmailField(blank=True)

    # Localization and pricing
    currency = models.CharField(
        max_length=3,
        default="IDR",
        help_text="ISO 4217 currency code used for display",
    )

    tax_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("11.00"),
        validators=[MinValueValidator(Decimal("0.00")), MaxValueValidator(Decimal("100.00"))],
        help_text="Default tax percentage applied to new carts",
    )

    low_stock_alert = models.PositiveIntegerField(
        default=5,
        help_text="Products at or below this stock level are reported as low stock",
    )

    # Receipt
    receipt_footer = models.CharField(
        max_length=255,
        default="Terima kasih atas kunjungan Anda!",
        blank=True,
    )

    paper_size = models.CharField(
        max_length=10,
        choices=PAPER_SIZE_CHOICES,
        default=PAPER_80MM,
    )

    receipt_copies = models.PositiveSmallIntegerField(
        default=1,
        validators=[MinValueValidator(1), MaxValueValidator(5)],
    )

    auto_print = models.BooleanField(default=False)

    # Branding
    theme = models.CharField(max_length=10, choices=THEME_CHOICES, default=THEME_LIGHT)

    theme_color = models.CharField(
        max_length=7,
        default="#6366f1",
        validators=[RegexValidator(r"^#[0-9A-Fa-f]{6}$", "Enter a hex color such as #6366f1.")],
        help_text="Primary brand color (hex format)",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "store_settings"
        verbose_name = "Store Settings"
        verbose_name_plural = "Store Settings"

    def __str__(self):
        return f"Settings for {self.store_name}"
