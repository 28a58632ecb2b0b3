"""
Inventory models for the POS Keren point of sale.

- Product catalog with free-text brand and category
- Cost and selling prices for profit reporting
- Stock tracking that never goes negative
"""

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from apps.core.models import Store
from apps.sales.exceptions import InsufficientStock


class Product(models.Model):
    """
    A sellable product in a store's catalog.

    Stock is a plain non-negative counter. It is decremented only through
    deduct_stock (called while settling a sale) or edited directly from the
    product form.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the product",
    )

    store = models.ForeignKey(
        Store,
        on_delete=models.CASCADE,
        related_name="products",
        help_text="Store that owns this product",
    )

    # Basic information
    name = models.CharField(
        max_length=255,
        help_text="Product name (e.g., 'Kopi Hitam')",
    )

    brand = models.CharField(
        max_length=100,
        blank=True,
        help_text="Brand or manufacturer (e.g., 'Kapal Api')",
    )

    category = models.CharField(
        max_length=100,
        blank=True,
        help_text="Free-text category (e.g., 'Minuman', 'Makanan')",
    )

    # Pricing
    cost_price = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Cost price (what we paid)",
    )

    price = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Selling price (what we charge)",
    )

    # Quantity tracking
    stock = models.PositiveIntegerField(
        default=0,
        help_text="Units currently in stock",
    )

    # Display
    icon = models.CharField(
        max_length=50,
        blank=True,
        help_text="Icon name shown on the POS product grid",
    )

    icon_color = models.CharField(
        max_length=7,
        blank=True,
        help_text="Icon background color (hex format)",
    )

    # Timestamps
    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="When the product was added to the catalog",
    )

    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the product was last updated",
    )

    class Meta:
        db_table = "inventory_products"
        ordering = ["name"]
        verbose_name = "Product"
        verbose_name_plural = "Products"
        indexes = [
            models.Index(fields=["store", "name"], name="prod_store_name_idx"),
            models.Index(fields=["store", "category"], name="prod_store_category_idx"),
            models.Index(fields=["store", "stock"], name="prod_store_stock_idx"),
        ]

    def __str__(self):
        if self.brand:
            return f"{self.name} ({self.brand})"
        return self.name

    def is_low_stock(self, threshold):
        """Check if the product is in stock but at or below ``threshold``."""
        return 0 < self.stock <= threshold

    def is_out_of_stock(self):
        """Check if the product is out of stock."""
        return self.stock == 0

    def calculate_total_value(self):
        """Calculate inventory value at cost (cost price * stock)."""
        return self.cost_price * self.stock

    def calculate_total_selling_value(self):
        """Calculate inventory value at selling price (price * stock)."""
        return self.price * self.stock

    def calculate_profit_margin(self):
        """Calculate markup over cost as a percentage."""
        if self.cost_price == 0:
            return Decimal("0.00")
        return ((self.price - self.cost_price) / self.cost_price) * 100

    def can_deduct_stock(self, quantity):
        """Check if we can deduct the specified quantity."""
        return self.stock >= quantity

    def deduct_stock(self, quantity):
        """
        Deduct sold units from stock.

        Callers settling a sale must hold a row lock on this product
        (``select_for_update``) so the check and the write see the same value.

        Raises:
            InsufficientStock: If the deduction would make stock negative
        """
        if not self.can_deduct_stock(quantity):
            raise InsufficientStock(
                f"Insufficient stock for {self.name}. "
                f"Available: {self.stock}, Requested: {quantity}"
            )
        self.stock -= quantity
        self.save(update_fields=["stock", "updated_at"])
