"""
Sales models for the POS Keren point of sale.

- Sale records with the full price breakdown (subtotal, discount, tax, total)
- Line item snapshots decoupled from later product edits
- Four payment methods, including payment from a customer's wallet
- Sales are immutable once recorded
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from apps.core.models import Store
from apps.crm.models import Customer
from apps.inventory.models import Product

from .settlement import AdjustmentKind

WALK_IN_CUSTOMER = "Umum"


class Sale(models.Model):
    """
    A completed point-of-sale transaction.

    Stores the discount and tax both as entered (type and value) and as
    computed amounts, so receipts and reports never recalculate. Sales are
    written once by the settlement service and never updated.
    """

    # Payment method choices
    CASH = "CASH"
    BANK_TRANSFER = "BANK_TRANSFER"
    E_WALLET = "E_WALLET"
    BALANCE = "BALANCE"

    PAYMENT_METHOD_CHOICES = [
        (CASH, "Tunai"),
        (BANK_TRANSFER, "Transfer Bank"),
        (E_WALLET, "E-Wallet"),
        (BALANCE, "Saldo"),
    ]

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the sale",
    )

    store = models.ForeignKey(
        Store,
        on_delete=models.CASCADE,
        related_name="sales",
        help_text="Store that owns this sale",
    )

    sale_number = models.CharField(
        max_length=50,
        help_text="Sequential transaction number within the store (e.g., 'TRX-00000001')",
    )

    transaction_date = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="When the sale took place (may be back-dated for manual entries)",
    )

    # Relationships
    customer = models.ForeignKey(
        Customer,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sales",
        help_text="Customer who made the purchase (optional for walk-in sales)",
    )

    customer_name = models.CharField(
        max_length=255,
        default=WALK_IN_CUSTOMER,
        help_text="Customer name at time of sale",
    )

    cashier = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sales_processed",
        help_text="User who processed the sale",
    )

    # Financial details
    subtotal = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Sum of line totals before discount and tax",
    )

    discount_type = models.CharField(
        max_length=20,
        choices=AdjustmentKind.CHOICES,
        default=AdjustmentKind.FIXED,
        help_text="How the discount value was applied",
    )

    discount_value = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Discount as entered (amount or percentage)",
    )

    discount_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Discount amount, never more than the subtotal",
    )

    tax_type = models.CharField(
        max_length=20,
        choices=AdjustmentKind.CHOICES,
        default=AdjustmentKind.PERCENTAGE,
        help_text="How the tax value was applied",
    )

    tax_value = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Tax as entered (amount or percentage)",
    )

    tax_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Tax amount charged on the discounted subtotal",
    )

    total = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Grand total (subtotal - discount + tax)",
    )

    # Payment details
    payment_method = models.CharField(
        max_length=20,
        choices=PAYMENT_METHOD_CHOICES,
        help_text="Payment method used",
    )

    # Timestamps
    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="When the sale was recorded",
    )

    class Meta:
        db_table = "sales"
        ordering = ["-transaction_date", "-created_at"]
        verbose_name = "Sale"
        verbose_name_plural = "Sales"
        unique_together = [["store", "sale_number"]]
        indexes = [
            models.Index(fields=["store", "-transaction_date"], name="sale_store_date_idx"),
            models.Index(fields=["store", "payment_method"], name="sale_payment_idx"),
            models.Index(fields=["store", "total"], name="sale_store_total_idx"),
            models.Index(fields=["customer", "-transaction_date"], name="sale_cust_date_idx"),
        ]

    def __str__(self):
        return f"{self.sale_number} - {self.total}"

    def save(self, *args, **kwargs):
        """Refuse to overwrite an existing sale."""
        if not self._state.adding:
            raise ValueError("Sales are immutable once recorded")
        super().save(*args, **kwargs)

    def calculate_cost(self):
        """Total cost of goods sold on this sale."""
        return sum((item.unit_cost * item.quantity for item in self.items.all()), Decimal("0.00"))

    def calculate_profit(self):
        """Gross profit: subtotal minus cost of goods minus discount."""
        return self.subtotal - self.calculate_cost() - self.discount_amount

    @property
    def items_count(self):
        return sum(item.quantity for item in self.items.all())


class SaleItem(models.Model):
    """
    Snapshot of one cart line on a sale.

    Name, brand, category, price and cost are copied from the product at
    settlement time. ``product`` is kept for stock reports and cleared if
    the product is deleted.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the sale item",
    )

    sale = models.ForeignKey(
        Sale,
        on_delete=models.CASCADE,
        related_name="items",
        help_text="Sale that this item belongs to",
    )

    product = models.ForeignKey(
        Product,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sale_items",
        help_text="Product that was sold",
    )

    line_number = models.PositiveSmallIntegerField(
        default=1,
        help_text="Position of the line on the receipt",
    )

    # Snapshot
    product_name = models.CharField(max_length=255, help_text="Product name at time of sale")

    brand = models.CharField(max_length=100, blank=True, help_text="Brand at time of sale")

    category = models.CharField(max_length=100, blank=True, help_text="Category at time of sale")

    # Quantity and pricing
    quantity = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text="Quantity sold",
    )

    unit_price = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Unit price at time of sale",
    )

    unit_cost = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Unit cost at time of sale (for profit reporting)",
    )

    line_total = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="quantity * unit_price",
    )

    class Meta:
        db_table = "sale_items"
        ordering = ["sale", "line_number"]
        verbose_name = "Sale Item"
        verbose_name_plural = "Sale Items"
        indexes = [
            models.Index(fields=["sale"], name="saleitem_sale_idx"),
            models.Index(fields=["product"], name="saleitem_product_idx"),
        ]

    def __str__(self):
        return f"{self.product_name} x {self.quantity}"

    def save(self, *args, **kwargs):
        """
        Override save to calculate line total if not provided.
        """
        if self.line_total is None:
            self.line_total = self.unit_price * self.quantity
        super().save(*args, **kwargs)

    def calculate_profit(self):
        """Line profit before any sale-level discount."""
        return (self.unit_price - self.unit_cost) * self.quantity
