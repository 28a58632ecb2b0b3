"""
CRM models for the POS Keren point of sale.

- Customer profiles with contact information
- Stored wallet balance usable as a payment method
- Wallet transaction ledger appended on every balance change
"""

import uuid
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.validators import MinValueValidator
from django.db import models

from apps.core.models import Store
from apps.sales.exceptions import InsufficientBalance

User = get_user_model()


class Customer(models.Model):
    """
    Customer profile with a stored wallet balance.

    The wallet only changes through the methods below, each of which appends
    a WalletTransaction. Callers must hold a row lock on the customer
    (``select_for_update``) while calling them.
    """

    MALE = "Laki-laki"
    FEMALE = "Perempuan"

    GENDER_CHOICES = [
        (MALE, "Laki-laki"),
        (FEMALE, "Perempuan"),
    ]

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the customer",
    )

    store = models.ForeignKey(
        Store,
        on_delete=models.CASCADE,
        related_name="customers",
        help_text="Store this customer belongs to",
    )

    # Contact information
    name = models.CharField(max_length=255, help_text="Customer full name")

    phone = models.CharField(max_length=30, blank=True, help_text="Phone number")

    email = models.EmailField(blank=True, help_text="Email address")

    gender = models.CharField(
        max_length=20,
        choices=GENDER_CHOICES,
        blank=True,
        help_text="Customer gender",
    )

    address = models.TextField(blank=True, help_text="Customer address")

    # Wallet
    wallet = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Stored balance usable for balance payments",
    )

    # Timestamps
    created_at = models.DateTimeField(
        auto_now_add=True, help_text="When the customer was created"
    )

    updated_at = models.DateTimeField(auto_now=True, help_text="When the customer was last updated")

    class Meta:
        db_table = "crm_customers"
        ordering = ["name"]
        verbose_name = "Customer"
        verbose_name_plural = "Customers"
        indexes = [
            models.Index(fields=["store", "name"], name="cust_store_name_idx"),
            models.Index(fields=["store", "phone"], name="cust_store_phone_idx"),
        ]

    def __str__(self):
        return self.name

    def _record(self, transaction_type, amount, description, sale=None, created_by=None):
        self.save(update_fields=["wallet", "updated_at"])
        return WalletTransaction.objects.create(
            customer=self,
            transaction_type=transaction_type,
            amount=amount,
            balance_after=self.wallet,
            sale=sale,
            description=description,
            created_by=created_by,
        )

    def top_up_wallet(self, amount, description="", created_by=None):
        """Add a positive amount to the wallet."""
        amount = Decimal(amount)
        if amount <= 0:
            raise ValueError("Top-up amount must be positive")

        self.wallet += amount
        return self._record(
            WalletTransaction.TOP_UP,
            amount,
            description or f"Wallet top-up: {amount}",
            created_by=created_by,
        )

    def adjust_wallet(self, amount, description="", created_by=None):
        """
        Apply a signed manual correction to the wallet.

        Raises:
            ValueError: If the amount is zero or the balance would go negative
        """
        amount = Decimal(amount)
        if amount == 0:
            raise ValueError("Adjustment amount must not be zero")
        if self.wallet + amount < 0:
            raise ValueError(
                f"Adjustment would make the wallet negative. "
                f"Balance: {self.wallet}, Adjustment: {amount}"
            )

        self.wallet += amount
        return self._record(
            WalletTransaction.ADJUSTMENT,
            amount,
            description or f"Manual adjustment: {amount}",
            created_by=created_by,
        )

    def set_wallet(self, balance, description="", created_by=None):
        """
        Overwrite the wallet with ``balance``.

        Recorded as an ADJUSTMENT of the difference, so the ledger still
        sums to the wallet.

        Raises:
            ValueError: If the balance is negative or unchanged
        """
        balance = Decimal(balance)
        if balance < 0:
            raise ValueError("Wallet balance must not be negative")
        return self.adjust_wallet(
            balance - self.wallet,
            description=description or f"Balance set to {balance}",
            created_by=created_by,
        )

    def can_pay(self, amount):
        """Check if the wallet covers ``amount``."""
        return self.wallet >= amount

    def debit_wallet(self, amount, sale=None, description=""):
        """
        Debit a balance payment from the wallet.

        Raises:
            InsufficientBalance: If the wallet is below ``amount``
        """
        amount = Decimal(amount)
        if not self.can_pay(amount):
            raise InsufficientBalance(
                f"Insufficient wallet balance for {self.name}. "
                f"Available: {self.wallet}, Required: {amount}"
            )

        self.wallet -= amount
        return self._record(
            WalletTransaction.PAYMENT,
            -amount,
            description or (f"Payment for {sale.sale_number}" if sale else "Balance payment"),
            sale=sale,
        )


class WalletTransaction(models.Model):
    """
    Wallet ledger entry.

    One row per wallet mutation. ``amount`` is signed: positive for top-ups,
    negative for payments, either sign for manual adjustments.
    """

    TOP_UP = "TOP_UP"
    ADJUSTMENT = "ADJUSTMENT"
    PAYMENT = "PAYMENT"

    TRANSACTION_TYPE_CHOICES = [
        (TOP_UP, "Top-up"),
        (ADJUSTMENT, "Manual Adjustment"),
        (PAYMENT, "Payment"),
    ]

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the wallet transaction",
    )

    customer = models.ForeignKey(
        Customer,
        on_delete=models.CASCADE,
        related_name="wallet_transactions",
        help_text="Customer this transaction belongs to",
    )

    transaction_type = models.CharField(
        max_length=20, choices=TRANSACTION_TYPE_CHOICES, help_text="Type of wallet transaction"
    )

    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        help_text="Signed amount (positive adds to the wallet, negative deducts)",
    )

    balance_after = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        help_text="Wallet balance after this transaction",
    )

    description = models.CharField(max_length=255, help_text="Description of the transaction")

    sale = models.ForeignKey(
        "sales.Sale",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="wallet_transactions",
        help_text="Sale paid by this transaction (if applicable)",
    )

    created_at = models.DateTimeField(
        auto_now_add=True, help_text="When the transaction was created"
    )

    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        help_text="User who made the change (for manual top-ups and adjustments)",
    )

    class Meta:
        db_table = "crm_wallet_transactions"
        ordering = ["-created_at"]
        verbose_name = "Wallet Transaction"
        verbose_name_plural = "Wallet Transactions"
        indexes = [
            models.Index(fields=["customer", "-created_at"], name="wallet_cust_date_idx"),
            models.Index(fields=["customer", "transaction_type"], name="wallet_cust_type_idx"),
        ]

    def __str__(self):
        return f"{self.customer.name} - {self.transaction_type}: {self.amount}"
