"""
Sale settlement service.

Turns a priced cart into a recorded sale. One database transaction covers
the sale and its items, the stock decrements and the wallet debit, so
either all of them are applied or none are.
"""

import logging
from collections import OrderedDict

from django.db import DatabaseError, transaction
from django.utils import timezone

from apps.core.models import Store
from apps.crm.models import Customer
from apps.inventory.models import Product

from .exceptions import (
    AmountOutOfRange,
    CustomerRequired,
    EmptyCart,
    InsufficientBalance,
    InsufficientStock,
    InvalidPaymentMethod,
    PersistenceFailure,
    SettlementError,
)
from .models import WALK_IN_CUSTOMER, Sale, SaleItem
from .settlement import MAX_AMOUNT, calculate

logger = logging.getLogger(__name__)

SALE_NUMBER_PREFIX = "TRX"


class SettlementService:
    """Records sales and applies their stock and wallet effects."""

    PAYMENT_METHODS = {choice for choice, _ in Sale.PAYMENT_METHOD_CHOICES}

    @classmethod
    def settle(
        cls,
        store,
        lines,
        discount=None,
        tax=None,
        payment_method=Sale.CASH,
        customer=None,
        transaction_date=None,
        cashier=None,
    ):
        """
        Settle a cart into a Sale.

        Args:
            store: Store the sale belongs to
            lines: CartLine snapshots, at least one
            discount: Optional discount AdjustmentSpec
            tax: Optional tax AdjustmentSpec
            payment_method: One of Sale.PAYMENT_METHOD_CHOICES
            customer: Customer paying; required for BALANCE payments
            transaction_date: Back-dates the sale; defaults to now
            cashier: User processing the sale

        Returns:
            The created Sale

        Raises:
            EmptyCart, InvalidPaymentMethod, CustomerRequired: invalid request
            AmountOutOfRange: subtotal or grand total does not fit a sale record
            InsufficientStock: a line exceeds the product's locked stock
            InsufficientBalance: the wallet does not cover the grand total
            PersistenceFailure: the database rejected a write
        """
        lines = list(lines)
        try:
            cls._check_request(lines, payment_method, customer)
            result = calculate(lines, discount, tax)
            cls._check_amounts(result)
            sale = cls._persist(
                store, lines, result, payment_method, customer, transaction_date, cashier
            )
        except SettlementError as e:
            logger.warning(
                "Settlement rejected for store %s: %s (%s)",
                getattr(store, "id", None),
                e.detail,
                e.code,
            )
            raise
        except DatabaseError as e:
            logger.error(
                "Settlement failed for store %s: %s",
                getattr(store, "id", None),
                e,
                exc_info=True,
            )
            raise PersistenceFailure() from e

        logger.info(
            "Sale %s settled for store %s: total=%s payment=%s items=%d",
            sale.sale_number,
            store.id,
            sale.total,
            sale.payment_method,
            len(lines),
        )
        return sale

    @classmethod
    def _check_request(cls, lines, payment_method, customer):
        if not lines:
            raise EmptyCart()
        if payment_method not in cls.PAYMENT_METHODS:
            raise InvalidPaymentMethod(f"Unsupported payment method: {payment_method}")
        if payment_method == Sale.BALANCE and customer is None:
            raise CustomerRequired()

    @staticmethod
    def _check_amounts(result):
        largest = max(result.subtotal, result.grand_total)
        if largest > MAX_AMOUNT:
            raise AmountOutOfRange(f"Sale total {largest} exceeds the maximum of {MAX_AMOUNT}.")

    @classmethod
    @transaction.atomic
    def _persist(cls, store, lines, result, payment_method, customer, transaction_date, cashier):
        # Lock the store row so sale numbers are handed out one at a time
        store = Store.objects.select_for_update().get(pk=store.pk)

        quantities = OrderedDict()
        for line in lines:
            key = str(line.product_id)
            quantities[key] = quantities.get(key, 0) + line.quantity

        products = {
            str(product.id): product
            for product in Product.objects.select_for_update()
            .filter(store=store, id__in=list(quantities))
            .order_by("id")
        }
        for product_id in quantities:
            if product_id not in products:
                raise InsufficientStock(f"Product {product_id} is no longer available.")

        locked_customer = None
        if customer is not None:
            locked_customer = (
                Customer.objects.select_for_update().filter(pk=customer.pk, store=store).first()
            )
            if locked_customer is None:
                raise CustomerRequired("Customer not found in this store.")

        if payment_method == Sale.BALANCE and not locked_customer.can_pay(result.grand_total):
            raise InsufficientBalance(
                f"Insufficient wallet balance for {locked_customer.name}. "
                f"Available: {locked_customer.wallet}, Required: {result.grand_total}"
            )

        # 1. Sale record with line snapshots
        sale = Sale.objects.create(
            store=store,
            sale_number=cls._next_sale_number(store),
            transaction_date=transaction_date or timezone.now(),
            customer=locked_customer,
            customer_name=locked_customer.name if locked_customer else WALK_IN_CUSTOMER,
            cashier=cashier,
            subtotal=result.subtotal,
            discount_type=result.discount.kind,
            discount_value=result.discount.value,
            discount_amount=result.discount_amount,
            tax_type=result.tax.kind,
            tax_value=result.tax.value,
            tax_amount=result.tax_amount,
            total=result.grand_total,
            payment_method=payment_method,
        )
        SaleItem.objects.bulk_create(
            [
                SaleItem(
                    sale=sale,
                    product=products[str(line.product_id)],
                    line_number=position,
                    product_name=line.name,
                    brand=line.brand,
                    category=line.category,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    unit_cost=line.unit_cost,
                    line_total=line.line_total,
                )
                for position, line in enumerate(lines, start=1)
            ]
        )

        # 2. Stock, checked against the locked rows
        for product_id, quantity in quantities.items():
            products[product_id].deduct_stock(quantity)

        # 3. Wallet
        if payment_method == Sale.BALANCE:
            locked_customer.debit_wallet(result.grand_total, sale=sale)

        return sale

    @staticmethod
    def _next_sale_number(store):
        """Return the next TRX-######## number for ``store``."""
        last_sale = Sale.objects.filter(store=store).order_by("-sale_number").first()
        next_number = 1
        if last_sale and last_sale.sale_number.startswith(f"{SALE_NUMBER_PREFIX}-"):
            try:
                next_number = int(last_sale.sale_number.split("-")[-1]) + 1
            except ValueError:
                next_number = Sale.objects.filter(store=store).count() + 1
        return f"{SALE_NUMBER_PREFIX}-{next_number:08d}"
