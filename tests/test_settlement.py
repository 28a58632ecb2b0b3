"""
Tests for checkout pricing and sale settlement.

Covers:
- Discount/tax composition and clamping
- Normalisation of unusable adjustment values
- Atomic settlement: stock, wallet, sale record and rollback
"""

from decimal import Decimal
from unittest.mock import patch

from django.db import DatabaseError

import pytest

from apps.crm.models import WalletTransaction
from apps.sales.exceptions import (
    AmountOutOfRange,
    CustomerRequired,
    EmptyCart,
    InsufficientBalance,
    InsufficientStock,
    InvalidPaymentMethod,
    PersistenceFailure,
)
from apps.sales.models import WALK_IN_CUSTOMER, Sale, SaleItem
from apps.sales.services import SettlementService
from apps.sales.settlement import (
    MAX_AMOUNT,
    AdjustmentKind,
    AdjustmentSpec,
    CartLine,
    calculate,
    compute_discount,
    compute_tax,
    normalize_value,
)


def line(price, quantity=1, name="Item", product_id="p1", cost="0"):
    return CartLine(
        product_id=product_id,
        name=name,
        unit_price=Decimal(price),
        quantity=quantity,
        unit_cost=Decimal(cost),
    )


class TestNormalization:
    """Adjustment inputs that cannot be used count as zero."""

    @pytest.mark.parametrize(
        "raw",
        [None, "", "   ", "abc", float("nan"), float("inf"), "-inf", Decimal("NaN"), True],
    )
    def test_unusable_values_become_zero(self, raw):
        assert normalize_value(raw) == Decimal("0")

    def test_numeric_strings_parse(self):
        assert normalize_value(" 10.5 ") == Decimal("10.5")
        assert normalize_value(7) == Decimal("7")

    def test_kind_aliases(self):
        assert AdjustmentKind.parse("percentage") == AdjustmentKind.PERCENTAGE
        assert AdjustmentKind.parse("%") == AdjustmentKind.PERCENTAGE
        assert AdjustmentKind.parse("fixed") == AdjustmentKind.FIXED
        assert AdjustmentKind.parse("something-else") == AdjustmentKind.FIXED
        assert AdjustmentKind.parse(None) == AdjustmentKind.FIXED

    def test_nan_discount_is_no_discount(self):
        result = calculate([line("10000")], AdjustmentSpec.percentage(float("nan")))

        assert result.discount_amount == Decimal("0.00")
        assert result.grand_total == Decimal("10000.00")

    def test_adjustment_value_is_rounded_half_up(self):
        assert AdjustmentSpec.percentage("12.345").value == Decimal("12.35")
        assert AdjustmentSpec.fixed("0.005").value == Decimal("0.01")

    def test_adjustment_value_is_bounded(self):
        assert AdjustmentSpec.fixed("1e20").value == MAX_AMOUNT
        assert AdjustmentSpec.percentage("-5").value == Decimal("0.00")

    def test_applied_rate_is_the_stored_rate(self):
        tax = AdjustmentSpec.percentage("12.345")

        result = calculate([line("5000")], None, tax)

        assert result.tax_amount == Decimal("617.50")
        assert result.tax_amount == (result.taxable_amount * tax.value / 100).quantize(
            Decimal("0.01")
        )


class TestCartLine:
    """Cart line snapshots."""

    def test_quantity_must_be_positive(self):
        with pytest.raises(ValueError):
            line("1000", quantity=0)

    def test_negative_price_rejected(self):
        with pytest.raises(ValueError):
            line("-1")

    def test_line_total(self):
        assert line("2500", quantity=3).line_total == Decimal("7500.00")

    def test_from_product_snapshots_fields(self, product):
        cart_line = CartLine.from_product(product, 2)

        assert cart_line.product_id == product.id
        assert cart_line.name == "Kopi Hitam"
        assert cart_line.unit_price == Decimal("5000.00")
        assert cart_line.unit_cost == Decimal("3000.00")
        assert cart_line.stock == 10


class TestCalculate:
    """Subtotal, discount and tax composition."""

    def test_percentage_discount_then_tax(self):
        """100,000 with 10% discount and 11% tax totals 99,900."""
        result = calculate(
            [line("100000")],
            AdjustmentSpec.percentage("10"),
            AdjustmentSpec.percentage("11"),
        )

        assert result.subtotal == Decimal("100000.00")
        assert result.discount_amount == Decimal("10000.00")
        assert result.taxable_amount == Decimal("90000.00")
        assert result.tax_amount == Decimal("9900.00")
        assert result.grand_total == Decimal("99900.00")

    def test_discount_larger_than_subtotal_clamps(self):
        """A 60,000 discount on 50,000 leaves nothing to tax."""
        result = calculate(
            [line("50000")],
            AdjustmentSpec.fixed("60000"),
            AdjustmentSpec.percentage("11"),
        )

        assert result.discount_amount == Decimal("50000.00")
        assert result.taxable_amount == Decimal("0.00")
        assert result.tax_amount == Decimal("0.00")
        assert result.grand_total == Decimal("0.00")

    def test_empty_cart_is_all_zeros(self):
        result = calculate([], AdjustmentSpec.percentage("10"), AdjustmentSpec.fixed("500"))

        assert result.subtotal == Decimal("0.00")
        assert result.discount_amount == Decimal("0.00")
        assert result.tax_amount == Decimal("0.00")
        assert result.grand_total == Decimal("0.00")

    def test_negative_discount_clamps_to_zero(self):
        assert compute_discount(Decimal("1000.00"), AdjustmentSpec.fixed("-50")) == Decimal("0.00")

    def test_negative_tax_clamps_to_zero(self):
        assert compute_tax(Decimal("1000.00"), AdjustmentSpec.percentage("-5")) == Decimal("0.00")

    def test_fixed_tax_is_not_capped(self):
        result = calculate([line("1000")], None, AdjustmentSpec.fixed("5000"))

        assert result.tax_amount == Decimal("5000.00")
        assert result.grand_total == Decimal("6000.00")

    def test_amounts_are_rounded_half_up(self):
        # 3 x 333.33 = 999.99; 12.5% of 999.99 = 124.99875
        result = calculate([line("333.33", quantity=3)], AdjustmentSpec.percentage("12.5"))

        assert result.discount_amount == Decimal("125.00")
        assert result.grand_total == Decimal("874.99")

    @pytest.mark.parametrize(
        "subtotal,discount,tax",
        [
            ("0", AdjustmentSpec.fixed("100"), AdjustmentSpec.percentage("11")),
            ("12345.67", AdjustmentSpec.percentage("150"), AdjustmentSpec.percentage("11")),
            ("999.99", AdjustmentSpec.percentage("33.333"), AdjustmentSpec.fixed("0.005")),
            ("50000", AdjustmentSpec.fixed("-1"), AdjustmentSpec.percentage("-20")),
            ("1", AdjustmentSpec("rp", "0.5"), AdjustmentSpec("%", "100")),
        ],
    )
    def test_composition_invariants(self, subtotal, discount, tax):
        result = calculate([line(subtotal)], discount, tax)

        assert Decimal("0") <= result.discount_amount <= result.subtotal
        assert result.tax_amount >= 0
        assert result.grand_total == result.subtotal - result.discount_amount + result.tax_amount

    def test_calculation_is_idempotent(self):
        lines = [line("15000", 2), line("7000", 1, product_id="p2")]
        discount = AdjustmentSpec.percentage("5")
        tax = AdjustmentSpec.percentage("11")

        assert calculate(lines, discount, tax) == calculate(lines, discount, tax)

    def test_as_dict_uses_strings(self):
        data = calculate([line("100000")], AdjustmentSpec.percentage("10")).as_dict()

        assert data["grand_total"] == "90000.00"
        assert data["discount_type"] == AdjustmentKind.PERCENTAGE
        assert data["tax_type"] == AdjustmentKind.FIXED


@pytest.mark.django_db
class TestSettle:
    """Settlement against the database."""

    def test_cash_sale_decrements_stock(self, store, make_product):
        """Quantities 3 of 5 and 1 of 1 leave stocks 2 and 0."""
        first = make_product(name="Teh Botol", price="5000", stock=5, cost_price="3500")
        second = make_product(name="Roti", price="12000", stock=1, cost_price="8000")
        lines = [CartLine.from_product(first, 3), CartLine.from_product(second, 1)]

        sale = SettlementService.settle(store, lines, payment_method=Sale.CASH)

        first.refresh_from_db()
        second.refresh_from_db()
        assert first.stock == 2
        assert second.stock == 0

        items = list(sale.items.all())
        assert [(i.product_name, i.quantity, i.unit_price) for i in items] == [
            ("Teh Botol", 3, Decimal("5000.00")),
            ("Roti", 1, Decimal("12000.00")),
        ]
        assert sale.subtotal == Decimal("27000.00")
        assert sale.total == Decimal("27000.00")
        assert sale.customer_name == WALK_IN_CUSTOMER
        assert sale.sale_number == "TRX-00000001"

    def test_sale_records_discount_and_tax(self, store, make_product):
        item = make_product(price="100000", stock=3)

        sale = SettlementService.settle(
            store,
            [CartLine.from_product(item, 1)],
            discount=AdjustmentSpec.percentage("10"),
            tax=AdjustmentSpec.percentage("11"),
        )

        assert sale.discount_type == AdjustmentKind.PERCENTAGE
        assert sale.discount_value == Decimal("10")
        assert sale.discount_amount == Decimal("10000.00")
        assert sale.tax_amount == Decimal("9900.00")
        assert sale.total == Decimal("99900.00")

    def test_sale_numbers_are_sequential(self, store, make_product):
        item = make_product(stock=5)

        first = SettlementService.settle(store, [CartLine.from_product(item, 1)])
        second = SettlementService.settle(store, [CartLine.from_product(item, 1)])

        assert first.sale_number == "TRX-00000001"
        assert second.sale_number == "TRX-00000002"

    def test_empty_cart_rejected(self, store):
        with pytest.raises(EmptyCart):
            SettlementService.settle(store, [])
        assert Sale.objects.count() == 0

    def test_total_beyond_column_range_rejected(self, store, product):
        with pytest.raises(AmountOutOfRange):
            SettlementService.settle(
                store, [CartLine.from_product(product, 1)], tax=AdjustmentSpec.fixed(MAX_AMOUNT)
            )

        product.refresh_from_db()
        assert product.stock == 10
        assert Sale.objects.count() == 0

    def test_unknown_payment_method_rejected(self, store, product):
        with pytest.raises(InvalidPaymentMethod):
            SettlementService.settle(store, [CartLine.from_product(product, 1)], payment_method="CARD")

    def test_balance_payment_requires_customer(self, store, product):
        with pytest.raises(CustomerRequired):
            SettlementService.settle(
                store, [CartLine.from_product(product, 1)], payment_method=Sale.BALANCE
            )

    def test_balance_payment_debits_wallet(self, store, product, customer):
        sale = SettlementService.settle(
            store,
            [CartLine.from_product(product, 2)],
            payment_method=Sale.BALANCE,
            customer=customer,
        )

        customer.refresh_from_db()
        assert customer.wallet == Decimal("40000.00")
        assert sale.customer == customer
        assert sale.customer_name == "Andi"

        payment = WalletTransaction.objects.get(
            customer=customer, transaction_type=WalletTransaction.PAYMENT
        )
        assert payment.amount == Decimal("-10000.00")
        assert payment.balance_after == Decimal("40000.00")
        assert payment.sale == sale

    def test_insufficient_balance_changes_nothing(self, store, make_product, customer):
        """A 25,000 sale against a 20,000 wallet is rejected untouched."""
        customer.adjust_wallet(Decimal("-30000.00"), "Correction")
        item = make_product(price="25000", stock=4)

        with pytest.raises(InsufficientBalance):
            SettlementService.settle(
                store,
                [CartLine.from_product(item, 1)],
                payment_method=Sale.BALANCE,
                customer=customer,
            )

        item.refresh_from_db()
        customer.refresh_from_db()
        assert item.stock == 4
        assert customer.wallet == Decimal("20000.00")
        assert Sale.objects.count() == 0

    def test_cash_sale_leaves_wallet_alone(self, store, product, customer):
        SettlementService.settle(
            store, [CartLine.from_product(product, 1)], payment_method=Sale.CASH, customer=customer
        )

        customer.refresh_from_db()
        assert customer.wallet == Decimal("50000.00")

    def test_stock_shortfall_rolls_back_sale(self, store, make_product):
        """Stock is checked after the sale row is written; the sale must vanish."""
        plenty = make_product(name="Banyak", stock=10)
        scarce = make_product(name="Sedikit", stock=1)
        lines = [CartLine.from_product(plenty, 2), CartLine.from_product(scarce, 2)]

        with pytest.raises(InsufficientStock):
            SettlementService.settle(store, lines)

        plenty.refresh_from_db()
        assert plenty.stock == 10
        assert Sale.objects.count() == 0
        assert SaleItem.objects.count() == 0

    def test_repeated_product_lines_share_stock(self, store, make_product):
        item = make_product(stock=3)
        lines = [CartLine.from_product(item, 2), CartLine.from_product(item, 2)]

        with pytest.raises(InsufficientStock):
            SettlementService.settle(store, lines)

        item.refresh_from_db()
        assert item.stock == 3

    def test_database_error_becomes_persistence_failure(self, store, product):
        with patch.object(SaleItem.objects, "bulk_create", side_effect=DatabaseError("disk full")):
            with pytest.raises(PersistenceFailure):
                SettlementService.settle(store, [CartLine.from_product(product, 1)])

        product.refresh_from_db()
        assert product.stock == 10
        assert Sale.objects.count() == 0

    def test_product_from_other_store_rejected(self, store, django_user_model):
        from apps.core.models import Store
        from apps.inventory.models import Product

        other_owner = django_user_model.objects.create_user(username="other", password="x")
        other_store = Store.objects.create(owner=other_owner, name="Lain")
        foreign = Product.objects.create(
            store=other_store, name="Asing", price=Decimal("1000"), stock=5
        )

        with pytest.raises(InsufficientStock):
            SettlementService.settle(store, [CartLine.from_product(foreign, 1)])

    def test_back_dated_sale(self, store, product):
        from datetime import datetime, timezone as dt_timezone

        when = datetime(2024, 1, 15, 10, 30, tzinfo=dt_timezone.utc)
        sale = SettlementService.settle(
            store, [CartLine.from_product(product, 1)], transaction_date=when
        )

        assert sale.transaction_date == when

    def test_recorded_sale_is_immutable(self, store, product):
        sale = SettlementService.settle(store, [CartLine.from_product(product, 1)])

        sale.customer_name = "Changed"
        with pytest.raises(ValueError):
            sale.save()
