"""
Tests for customers and customer wallets.

Tests:
- Wallet top-up, adjustment, set and debit with the ledger they append
- Customer API create, update and search
- Wallet adjustment endpoint and wallet ledger listing
- Store isolation
"""

from decimal import Decimal

from django.urls import reverse

import pytest
from rest_framework import status

from apps.core.models import Store
from apps.crm.models import Customer, WalletTransaction
from apps.sales.exceptions import InsufficientBalance


@pytest.mark.django_db
class TestCustomerWallet:
    """Test wallet mutations on the Customer model."""

    def test_top_up_appends_ledger_entry(self, store):
        customer = Customer.objects.create(store=store, name="Citra")

        entry = customer.top_up_wallet(Decimal("25000"))

        customer.refresh_from_db()
        assert customer.wallet == Decimal("25000.00")
        assert entry.transaction_type == WalletTransaction.TOP_UP
        assert entry.amount == Decimal("25000")
        assert entry.balance_after == Decimal("25000.00")

    @pytest.mark.parametrize("amount", ["0", "-100"])
    def test_top_up_must_be_positive(self, store, amount):
        customer = Customer.objects.create(store=store, name="Citra")

        with pytest.raises(ValueError):
            customer.top_up_wallet(Decimal(amount))

        assert customer.wallet_transactions.count() == 0

    def test_adjustment_can_be_negative(self, customer):
        entry = customer.adjust_wallet(Decimal("-20000"), "Koreksi")

        customer.refresh_from_db()
        assert customer.wallet == Decimal("30000.00")
        assert entry.transaction_type == WalletTransaction.ADJUSTMENT
        assert entry.description == "Koreksi"

    def test_adjustment_cannot_go_below_zero(self, customer):
        with pytest.raises(ValueError):
            customer.adjust_wallet(Decimal("-50000.01"))

        customer.refresh_from_db()
        assert customer.wallet == Decimal("50000.00")

    def test_zero_adjustment_rejected(self, customer):
        with pytest.raises(ValueError):
            customer.adjust_wallet(Decimal("0"))

    def test_set_wallet_records_difference(self, customer):
        entry = customer.set_wallet(Decimal("20000"))

        customer.refresh_from_db()
        assert customer.wallet == Decimal("20000.00")
        assert entry.transaction_type == WalletTransaction.ADJUSTMENT
        assert entry.amount == Decimal("-30000.00")
        assert sum(e.amount for e in customer.wallet_transactions.all()) == customer.wallet

    def test_set_wallet_to_zero(self, customer):
        customer.set_wallet(Decimal("0"))

        customer.refresh_from_db()
        assert customer.wallet == Decimal("0.00")

    @pytest.mark.parametrize("balance", ["-1", "50000"])
    def test_set_wallet_rejects_negative_or_unchanged(self, customer, balance):
        with pytest.raises(ValueError):
            customer.set_wallet(Decimal(balance))

        assert customer.wallet_transactions.count() == 1

    def test_debit_records_negative_amount(self, customer):
        entry = customer.debit_wallet(Decimal("12500"))

        customer.refresh_from_db()
        assert customer.wallet == Decimal("37500.00")
        assert entry.transaction_type == WalletTransaction.PAYMENT
        assert entry.amount == Decimal("-12500")

    def test_debit_exact_balance(self, customer):
        customer.debit_wallet(Decimal("50000"))

        customer.refresh_from_db()
        assert customer.wallet == Decimal("0.00")

    def test_debit_insufficient_balance(self, customer):
        with pytest.raises(InsufficientBalance):
            customer.debit_wallet(Decimal("50000.01"))

        customer.refresh_from_db()
        assert customer.wallet == Decimal("50000.00")
        assert customer.wallet_transactions.count() == 1

    def test_ledger_balances_chain(self, customer):
        customer.debit_wallet(Decimal("10000"))
        customer.top_up_wallet(Decimal("5000"))

        customer.refresh_from_db()
        entries = customer.wallet_transactions.all()
        assert entries.count() == 3
        assert customer.wallet == Decimal("45000.00")
        assert sum(entry.amount for entry in entries) == customer.wallet


@pytest.mark.django_db
class TestCustomerAPI:
    """Test customer endpoints."""

    def test_create_with_opening_balance(self, authenticated_api_client, store):
        response = authenticated_api_client.post(
            reverse("crm:customer_list"),
            {"name": "  Dewi  ", "phone": "0811111111", "wallet": "20000.00"},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        customer = Customer.objects.get(id=response.data["id"])
        assert customer.name == "Dewi"
        assert customer.store == store
        assert customer.wallet == Decimal("20000.00")
        entry = customer.wallet_transactions.get()
        assert entry.description == "Opening balance"
        assert entry.created_by == store.owner

    def test_create_requires_name(self, authenticated_api_client):
        response = authenticated_api_client.post(
            reverse("crm:customer_list"), {"name": "   "}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_negative_opening_balance_rejected(self, authenticated_api_client):
        response = authenticated_api_client.post(
            reverse("crm:customer_list"), {"name": "Eko", "wallet": "-1"}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_wallet_cannot_be_edited_directly(self, authenticated_api_client, customer):
        url = reverse("crm:customer_detail", kwargs={"id": customer.id})

        response = authenticated_api_client.patch(url, {"wallet": "999999"}, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        customer.refresh_from_db()
        assert customer.wallet == Decimal("50000.00")

    def test_update_contact_details(self, authenticated_api_client, customer):
        url = reverse("crm:customer_detail", kwargs={"id": customer.id})

        response = authenticated_api_client.patch(
            url, {"address": "Jl. Sudirman 5"}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        customer.refresh_from_db()
        assert customer.address == "Jl. Sudirman 5"

    def test_detail_includes_recent_wallet_transactions(self, authenticated_api_client, customer):
        url = reverse("crm:customer_detail", kwargs={"id": customer.id})

        response = authenticated_api_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data["transaction_count"] == 0
        assert len(response.data["recent_wallet_transactions"]) == 1

    def test_search_and_balance_filter(self, authenticated_api_client, store, customer):
        Customer.objects.create(store=store, name="Budi", phone="08987654321")

        by_phone = authenticated_api_client.get(reverse("crm:customer_list"), {"search": "0898"})
        with_balance = authenticated_api_client.get(
            reverse("crm:customer_list"), {"has_balance": "true"}
        )

        assert [row["name"] for row in by_phone.data["results"]] == ["Budi"]
        assert [row["name"] for row in with_balance.data["results"]] == ["Andi"]

    def test_other_store_customers_hidden(self, api_client, customer, django_user_model):
        other_user = django_user_model.objects.create_user(username="tetangga", password="x")
        Store.objects.create(owner=other_user, name="Toko Tetangga")
        api_client.force_authenticate(user=other_user)

        listing = api_client.get(reverse("crm:customer_list"))
        detail = api_client.get(reverse("crm:customer_detail", kwargs={"id": customer.id}))

        assert listing.data["count"] == 0
        assert detail.status_code == status.HTTP_404_NOT_FOUND

    def test_requires_authentication(self, api_client):
        response = api_client.get(reverse("crm:customer_list"))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestWalletEndpoints:
    """Test the wallet adjustment and ledger endpoints."""

    def test_top_up(self, authenticated_api_client, customer, store):
        url = reverse("crm:wallet_adjustment", kwargs={"customer_id": customer.id})

        response = authenticated_api_client.post(
            url, {"transaction_type": "TOP_UP", "amount": "10000"}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["customer"]["wallet"] == "60000.00"
        assert response.data["transaction"]["created_by_username"] == store.owner.username

    def test_negative_top_up_rejected(self, authenticated_api_client, customer):
        url = reverse("crm:wallet_adjustment", kwargs={"customer_id": customer.id})

        response = authenticated_api_client.post(
            url, {"transaction_type": "TOP_UP", "amount": "-10000"}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_adjustment_below_zero_rejected(self, authenticated_api_client, customer):
        url = reverse("crm:wallet_adjustment", kwargs={"customer_id": customer.id})

        response = authenticated_api_client.post(
            url, {"transaction_type": "ADJUSTMENT", "amount": "-60000"}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        customer.refresh_from_db()
        assert customer.wallet == Decimal("50000.00")

    def test_set_balance(self, authenticated_api_client, customer):
        url = reverse("crm:wallet_adjustment", kwargs={"customer_id": customer.id})

        response = authenticated_api_client.post(
            url, {"transaction_type": "SET", "amount": "75000"}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["customer"]["wallet"] == "75000.00"
        assert response.data["transaction"]["transaction_type"] == WalletTransaction.ADJUSTMENT
        assert response.data["transaction"]["amount"] == "25000.00"

    @pytest.mark.parametrize("amount", ["-1", "50000"])
    def test_set_balance_rejects_negative_or_unchanged(
        self, authenticated_api_client, customer, amount
    ):
        url = reverse("crm:wallet_adjustment", kwargs={"customer_id": customer.id})

        response = authenticated_api_client.post(
            url, {"transaction_type": "SET", "amount": amount}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        customer.refresh_from_db()
        assert customer.wallet == Decimal("50000.00")

    def test_other_store_customer_not_found(self, authenticated_api_client, django_user_model):
        other_user = django_user_model.objects.create_user(username="lain", password="x")
        other_store = Store.objects.create(owner=other_user, name="Lain")
        other = Customer.objects.create(store=other_store, name="Orang Lain")
        url = reverse("crm:wallet_adjustment", kwargs={"customer_id": other.id})

        response = authenticated_api_client.post(
            url, {"transaction_type": "TOP_UP", "amount": "10000"}, format="json"
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_transaction_list(self, authenticated_api_client, customer):
        customer.debit_wallet(Decimal("5000"))
        url = reverse("crm:wallet_transactions", kwargs={"customer_id": customer.id})

        everything = authenticated_api_client.get(url)
        payments = authenticated_api_client.get(url, {"type": "payment"})

        assert everything.data["count"] == 2
        assert payments.data["count"] == 1
        assert payments.data["results"][0]["amount"] == "-5000.00"
