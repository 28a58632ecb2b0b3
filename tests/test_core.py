"""
Tests for core functionality.

Tests:
- Store and store settings
- StoreConfig construction
- Number and currency formatting
- Sentry event scrubbing
- Health check and settings API
- seed_store management command
"""

from dataclasses import FrozenInstanceError
from decimal import Decimal
from io import StringIO
from unittest.mock import patch

from django.core.management import call_command
from django.db import DatabaseError
from django.template import Context, Template
from django.urls import reverse

import pytest
from rest_framework import status

from apps.core.formatting_utils import format_currency, format_number
from apps.core.models import Store, StoreSettings
from apps.core.permissions import get_user_store
from apps.core.sentry_config import before_send, scrub_sensitive_data
from apps.core.store_config import StoreConfig


@pytest.mark.django_db
class TestStore:
    """Test Store model and settings defaults."""

    def test_settings_created_on_first_access(self, store_user):
        store = Store.objects.create(owner=store_user, name="Toko Baru")

        store_settings = store.get_settings()

        assert store_settings.store_name == "Toko Baru"
        assert store_settings.currency == "IDR"
        assert store_settings.tax_rate == Decimal("11")
        assert store_settings.low_stock_alert == 5
        assert StoreSettings.objects.filter(store=store).count() == 1

    def test_get_settings_is_idempotent(self, store):
        assert store.get_settings().pk == store.get_settings().pk

    def test_get_user_store(self, store, django_user_model):
        stranger = django_user_model.objects.create_user(username="tanpa-toko", password="x")

        assert get_user_store(store.owner) == store
        assert get_user_store(stranger) is None


@pytest.mark.django_db
class TestStoreConfig:
    """Test StoreConfig construction."""

    def test_from_store(self, store):
        store_settings = store.get_settings()
        store_settings.store_address = "Jl. Merdeka 1"
        store_settings.paper_size = StoreSettings.PAPER_A4
        store_settings.save()

        config = StoreConfig.from_store(store)

        assert config.store_name == "Warung Test"
        assert config.store_address == "Jl. Merdeka 1"
        assert config.tax_rate == Decimal("11.00")
        assert config.receipt_format == "standard"

    def test_thermal_paper_means_thermal_receipt(self, store):
        assert StoreConfig.from_store(store).receipt_format == "thermal"

    def test_defaults_follow_django_settings(self, settings):
        settings.POS_DEFAULT_TAX_RATE = "12"

        assert StoreConfig.defaults().tax_rate == Decimal("12")

    def test_config_is_immutable(self):
        config = StoreConfig.defaults()

        with pytest.raises(FrozenInstanceError):
            config.tax_rate = Decimal("0")


class TestFormatting:
    """Test number and currency formatting."""

    def test_indonesian_grouping(self):
        assert format_number(1234567.5, locale="id") == "1.234.567,5"

    def test_english_grouping(self):
        assert format_number(1234567.89, locale="en") == "1,234,567.89"

    def test_currency_idr_has_no_minor_units(self):
        assert format_currency(Decimal("99900.00"), "IDR", locale="id") == "Rp 99.900"

    def test_currency_usd(self):
        assert format_currency(1234.5, "USD", locale="en") == "$1,234.50"

    def test_negative_amount(self):
        assert format_currency(-5000, "IDR", locale="id") == "Rp -5.000"

    def test_invalid_amount_is_zero(self):
        assert format_currency("abc", "IDR", locale="id") == "Rp 0"
        assert format_currency(float("nan"), "IDR", locale="id") == "Rp 0"

    def test_template_filter(self):
        template = Template('{% load formatting_filters %}{{ amount|format_currency:"IDR" }}')

        assert template.render(Context({"amount": Decimal("15000")})) == "Rp 15.000"


class TestSentryScrubbing:
    """Test removal of personal data from error reports."""

    def test_sensitive_keys_are_filtered(self):
        data = {"password": "secret", "phone": "08123456789", "name": "Andi"}

        scrubbed = scrub_sensitive_data(data)

        assert scrubbed["password"] == "[REDACTED]"
        assert scrubbed["phone"] == "[REDACTED]"
        assert scrubbed["name"] == "Andi"

    def test_phone_numbers_in_exceptions_are_masked(self):
        event = {"exception": {"values": [{"value": "Top-up failed for 081234567890"}]}}

        result = before_send(event, None)

        assert result["exception"]["values"][0]["value"] == "Top-up failed for XXXX7890"

    def test_emails_are_partially_masked(self):
        assert scrub_sensitive_data("kontak andi@example.com") == "kontak an***@example.com"


@pytest.mark.django_db
class TestCoreEndpoints:
    """Test health check and store settings endpoints."""

    def test_health_check(self, client):
        response = client.get(reverse("core:health_check"))

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_health_check_reports_database_failure(self, client):
        with patch("apps.core.views.connection") as mock_connection:
            mock_connection.cursor.side_effect = DatabaseError("connection refused")
            response = client.get(reverse("core:health_check"))

        assert response.status_code == 503

    def test_get_settings(self, authenticated_api_client):
        response = authenticated_api_client.get(reverse("core:store_settings"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["currency"] == "IDR"

    def test_update_settings(self, authenticated_api_client, store):
        response = authenticated_api_client.patch(
            reverse("core:store_settings"),
            {"tax_rate": "10.00", "currency": "usd", "receipt_footer": "Sampai jumpa"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        store_settings = store.get_settings()
        assert store_settings.tax_rate == Decimal("10.00")
        assert store_settings.currency == "USD"
        assert store_settings.receipt_footer == "Sampai jumpa"

    def test_invalid_tax_rate_rejected(self, authenticated_api_client):
        response = authenticated_api_client.patch(
            reverse("core:store_settings"), {"tax_rate": "150"}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_store_detail(self, authenticated_api_client, store):
        response = authenticated_api_client.get(reverse("core:store_detail"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["name"] == store.name


@pytest.mark.django_db
class TestSeedStoreCommand:
    """Test the seed_store management command."""

    def test_creates_store_with_sample_data(self):
        from apps.crm.models import Customer, WalletTransaction
        from apps.inventory.models import Product

        call_command("seed_store", "--username", "demo", "--store-name", "Demo", stdout=StringIO())

        store = Store.objects.get(owner__username="demo")
        assert store.name == "Demo"
        assert Product.objects.filter(store=store).count() == 4
        assert Customer.objects.get(store=store, name="Andi").wallet == Decimal("50000.00")
        assert Customer.objects.get(store=store, name="Budi").wallet == Decimal("15000.00")
        assert WalletTransaction.objects.filter(customer__store=store).count() == 2

    def test_running_twice_does_not_duplicate(self):
        from apps.inventory.models import Product

        call_command("seed_store", "--username", "demo", stdout=StringIO())
        call_command("seed_store", "--username", "demo", stdout=StringIO())

        assert Product.objects.filter(store__owner__username="demo").count() == 4

    def test_no_sample_data(self):
        from apps.inventory.models import Product

        call_command("seed_store", "--username", "kosong", "--no-sample-data", stdout=StringIO())

        store = Store.objects.get(owner__username="kosong")
        assert Product.objects.filter(store=store).count() == 0
        assert StoreSettings.objects.filter(store=store).exists()
