"""
Pytest configuration and fixtures for the POS Keren platform.
"""

from decimal import Decimal

import pytest


@pytest.fixture
def api_client():
    """
    Fixture for Django REST framework API client.
    """
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def store_user(django_user_model):
    """
    Fixture for creating a user that owns a store.
    """
    return django_user_model.objects.create_user(
        username="kasir", email="kasir@example.com", password="testpass123"
    )


@pytest.fixture
def store(store_user):
    """
    Fixture for creating a test store with its settings.
    """
    from apps.core.models import Store

    store = Store.objects.create(owner=store_user, name="Warung Test")
    store.get_settings()
    return store


@pytest.fixture
def authenticated_api_client(api_client, store):
    """
    Fixture for an API client authenticated as the store owner.
    """
    api_client.force_authenticate(user=store.owner)
    return api_client


@pytest.fixture
def product(store):
    """
    Fixture for creating a test product.
    """
    from apps.inventory.models import Product

    return Product.objects.create(
        store=store,
        name="Kopi Hitam",
        brand="Kapal Api",
        category="Minuman",
        cost_price=Decimal("3000.00"),
        price=Decimal("5000.00"),
        stock=10,
    )


@pytest.fixture
def customer(store):
    """
    Fixture for creating a test customer with a funded wallet.
    """
    from apps.crm.models import Customer

    customer = Customer.objects.create(store=store, name="Andi", phone="08123456789")
    customer.top_up_wallet(Decimal("50000.00"), "Opening balance")
    return customer


@pytest.fixture
def make_product(store):
    """
    Factory fixture for products in the test store.
    """
    from apps.inventory.models import Product

    def _make_product(name="Produk", price="10000.00", stock=10, cost_price="0.00", **kwargs):
        return Product.objects.create(
            store=store,
            name=name,
            price=Decimal(price),
            cost_price=Decimal(cost_price),
            stock=stock,
            **kwargs,
        )

    return _make_product
