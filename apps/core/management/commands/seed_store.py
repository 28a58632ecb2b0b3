"""
Management command to create a store owner and seed sample data.
"""

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from apps.core.models import Store
from apps.crm.models import Customer
from apps.inventory.models import Product

User = get_user_model()

SAMPLE_PRODUCTS = [
    {
        "name": "Kopi Hitam",
        "brand": "Kapal Api",
        "category": "Minuman",
        "cost_price": Decimal("3000"),
        "price": Decimal("5000"),
        "stock": 100,
        "icon": "coffee",
        "icon_color": "#6b4f3a",
    },
    {
        "name": "Kopi Susu",
        "brand": "Indocafe",
        "category": "Minuman",
        "cost_price": Decimal("4500"),
        "price": Decimal("7000"),
        "stock": 80,
        "icon": "coffee",
        "icon_color": "#c0a080",
    },
    {
        "name": "Roti Bakar",
        "brand": "Sari Roti",
        "category": "Makanan",
        "cost_price": Decimal("8000"),
        "price": Decimal("12000"),
        "stock": 50,
        "icon": "utensils",
        "icon_color": "#f59e0b",
    },
    {
        "name": "Pisang Goreng",
        "brand": "",
        "category": "Camilan",
        "cost_price": Decimal("1000"),
        "price": Decimal("2000"),
        "stock": 40,
        "icon": "cookie",
        "icon_color": "#eab308",
    },
]

SAMPLE_CUSTOMERS = [
    {
        "name": "Andi",
        "phone": "08123456789",
        "email": "andi@example.com",
        "gender": Customer.MALE,
        "address": "Jl. Merdeka 1",
        "wallet": Decimal("50000"),
    },
    {
        "name": "Budi",
        "phone": "08987654321",
        "email": "budi@example.com",
        "gender": Customer.MALE,
        "address": "Jl. Pahlawan 2",
        "wallet": Decimal("15000"),
    },
]


class Command(BaseCommand):
    help = "Create a store owner with a store and seed sample products and customers"

    def add_arguments(self, parser):
        parser.add_argument("--username", type=str, default="kasir", help="Owner username")
        parser.add_argument(
            "--password", type=str, default="kasir12345", help="Owner password (new users only)"
        )
        parser.add_argument(
            "--store-name", type=str, default="POS Keren", help="Name of the store"
        )
        parser.add_argument(
            "--no-sample-data",
            action="store_true",
            help="Only create the owner, store and settings",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        user = self._create_user(options["username"], options["password"])
        store = self._create_store(user, options["store_name"])
        store.get_settings()

        if options["no_sample_data"]:
            self.stdout.write(self.style.SUCCESS(f"Store ready: {store.name}"))
            return

        products_created = self._seed_products(store)
        customers_created = self._seed_customers(store, user)

        self.stdout.write(
            self.style.SUCCESS(
                f"Store ready: {store.name} "
                f"({products_created} products, {customers_created} customers seeded)"
            )
        )

    def _create_user(self, username, password):
        """Create or get the store owner."""
        user, created = User.objects.get_or_create(username=username)
        if created:
            user.set_password(password)
            user.save()
            self.stdout.write(f"Created user: {username}")
        else:
            self.stdout.write(f"Using existing user: {username}")
        return user

    def _create_store(self, user, store_name):
        """Create or get the user's store."""
        store, created = Store.objects.get_or_create(owner=user, defaults={"name": store_name})
        if created:
            self.stdout.write(f"Created store: {store.name}")
        return store

    def _seed_products(self, store):
        """Add the sample products when the store has none."""
        if Product.objects.filter(store=store).exists():
            self.stdout.write("Products already present, skipping sample products")
            return 0

        Product.objects.bulk_create([Product(store=store, **data) for data in SAMPLE_PRODUCTS])
        return len(SAMPLE_PRODUCTS)

    def _seed_customers(self, store, user):
        """Add the sample customers when the store has none."""
        if Customer.objects.filter(store=store).exists():
            self.stdout.write("Customers already present, skipping sample customers")
            return 0

        for data in SAMPLE_CUSTOMERS:
            data = dict(data)
            opening_balance = data.pop("wallet")
            customer = Customer.objects.create(store=store, **data)
            # Opening balance goes through the ledger like any other top-up
            customer.top_up_wallet(opening_balance, "Opening balance", created_by=user)
        return len(SAMPLE_CUSTOMERS)
