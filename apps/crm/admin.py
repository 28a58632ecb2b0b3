"""
Admin configuration for CRM models.
"""

from django.contrib import admin

from .models import Customer, WalletTransaction


class WalletTransactionInline(admin.TabularInline):
    model = WalletTransaction
    extra = 0
    can_delete = False
    fields = ["transaction_type", "amount", "balance_after", "description", "sale", "created_at"]
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    """Admin interface for Customer."""

    list_display = ["name", "phone", "email", "wallet", "store", "created_at"]
    list_filter = ["gender", "store", "created_at"]
    search_fields = ["name", "phone", "email"]
    # Wallet changes go through top-up/adjustment so the ledger stays complete
    readonly_fields = ["wallet", "created_at", "updated_at"]
    inlines = [WalletTransactionInline]


@admin.register(WalletTransaction)
class WalletTransactionAdmin(admin.ModelAdmin):
    """Read-only admin interface for the wallet ledger."""

    list_display = ["customer", "transaction_type", "amount", "balance_after", "created_at"]
    list_filter = ["transaction_type", "created_at"]
    search_fields = ["customer__name", "description"]
    readonly_fields = [
        "customer",
        "transaction_type",
        "amount",
        "balance_after",
        "description",
        "sale",
        "created_at",
        "created_by",
    ]

    def has_add_permission(self, request):
        return False
