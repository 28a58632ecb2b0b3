"""
Django admin configuration for core models.
"""

from django.contrib import admin

from .models import Store, StoreSettings


class StoreSettingsInline(admin.StackedInline):
    model = StoreSettings
    can_delete = False
    extra = 0


@admin.register(Store)
class StoreAdmin(admin.ModelAdmin):
    """Admin interface for Store model."""

    list_display = ["name", "owner", "created_at", "updated_at"]
    search_fields = ["name", "owner__username", "owner__email"]
    readonly_fields = ["id", "created_at", "updated_at"]
    inlines = [StoreSettingsInline]


@admin.register(StoreSettings)
class StoreSettingsAdmin(admin.ModelAdmin):
    """Admin interface for StoreSettings model."""

    list_display = ["store_name", "store", "currency", "tax_rate", "low_stock_alert", "paper_size"]
    list_filter = ["currency", "paper_size", "theme"]
    search_fields = ["store_name", "store__name"]
    readonly_fields = ["created_at", "updated_at"]
