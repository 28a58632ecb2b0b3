"""
Admin configuration for inventory models.
"""

from django.contrib import admin

from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Admin interface for Product."""

    list_display = ["name", "brand", "category", "price", "cost_price", "stock", "store"]
    list_filter = ["category", "store", "created_at"]
    search_fields = ["name", "brand", "category"]
    readonly_fields = ["created_at", "updated_at"]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("store", "name", "brand", "category"),
            },
        ),
        (
            "Pricing and Stock",
            {
                "fields": ("cost_price", "price", "stock"),
            },
        ),
        (
            "Display",
            {
                "fields": ("icon", "icon_color"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )
