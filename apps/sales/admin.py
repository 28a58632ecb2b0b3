"""
Django admin configuration for sales models.

Sales are written by the settlement service only, so the admin is read-only.
"""

from django.contrib import admin

from .models import Sale, SaleItem


class SaleItemInline(admin.TabularInline):
    """Inline admin for SaleItem model."""

    model = SaleItem
    extra = 0
    can_delete = False
    fields = ["line_number", "product_name", "brand", "quantity", "unit_price", "line_total"]
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    """Admin interface for Sale model."""

    list_display = [
        "sale_number",
        "store",
        "transaction_date",
        "customer_name",
        "total",
        "payment_method",
    ]
    list_filter = ["payment_method", "store", "transaction_date"]
    search_fields = ["sale_number", "customer_name"]
    date_hierarchy = "transaction_date"
    inlines = [SaleItemInline]
    fieldsets = [
        (
            "Basic Information",
            {
                "fields": [
                    "sale_number",
                    "store",
                    "transaction_date",
                    "customer",
                    "customer_name",
                    "cashier",
                ],
            },
        ),
        (
            "Financial Details",
            {
                "fields": [
                    "subtotal",
                    ("discount_type", "discount_value", "discount_amount"),
                    ("tax_type", "tax_value", "tax_amount"),
                    "total",
                ],
            },
        ),
        (
            "Payment",
            {
                "fields": ["payment_method"],
            },
        ),
    ]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
