"""
Serializers for store and store settings.
"""

from rest_framework import serializers

from .models import Store, StoreSettings


class StoreSettingsSerializer(serializers.ModelSerializer):
    """Serializer for the store settings form."""

    class Meta:
        model = StoreSettings
        fields = [
            "store_name",
            "store_address",
            "store_phone",
            "store_email",
            "currency",
            "tax_rate",
            "low_stock_alert",
            "receipt_footer",
            "paper_size",
            "receipt_copies",
            "auto_print",
            "theme",
            "theme_color",
            "updated_at",
        ]
        read_only_fields = ["updated_at"]

    def validate_currency(self, value):
        if len(value) != 3 or not value.isalpha():
            raise serializers.ValidationError("Currency must be a 3-letter ISO 4217 code.")
        return value.upper()


class StoreSerializer(serializers.ModelSerializer):
    """Serializer for the store itself."""

    owner_username = serializers.CharField(source="owner.username", read_only=True)

    class Meta:
        model = Store
        fields = ["id", "name", "owner_username", "created_at"]
        read_only_fields = ["id", "owner_username", "created_at"]
