"""
Serializers for inventory models.
"""

from rest_framework import serializers

from .models import Product


class ProductSerializer(serializers.ModelSerializer):
    """Serializer for listing, creating and updating products."""

    total_value = serializers.DecimalField(
        source="calculate_total_selling_value",
        max_digits=16,
        decimal_places=2,
        read_only=True,
    )
    is_out_of_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "brand",
            "category",
            "cost_price",
            "price",
            "stock",
            "icon",
            "icon_color",
            "total_value",
            "is_out_of_stock",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Product name is required.")
        return value


class StockAdjustmentSerializer(serializers.Serializer):
    """
    Serializer for manual stock adjustments.

    ADD restocks by ``quantity``; SET overwrites the stock level.
    """

    ADD = "ADD"
    SET = "SET"

    ADJUSTMENT_CHOICES = [
        (ADD, "Add"),
        (SET, "Set"),
    ]

    adjustment_type = serializers.ChoiceField(choices=ADJUSTMENT_CHOICES)
    quantity = serializers.IntegerField(min_value=0)
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255)

    def validate(self, data):
        if data["adjustment_type"] == self.ADD and data["quantity"] == 0:
            raise serializers.ValidationError({"quantity": "Quantity to add must be positive."})
        return data

    def save(self, product):
        """Apply the adjustment to a locked product row."""
        if self.validated_data["adjustment_type"] == self.ADD:
            product.stock += self.validated_data["quantity"]
        else:
            product.stock = self.validated_data["quantity"]
        product.save(update_fields=["stock", "updated_at"])
        return product
