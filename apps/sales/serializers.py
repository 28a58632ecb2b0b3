"""
Serializers for sales app.

- Cart input shared by the live total calculation and sale creation
- Sale creation through the settlement service
- Sale list and detail output
"""

from rest_framework import serializers

from apps.core.store_config import StoreConfig
from apps.crm.models import Customer
from apps.inventory.models import Product

from .models import Sale, SaleItem
from .services import SettlementService
from .settlement import AdjustmentKind, AdjustmentSpec, CartLine


class CartItemSerializer(serializers.Serializer):
    """One cart line as sent by the POS client."""

    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)


class CartSerializer(serializers.Serializer):
    """
    Cart plus discount and tax.

    Discount and tax values are passed through as text; values that do not
    parse as a number count as zero. When ``tax_type`` and ``tax_value``
    are both omitted, the store's default tax rate applies as a percentage.
    """

    items = CartItemSerializer(many=True, required=False, default=list)
    discount_type = serializers.CharField(required=False, default=AdjustmentKind.FIXED)
    discount_value = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default="0"
    )
    tax_type = serializers.CharField(required=False)
    tax_value = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def _get_store(self):
        return self.context["store"]

    def validate_items(self, value):
        """Resolve products in one query and keep only lines for this store."""
        product_ids = {item["product_id"] for item in value}
        products = {
            p.id: p for p in Product.objects.filter(store=self._get_store(), id__in=product_ids)
        }
        missing = [str(pid) for pid in product_ids if pid not in products]
        if missing:
            raise serializers.ValidationError(f"Products not found: {', '.join(sorted(missing))}")

        for item in value:
            item["product"] = products[item["product_id"]]
        return value

    def get_lines(self):
        return [
            CartLine.from_product(item["product"], item["quantity"])
            for item in self.validated_data["items"]
        ]

    def get_discount(self):
        return AdjustmentSpec(
            self.validated_data.get("discount_type"),
            self.validated_data.get("discount_value"),
        )

    def get_tax(self):
        if "tax_type" not in self.validated_data and "tax_value" not in self.validated_data:
            config = self.context.get("config") or StoreConfig.from_store(self._get_store())
            return AdjustmentSpec.percentage(config.tax_rate)
        return AdjustmentSpec(
            self.validated_data.get("tax_type", AdjustmentKind.PERCENTAGE),
            self.validated_data.get("tax_value"),
        )


class SaleCreateSerializer(CartSerializer):
    """
    Serializer for creating a new sale through POS.

    Validation covers request shape only. Business rules (empty cart,
    balance payments, stock) are enforced by SettlementService.settle so
    they are checked against locked rows.
    """

    payment_method = serializers.CharField()
    customer_id = serializers.UUIDField(required=False, allow_null=True)
    transaction_date = serializers.DateTimeField(required=False, allow_null=True)

    def validate_customer_id(self, value):
        """Validate that customer exists and belongs to the store."""
        if value is None:
            return value
        if not Customer.objects.filter(id=value, store=self._get_store()).exists():
            raise serializers.ValidationError("Customer not found.")
        return value

    def validate_payment_method(self, value):
        return value.strip().upper()

    def create(self, validated_data):
        customer_id = validated_data.get("customer_id")
        customer = Customer.objects.get(id=customer_id) if customer_id else None
        request = self.context.get("request")

        return SettlementService.settle(
            store=self._get_store(),
            lines=self.get_lines(),
            discount=self.get_discount(),
            tax=self.get_tax(),
            payment_method=validated_data["payment_method"],
            customer=customer,
            transaction_date=validated_data.get("transaction_date"),
            cashier=request.user if request else None,
        )


class SaleItemDetailSerializer(serializers.ModelSerializer):
    """Serializer for sale item details."""

    class Meta:
        model = SaleItem
        fields = [
            "id",
            "line_number",
            "product",
            "product_name",
            "brand",
            "category",
            "quantity",
            "unit_price",
            "unit_cost",
            "line_total",
        ]


class SaleDetailSerializer(serializers.ModelSerializer):
    """Serializer for sale details."""

    items = SaleItemDetailSerializer(many=True, read_only=True)
    payment_method_display = serializers.CharField(
        source="get_payment_method_display", read_only=True
    )
    cashier_username = serializers.CharField(
        source="cashier.username", read_only=True, allow_null=True
    )
    profit = serializers.DecimalField(
        source="calculate_profit", max_digits=14, decimal_places=2, read_only=True
    )

    class Meta:
        model = Sale
        fields = [
            "id",
            "sale_number",
            "transaction_date",
            "customer",
            "customer_name",
            "cashier_username",
            "items",
            "subtotal",
            "discount_type",
            "discount_value",
            "discount_amount",
            "tax_type",
            "tax_value",
            "tax_amount",
            "total",
            "profit",
            "payment_method",
            "payment_method_display",
            "created_at",
        ]


class SaleListSerializer(serializers.ModelSerializer):
    """Serializer for the transaction history list."""

    payment_method_display = serializers.CharField(
        source="get_payment_method_display", read_only=True
    )
    items_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Sale
        fields = [
            "id",
            "sale_number",
            "transaction_date",
            "customer_name",
            "subtotal",
            "discount_amount",
            "tax_amount",
            "total",
            "payment_method",
            "payment_method_display",
            "items_count",
        ]
