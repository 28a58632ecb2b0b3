"""
Serializers for CRM functionality.
"""

from decimal import Decimal

from django.db import transaction
from django.db.models import Sum

from rest_framework import serializers

from .models import Customer, WalletTransaction


class CustomerSerializer(serializers.ModelSerializer):
    """
    Serializer for customer list, create and update.

    ``wallet`` may be given on create as an opening balance, recorded as a
    top-up. Afterwards it only changes through the wallet endpoint.
    """

    wallet = serializers.DecimalField(
        max_digits=14,
        decimal_places=2,
        min_value=Decimal("0.00"),
        required=False,
    )

    class Meta:
        model = Customer
        fields = [
            "id",
            "name",
            "phone",
            "email",
            "gender",
            "address",
            "wallet",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Customer name is required.")
        return value

    def validate_wallet(self, value):
        if self.instance is not None and value != self.instance.wallet:
            raise serializers.ValidationError(
                "Wallet balance can only be changed through a wallet top-up or adjustment."
            )
        return value

    @transaction.atomic
    def create(self, validated_data):
        opening_balance = validated_data.pop("wallet", Decimal("0.00"))
        customer = super().create(validated_data)
        if opening_balance > 0:
            request = self.context.get("request")
            customer.top_up_wallet(
                opening_balance,
                description="Opening balance",
                created_by=request.user if request else None,
            )
        return customer

    def update(self, instance, validated_data):
        validated_data.pop("wallet", None)
        return super().update(instance, validated_data)


class WalletTransactionSerializer(serializers.ModelSerializer):
    """Serializer for wallet ledger entries."""

    sale_number = serializers.CharField(source="sale.sale_number", read_only=True, allow_null=True)
    created_by_username = serializers.CharField(
        source="created_by.username", read_only=True, allow_null=True
    )

    class Meta:
        model = WalletTransaction
        fields = [
            "id",
            "transaction_type",
            "amount",
            "balance_after",
            "description",
            "sale",
            "sale_number",
            "created_at",
            "created_by_username",
        ]


class CustomerDetailSerializer(CustomerSerializer):
    """Customer profile with purchase statistics."""

    total_spent = serializers.SerializerMethodField()
    transaction_count = serializers.SerializerMethodField()
    recent_wallet_transactions = serializers.SerializerMethodField()

    class Meta(CustomerSerializer.Meta):
        fields = CustomerSerializer.Meta.fields + [
            "total_spent",
            "transaction_count",
            "recent_wallet_transactions",
        ]

    def get_total_spent(self, obj):
        total = obj.sales.aggregate(total=Sum("total"))["total"]
        return str(total or Decimal("0.00"))

    def get_transaction_count(self, obj):
        return obj.sales.count()

    def get_recent_wallet_transactions(self, obj):
        return WalletTransactionSerializer(obj.wallet_transactions.all()[:10], many=True).data


class WalletAdjustmentSerializer(serializers.Serializer):
    """
    Serializer for manual wallet changes.

    TOP_UP adds a positive ``amount``; ADJUSTMENT applies a signed
    correction that may not take the balance below zero; SET makes
    ``amount`` the new balance.
    """

    SET = "SET"

    transaction_type = serializers.ChoiceField(
        choices=[
            (WalletTransaction.TOP_UP, "Top-up"),
            (WalletTransaction.ADJUSTMENT, "Manual Adjustment"),
            (SET, "Set Balance"),
        ]
    )
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    description = serializers.CharField(required=False, allow_blank=True, max_length=255)

    def validate(self, data):
        if data["transaction_type"] == WalletTransaction.TOP_UP and data["amount"] <= 0:
            raise serializers.ValidationError({"amount": "Top-up amount must be positive."})
        if data["transaction_type"] == self.SET:
            if data["amount"] < 0:
                raise serializers.ValidationError({"amount": "Balance must not be negative."})
        elif data["amount"] == 0:
            raise serializers.ValidationError({"amount": "Amount must not be zero."})
        return data

    def save(self, customer, user=None):
        """Apply the change to a locked customer row and return the ledger entry."""
        if self.validated_data["transaction_type"] == self.SET:
            return customer.set_wallet(
                self.validated_data["amount"],
                description=self.validated_data.get("description", ""),
                created_by=user,
            )
        if self.validated_data["transaction_type"] == WalletTransaction.TOP_UP:
            return customer.top_up_wallet(
                self.validated_data["amount"],
                description=self.validated_data.get("description", ""),
                created_by=user,
            )
        return customer.adjust_wallet(
            self.validated_data["amount"],
            description=self.validated_data.get("description", ""),
            created_by=user,
        )
