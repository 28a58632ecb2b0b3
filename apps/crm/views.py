"""
Views for CRM functionality.

- Customer list with search, create, detail, update and delete
- Manual wallet top-up and adjustment
- Wallet transaction history
"""

import logging

from django.db import transaction

from rest_framework import filters, generics, permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core.permissions import HasStoreAccess, StoreScopedMixin, get_user_store

from .models import Customer, WalletTransaction
from .serializers import (
    CustomerDetailSerializer,
    CustomerSerializer,
    WalletAdjustmentSerializer,
    WalletTransactionSerializer,
)

logger = logging.getLogger(__name__)


class CustomerListCreateView(StoreScopedMixin, generics.ListCreateAPIView):
    """
    API endpoint for customer list with search, and customer creation.
    """

    queryset = Customer.objects.all()
    serializer_class = CustomerSerializer
    permission_classes = [permissions.IsAuthenticated, HasStoreAccess]
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ["name", "phone", "email"]
    ordering_fields = ["name", "wallet", "created_at"]
    ordering = ["name"]

    def get_queryset(self):
        queryset = super().get_queryset()

        # Customers that can pay by balance
        has_balance = self.request.query_params.get("has_balance")
        if has_balance and has_balance.lower() in ["true", "1", "yes"]:
            queryset = queryset.filter(wallet__gt=0)

        return queryset


class CustomerDetailView(StoreScopedMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    API endpoint for customer profile, update and delete.

    Past sales keep the customer name snapshot when a customer is deleted.
    """

    queryset = Customer.objects.all()
    permission_classes = [permissions.IsAuthenticated, HasStoreAccess]
    lookup_field = "id"
    http_method_names = ["get", "patch", "put", "delete", "head", "options"]

    def get_serializer_class(self):
        if self.request.method == "GET":
            return CustomerDetailSerializer
        return CustomerSerializer


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, HasStoreAccess])
def wallet_adjustment(request, customer_id):
    """
    API endpoint for topping up or correcting a customer's wallet.

    Request body:
    {
        "transaction_type": "TOP_UP|ADJUSTMENT|SET",
        "amount": <signed decimal; the new balance for SET>,
        "description": "<optional>"
    }
    """
    serializer = WalletAdjustmentSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    with transaction.atomic():
        try:
            customer = Customer.objects.select_for_update().get(
                id=customer_id, store=get_user_store(request.user)
            )
        except Customer.DoesNotExist:
            return Response({"detail": "Customer not found."}, status=status.HTTP_404_NOT_FOUND)

        try:
            wallet_transaction = serializer.save(customer, user=request.user)
        except ValueError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)

    logger.info(
        "Wallet %s for customer %s: %s (balance %s)",
        wallet_transaction.transaction_type,
        customer.id,
        wallet_transaction.amount,
        wallet_transaction.balance_after,
    )

    return Response(
        {
            "detail": "Wallet updated successfully.",
            "customer": CustomerSerializer(customer).data,
            "transaction": WalletTransactionSerializer(wallet_transaction).data,
        },
        status=status.HTTP_200_OK,
    )


class WalletTransactionListView(generics.ListAPIView):
    """
    API endpoint for a customer's wallet ledger, newest first.
    """

    serializer_class = WalletTransactionSerializer
    permission_classes = [permissions.IsAuthenticated, HasStoreAccess]

    def get_queryset(self):
        queryset = WalletTransaction.objects.filter(
            customer_id=self.kwargs["customer_id"],
            customer__store=get_user_store(self.request.user),
        ).select_related("sale", "created_by")

        transaction_type = self.request.query_params.get("type")
        if transaction_type:
            queryset = queryset.filter(transaction_type=transaction_type.upper())

        return queryset
