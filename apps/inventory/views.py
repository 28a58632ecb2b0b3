"""
Views for inventory management.

- Product list with search and ordering
- Product create, detail, update and delete
- Manual stock adjustment
- Inventory report bundle
"""

import logging

from django.db import transaction

from rest_framework import filters, generics, permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core.permissions import HasStoreAccess, StoreScopedMixin, get_user_store

from .models import Product
from .reports import InventoryReportGenerator
from .serializers import ProductSerializer, StockAdjustmentSerializer

logger = logging.getLogger(__name__)


class ProductListCreateView(StoreScopedMixin, generics.ListCreateAPIView):
    """
    API endpoint for listing and creating products.

    Supports:
    - Search by name, brand, category (``?search=``)
    - Filter by category, low stock, out of stock
    - Ordering by name, price, stock, created_at
    """

    queryset = Product.objects.all()
    serializer_class = ProductSerializer
    permission_classes = [permissions.IsAuthenticated, HasStoreAccess]
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ["name", "brand", "category"]
    ordering_fields = ["name", "price", "cost_price", "stock", "created_at"]
    ordering = ["name"]

    def get_queryset(self):
        queryset = super().get_queryset()

        category = self.request.query_params.get("category")
        if category:
            queryset = queryset.filter(category__iexact=category)

        low_stock = self.request.query_params.get("low_stock")
        if low_stock and low_stock.lower() in ["true", "1", "yes"]:
            threshold = self.get_store().get_settings().low_stock_alert
            queryset = queryset.filter(stock__gt=0, stock__lte=threshold)

        out_of_stock = self.request.query_params.get("out_of_stock")
        if out_of_stock and out_of_stock.lower() in ["true", "1", "yes"]:
            queryset = queryset.filter(stock=0)

        return queryset

    def perform_create(self, serializer):
        super().perform_create(serializer)
        logger.info("Product %s created in store %s", serializer.instance.id, self.get_store().id)


class ProductDetailView(StoreScopedMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    API endpoint for retrieving, updating and deleting a single product.

    Deleting a product keeps past sales intact: sale items hold a snapshot
    of the product and their product reference is cleared.
    """

    queryset = Product.objects.all()
    serializer_class = ProductSerializer
    permission_classes = [permissions.IsAuthenticated, HasStoreAccess]
    lookup_field = "id"
    http_method_names = ["get", "patch", "put", "delete", "head", "options"]


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, HasStoreAccess])
def stock_adjustment(request, product_id):
    """
    API endpoint for adjusting stock levels.

    Request body:
    {
        "adjustment_type": "ADD|SET",
        "quantity": <number>,
        "reason": "<optional reason>"
    }
    """
    serializer = StockAdjustmentSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    with transaction.atomic():
        try:
            product = Product.objects.select_for_update().get(
                id=product_id, store=get_user_store(request.user)
            )
        except Product.DoesNotExist:
            return Response({"detail": "Product not found."}, status=status.HTTP_404_NOT_FOUND)

        previous_stock = product.stock
        product = serializer.save(product)

    logger.info(
        "Stock for product %s adjusted from %s to %s (%s)",
        product.id,
        previous_stock,
        product.stock,
        serializer.validated_data.get("reason") or serializer.validated_data["adjustment_type"],
    )

    return Response(
        {
            "detail": "Stock adjusted successfully.",
            "product": ProductSerializer(product).data,
        },
        status=status.HTTP_200_OK,
    )


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated, HasStoreAccess])
def inventory_reports(request):
    """
    Generate the inventory report bundle.

    Includes asset valuation, low and out of stock alerts, best sellers,
    stagnant products and unsold products.
    """
    generator = InventoryReportGenerator(get_user_store(request.user))
    return Response(generator.get_full_report(), status=status.HTTP_200_OK)
