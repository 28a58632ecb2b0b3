"""
Views for sales and POS functionality.

- Live total calculation while the cart is being built
- Sale creation (settlement)
- Transaction history with search, filters and sorting
- Receipt generation (HTML for browser printing, PDF for download)
"""

import logging

from django.db.models import Q
from django.http import Http404, HttpResponse

from rest_framework import filters, generics, permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core.permissions import HasStoreAccess, StoreScopedMixin, get_user_store
from apps.core.store_config import StoreConfig

from .exceptions import PersistenceFailure, SettlementError
from .models import Sale
from .receipt_service import RECEIPT_FORMATS, ReceiptService
from .serializers import CartSerializer, SaleCreateSerializer, SaleDetailSerializer, SaleListSerializer
from .settlement import calculate

logger = logging.getLogger(__name__)

# Transaction value tiers for the history filter
HIGH_VALUE_THRESHOLD = 100000
MEDIUM_VALUE_THRESHOLD = 50000


# API Endpoints for POS


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, HasStoreAccess])
def pos_calculate_totals(request):
    """
    Calculate sale totals without creating a sale.

    This endpoint allows the frontend to show live total calculations
    as the user builds their cart. An empty cart yields all zeros.

    Request body:
    {
        "items": [{"product_id": "uuid", "quantity": 1}],
        "discount_type": "FIXED|PERCENTAGE" (optional, default: FIXED),
        "discount_value": "0" (optional),
        "tax_type": "FIXED|PERCENTAGE" (optional),
        "tax_value": "11" (optional, defaults to the store tax rate)
    }

    Response:
    {
        "subtotal": "100000.00",
        "discount_type": "PERCENTAGE",
        "discount_value": "10",
        "discount_amount": "10000.00",
        "taxable_amount": "90000.00",
        "tax_type": "PERCENTAGE",
        "tax_value": "11",
        "tax_amount": "9900.00",
        "grand_total": "99900.00",
        "items": [...]
    }
    """
    store = get_user_store(request.user)
    serializer = CartSerializer(data=request.data, context={"request": request, "store": store})
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    lines = serializer.get_lines()
    result = calculate(lines, serializer.get_discount(), serializer.get_tax())

    data = result.as_dict()
    data["items"] = [
        {
            "product_id": str(line.product_id),
            "name": line.name,
            "quantity": line.quantity,
            "unit_price": str(line.unit_price),
            "line_total": str(line.line_total),
            "stock": line.stock,
            "exceeds_stock": line.stock is not None and line.quantity > line.stock,
        }
        for line in lines
    ]
    return Response(data, status=status.HTTP_200_OK)


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, HasStoreAccess])
def pos_create_sale(request):
    """
    Create a new sale through POS.

    Request body: the calculate-totals body plus
    {
        "payment_method": "CASH|BANK_TRANSFER|E_WALLET|BALANCE",
        "customer_id": "uuid" (optional, required for BALANCE),
        "transaction_date": "ISO 8601 datetime" (optional)
    }

    The sale, its items, the stock decrements and any wallet debit are
    applied in one transaction. Business rejections return
    ``{"detail": ..., "code": ...}`` with 400 or 409; a database failure
    returns 503.
    """
    store = get_user_store(request.user)
    serializer = SaleCreateSerializer(
        data=request.data, context={"request": request, "store": store}
    )
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        sale = serializer.save()
    except PersistenceFailure as e:
        logger.error("POS sale creation failed for store %s: %s", store.id, e.detail, exc_info=True)
        return Response({"detail": e.detail, "code": e.code}, status=e.status_code)
    except SettlementError as e:
        logger.warning("POS sale rejected for store %s: %s", store.id, e.detail)
        return Response({"detail": e.detail, "code": e.code}, status=e.status_code)

    # Committed: answer with the stored row, not the in-memory instance
    logger.info("POS sale %s created for store %s", sale.sale_number, store.id)
    sale = Sale.objects.select_related("cashier").prefetch_related("items").get(pk=sale.pk)
    return Response(SaleDetailSerializer(sale).data, status=status.HTTP_201_CREATED)


# Sale Management Views


class SaleListView(StoreScopedMixin, generics.ListAPIView):
    """
    API endpoint for the transaction history.

    Query parameters:
    - search: Search by sale number, customer name, payment method
    - payment_method: Filter by payment method
    - value: Filter by value tier (high, medium, low)
    - date_from: Filter by date (YYYY-MM-DD)
    - date_to: Filter by date (YYYY-MM-DD)
    - sort: date or amount; order: asc or desc
    - ordering: DRF ordering on transaction_date, total, sale_number
    """

    queryset = Sale.objects.all()
    serializer_class = SaleListSerializer
    permission_classes = [permissions.IsAuthenticated, HasStoreAccess]
    filter_backends = [filters.OrderingFilter]
    ordering_fields = ["transaction_date", "total", "sale_number"]
    ordering = ["-transaction_date", "-created_at"]

    SORT_FIELDS = {"date": "transaction_date", "amount": "total"}

    def get_queryset(self):
        """Get sales for the current user's store with filters."""
        queryset = super().get_queryset().prefetch_related("items")
        params = self.request.query_params

        # Search
        search = params.get("search", "").strip()
        if search:
            queryset = queryset.filter(
                Q(sale_number__icontains=search)
                | Q(customer_name__icontains=search)
                | Q(payment_method__icontains=search.replace(" ", "_"))
            )

        # Filters
        payment_method = params.get("payment_method")
        if payment_method:
            queryset = queryset.filter(payment_method=payment_method.upper())

        value = params.get("value")
        if value == "high":
            queryset = queryset.filter(total__gte=HIGH_VALUE_THRESHOLD)
        elif value == "medium":
            queryset = queryset.filter(
                total__gte=MEDIUM_VALUE_THRESHOLD, total__lt=HIGH_VALUE_THRESHOLD
            )
        elif value == "low":
            queryset = queryset.filter(total__lt=MEDIUM_VALUE_THRESHOLD)

        date_from = params.get("date_from")
        if date_from:
            queryset = queryset.filter(transaction_date__date__gte=date_from)

        date_to = params.get("date_to")
        if date_to:
            queryset = queryset.filter(transaction_date__date__lte=date_to)

        # Simple sort switch used by the history screen
        sort = params.get("sort")
        if sort in self.SORT_FIELDS:
            field = self.SORT_FIELDS[sort]
            prefix = "" if params.get("order") == "asc" else "-"
            queryset = queryset.order_by(f"{prefix}{field}", f"{prefix}created_at")

        return queryset

    def filter_queryset(self, queryset):
        # An explicit sort switch wins over the default ordering
        if self.request.query_params.get("sort") in self.SORT_FIELDS:
            return queryset
        return super().filter_queryset(queryset)


class SaleDetailView(StoreScopedMixin, generics.RetrieveAPIView):
    """
    API endpoint for retrieving a single sale.
    """

    queryset = Sale.objects.select_related("customer", "cashier").prefetch_related("items")
    serializer_class = SaleDetailSerializer
    permission_classes = [permissions.IsAuthenticated, HasStoreAccess]
    lookup_field = "id"


# Receipt Generation Views


def _get_receipt_sale(request, sale_id):
    try:
        return (
            Sale.objects.select_related("customer", "cashier", "store")
            .prefetch_related("items")
            .get(id=sale_id, store=get_user_store(request.user))
        )
    except Sale.DoesNotExist:
        raise Http404("Receipt not found")


def _resolve_format(sale, format_type):
    config = StoreConfig.from_store(sale.store)
    return config, format_type or config.receipt_format


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated, HasStoreAccess])
def receipt_html(request, sale_id, format_type=None):
    """
    Generate HTML receipt for browser viewing and printing.

    Args:
        sale_id: UUID of the sale
        format_type: 'standard' or 'thermal'; defaults to the store's paper size
    """
    sale = _get_receipt_sale(request, sale_id)
    config, format_type = _resolve_format(sale, format_type)
    if format_type not in RECEIPT_FORMATS:
        raise Http404("Unknown receipt format")

    html_content = ReceiptService.generate_receipt(
        sale=sale, format_type=format_type, output_format="html", config=config
    ).decode("utf-8")

    return HttpResponse(html_content, content_type="text/html")


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated, HasStoreAccess])
def receipt_pdf(request, sale_id, format_type=None):
    """
    Generate PDF receipt for download.

    Args:
        sale_id: UUID of the sale
        format_type: 'standard' or 'thermal'; defaults to the store's paper size
    """
    sale = _get_receipt_sale(request, sale_id)
    config, format_type = _resolve_format(sale, format_type)
    if format_type not in RECEIPT_FORMATS:
        raise Http404("Unknown receipt format")

    pdf_bytes = ReceiptService.generate_receipt(
        sale=sale, format_type=format_type, output_format="pdf", config=config
    )

    response = HttpResponse(pdf_bytes, content_type="application/pdf")
    filename = f"receipt_{sale.sale_number}_{format_type}.pdf"
    response["Content-Disposition"] = f'attachment; filename="{filename}"'

    return response
