"""
URL configuration for sales app.
"""

from django.urls import path

from . import views

app_name = "sales"

urlpatterns = [
    # POS API Endpoints
    path("api/pos/calculate-totals/", views.pos_calculate_totals, name="pos_calculate_totals"),
    path("api/pos/sales/create/", views.pos_create_sale, name="pos_create_sale"),
    # Sale Management API
    path("api/sales/", views.SaleListView.as_view(), name="sale_list"),
    path("api/sales/<uuid:id>/", views.SaleDetailView.as_view(), name="sale_detail"),
    # Receipt Generation
    path("receipts/html/<uuid:sale_id>/", views.receipt_html, name="receipt_html_default"),
    path(
        "receipts/html/<uuid:sale_id>/<str:format_type>/", views.receipt_html, name="receipt_html"
    ),
    path("receipts/pdf/<uuid:sale_id>/", views.receipt_pdf, name="receipt_pdf_default"),
    path("receipts/pdf/<uuid:sale_id>/<str:format_type>/", views.receipt_pdf, name="receipt_pdf"),
]
