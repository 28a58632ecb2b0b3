"""
URL configuration for inventory app.
"""

from django.urls import path

from . import views

app_name = "inventory"

urlpatterns = [
    path("api/products/", views.ProductListCreateView.as_view(), name="product_list"),
    path("api/products/<uuid:id>/", views.ProductDetailView.as_view(), name="product_detail"),
    path(
        "api/products/<uuid:product_id>/adjust-stock/",
        views.stock_adjustment,
        name="stock_adjustment",
    ),
    path("api/inventory/reports/", views.inventory_reports, name="inventory_reports"),
]
