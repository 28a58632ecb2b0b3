"""
URL configuration for CRM app.
"""

from django.urls import path

from . import views

app_name = "crm"

urlpatterns = [
    path("api/customers/", views.CustomerListCreateView.as_view(), name="customer_list"),
    path("api/customers/<uuid:id>/", views.CustomerDetailView.as_view(), name="customer_detail"),
    path(
        "api/customers/<uuid:customer_id>/wallet/",
        views.wallet_adjustment,
        name="wallet_adjustment",
    ),
    path(
        "api/customers/<uuid:customer_id>/wallet/transactions/",
        views.WalletTransactionListView.as_view(),
        name="wallet_transactions",
    ),
]
