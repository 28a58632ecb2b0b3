"""
Explicit store configuration.

Receipt rendering and default tax selection take a StoreConfig instead of
reading StoreSettings (or Django settings) on their own, so both can be
exercised without a database.
"""

from dataclasses import dataclass
from decimal import Decimal

from django.conf import settings


@dataclass(frozen=True)
class StoreConfig:
    """Immutable snapshot of the settings a store's checkout depends on."""

    store_name: str = "POS Keren"
    store_address: str = ""
    store_phone: str = ""
    store_email: str = ""
    currency: str = "IDR"
    tax_rate: Decimal = Decimal("11")
    low_stock_alert: int = 5
    receipt_footer: str = "Terima kasih atas kunjungan Anda!"
    paper_size: str = "80mm"
    receipt_copies: int = 1
    auto_print: bool = False
    theme_color: str = "#6366f1"

    @classmethod
    def from_settings(cls, store_settings) -> "StoreConfig":
        """Build a config from a StoreSettings row."""
        return cls(
            store_name=store_settings.store_name,
            store_address=store_settings.store_address,
            store_phone=store_settings.store_phone,
            store_email=store_settings.store_email,
            currency=store_settings.currency,
            tax_rate=Decimal(store_settings.tax_rate),
            low_stock_alert=store_settings.low_stock_alert,
            receipt_footer=store_settings.receipt_footer,
            paper_size=store_settings.paper_size,
            receipt_copies=store_settings.receipt_copies,
            auto_print=store_settings.auto_print,
            theme_color=store_settings.theme_color,
        )

    @classmethod
    def from_store(cls, store) -> "StoreConfig":
        """Build a config for a store, creating default settings if needed."""
        return cls.from_settings(store.get_settings())

    @classmethod
    def defaults(cls) -> "StoreConfig":
        """Config used when no store settings exist, driven by Django settings."""
        return cls(
            currency=settings.POS_DEFAULT_CURRENCY,
            tax_rate=Decimal(settings.POS_DEFAULT_TAX_RATE),
            low_stock_alert=settings.POS_DEFAULT_LOW_STOCK_ALERT,
        )

    @property
    def receipt_format(self) -> str:
        """Receipt layout matching the configured paper size."""
        return "thermal" if self.paper_size == "80mm" else "standard"
