"""
Django template filters for number and currency formatting.

Usage in templates:
    {% load formatting_filters %}

    {{ number|format_number }}
    {{ amount|format_currency:"IDR" }}
"""

from decimal import Decimal
from typing import Union

from django import template

from apps.core.formatting_utils import format_currency, format_number

register = template.Library()


@register.filter(name="format_number")
def format_number_filter(value: Union[int, float, Decimal], decimal_places: int = None) -> str:
    """
    Format a number according to the current locale.

    Usage:
        {{ 1234567|format_number }}      -> 1.234.567 (id) or 1,234,567 (en)
        {{ 12.5|format_number:2 }}       -> 12,50 (id) or 12.50 (en)
    """
    if value is None:
        return ""
    return format_number(value, decimal_places=decimal_places)


@register.filter(name="format_currency")
def format_currency_filter(value: Union[int, float, Decimal], currency: str = "IDR") -> str:
    """
    Format a currency amount according to the current locale.

    Usage:
        {{ 100000|format_currency }}        -> Rp 100.000
        {{ 12.5|format_currency:"USD" }}    -> $12.50 (en)
    """
    if value is None:
        return ""
    return format_currency(value, currency)
