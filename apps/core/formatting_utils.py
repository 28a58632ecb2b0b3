"""
Number and currency formatting utilities.

This module provides utilities for:
- Locale-specific number formatting (Indonesian and English grouping)
- Currency formatting for receipts and reports

Indonesian formatting groups thousands with "." and separates decimals
with ",", so 1234567.5 is written "1.234.567,5".
"""

from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from django.utils import translation

# Currencies that are conventionally shown without minor units
ZERO_DECIMAL_CURRENCIES = {"IDR", "JPY", "KRW", "VND"}

CURRENCY_SYMBOLS = {
    "IDR": "Rp",
    "USD": "$",
    "EUR": "€",
    "SGD": "S$",
    "MYR": "RM",
}


def _to_decimal(number: Union[int, float, str, Decimal, None]) -> Decimal:
    """Coerce a value to a finite Decimal, falling back to zero."""
    try:
        value = Decimal(str(number))
    except (InvalidOperation, TypeError, ValueError):
        return Decimal("0")
    if not value.is_finite():
        return Decimal("0")
    return value


def format_number(
    number: Union[int, float, Decimal],
    decimal_places: Optional[int] = None,
    use_grouping: bool = True,
    locale: Optional[str] = None,
) -> str:
    """
    Format a number according to the current or specified locale.

    Args:
        number: Number to format
        decimal_places: Number of decimal places (None for automatic)
        use_grouping: Whether to use thousand separators
        locale: Locale code ('id' or 'en'), defaults to current language

    Returns:
        Formatted number string

    Examples:
        >>> format_number(1234567.89, locale='en')
        '1,234,567.89'
        >>> format_number(1234567.89, locale='id')
        '1.234.567,89'
    """
    if locale is None:
        locale = translation.get_language() or "id"

    value = _to_decimal(number)

    # Convert to string with appropriate decimal places
    if decimal_places is not None:
        formatted = f"{value:.{decimal_places}f}"
    else:
        formatted = str(value)

    negative = formatted.startswith("-")
    if negative:
        formatted = formatted[1:]

    # Split into integer and decimal parts
    if "." in formatted:
        integer_part, decimal_part = formatted.split(".")
    else:
        integer_part = formatted
        decimal_part = None

    # Add thousand separators if requested
    if use_grouping and len(integer_part) > 3:
        # Group digits from right to left
        groups = []
        for i in range(len(integer_part), 0, -3):
            start = max(0, i - 3)
            groups.insert(0, integer_part[start:i])
        integer_part = ",".join(groups)

    # Reconstruct the number
    if decimal_part:
        formatted = f"{integer_part}.{decimal_part}"
    else:
        formatted = integer_part

    if locale.startswith("id"):
        # Swap separators: "," groups thousands in English, "." in Indonesian
        formatted = formatted.translate(str.maketrans({",": ".", ".": ","}))

    return f"-{formatted}" if negative else formatted


def format_currency(
    amount: Union[int, float, Decimal, None],
    currency: str = "IDR",
    locale: Optional[str] = None,
) -> str:
    """
    Format a currency amount according to the current or specified locale.

    Invalid or non-finite amounts are shown as zero.

    Examples:
        >>> format_currency(100000, 'IDR', locale='id')
        'Rp 100.000'
        >>> format_currency(1234.5, 'USD', locale='en')
        '$1,234.50'
    """
    if locale is None:
        locale = translation.get_language() or "id"

    decimal_places = 0 if currency in ZERO_DECIMAL_CURRENCIES else 2
    formatted_amount = format_number(
        _to_decimal(amount), decimal_places=decimal_places, locale=locale
    )

    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    if currency == "USD":
        return f"{symbol}{formatted_amount}"
    return f"{symbol} {formatted_amount}"
