"""
Monetary precision helpers.

All order arithmetic is done on Decimals and quantized to the currency's
minor unit with banker's rounding (ROUND_HALF_EVEN). Floats never enter a
price calculation; anything that arrives as a float is converted through str.
"""

from decimal import Decimal, ROUND_HALF_EVEN, InvalidOperation
from typing import Union

from django.conf import settings

# Currency minor unit exponents (how many decimal places)
CURRENCY_EXPONENT = {
    "INR": 2,  # Indian Rupee (paise)
    "USD": 2,
    "EUR": 2,
    "GBP": 2,
    "AED": 2,
    "JPY": 0,
    "KWD": 3,
}

CURRENCY_SYMBOLS = {
    "INR": "₹",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
}

ZERO = Decimal("0.00")


def default_currency() -> str:
    return getattr(settings, "CURRENCY", "INR")


def currency_exponent(currency: str) -> int:
    """
    Get the number of decimal places for a currency.

    Examples:
        >>> currency_exponent("INR")
        2
        >>> currency_exponent("JPY")
        0
    """
    return CURRENCY_EXPONENT.get(currency.upper(), 2)


def quantize_decimal(currency: str) -> Decimal:
    """Smallest unit of the currency, e.g. Decimal('0.01') for INR."""
    return Decimal(10) ** -currency_exponent(currency)


def to_decimal(amount: Union[Decimal, str, int, float]) -> Decimal:
    """
    Convert any numeric input to Decimal.

    Raises:
        InvalidOperation: if the value cannot be parsed as a number
    """
    if isinstance(amount, Decimal):
        return amount
    if isinstance(amount, bool):
        raise InvalidOperation(f"Boolean is not a monetary amount: {amount!r}")
    if isinstance(amount, float):
        # Convert float to string first to avoid binary precision artifacts
        amount = str(amount)
    return Decimal(str(amount).strip())


def quantize(currency: str, amount: Union[Decimal, str, int, float]) -> Decimal:
    """
    Round to currency decimals using banker's rounding (ROUND_HALF_EVEN).

    Examples:
        >>> quantize("INR", "10.125")
        Decimal('10.12')
        >>> quantize("INR", 359)
        Decimal('359.00')
    """
    return to_decimal(amount).quantize(quantize_decimal(currency), rounding=ROUND_HALF_EVEN)


def format_money(currency: str, amount: Union[Decimal, str, int]) -> str:
    """
    Format an amount for receipts and refund messages.

    Examples:
        >>> format_money("INR", Decimal("1077"))
        '₹1,077.00'
    """
    value = quantize(currency, amount)
    symbol = CURRENCY_SYMBOLS.get(currency.upper())
    if symbol is None:
        symbol = getattr(settings, "CURRENCY_SYMBOL", None) or f"{currency} "

    exponent = currency_exponent(currency)
    if exponent == 0:
        return f"{symbol}{value:,.0f}"
    return f"{symbol}{value:,.{exponent}f}"
