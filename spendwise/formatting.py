"""Formatting utilities for currency display."""

from __future__ import annotations

from typing import Union

from .config import CURRENCY_SYMBOL


def format_currency(amount: Union[float, int], include_sign: bool = True) -> str:
    """Format an amount the way the dashboard shows it.

    Whole amounts drop the decimals; anything else shows exactly two
    digits.  Negative amounts keep the minus sign in front of the symbol.

    Args:
        amount: The amount to format
        include_sign: Whether to prefix the currency symbol

    Returns:
        Formatted currency string (e.g., "₹1,250" or "₹99.50")

    Example:
        >>> format_currency(4500)
        '₹4,500'
        >>> format_currency(-12.5, include_sign=False)
        '-12.50'
    """
    value = float(amount)
    magnitude = abs(value)
    if magnitude == int(magnitude):
        formatted = f"{magnitude:,.0f}"
    else:
        formatted = f"{magnitude:,.2f}"
    if include_sign:
        formatted = f"{CURRENCY_SYMBOL}{formatted}"
    return f"-{formatted}" if value < 0 else formatted
