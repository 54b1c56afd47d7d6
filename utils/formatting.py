"""
Formatting utilities.
"""

import math
from typing import Union

Number = Union[int, float]


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def format_currency(amount: Number, currency: str = "USD") -> str:
    """
    Format an amount as whole-unit currency.

    Args:
        amount: The amount in whole units (e.g., dollars, not cents).
        currency: Currency code (default USD).

    Returns:
        Formatted currency string, e.g. "$432,500" or "-$2,000".
    """
    symbols = {
        "USD": "$",
        "GBP": "£",
        "EUR": "€",
    }
    symbol = symbols.get(currency, currency + " ")
    whole = round_half_up(amount)
    sign = "-" if whole < 0 else ""
    return f"{sign}{symbol}{abs(whole):,}"

