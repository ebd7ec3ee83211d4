# streetfood_connect/services/formatting.py
from datetime import datetime
from typing import Any, Optional

from streetfood_connect.config import settings


def format_currency(amount: Any, decimals: Optional[int] = None, symbol: Optional[str] = None) -> str:
    """
    Amount with the currency symbol and thousands grouping:
    125000 -> '₹125,000', 1234.5 -> '₹1,234.50'. Without `decimals`, whole
    amounts print no fraction.
    """
    try:
        value = float(amount or 0)
    except (TypeError, ValueError):
        value = 0.0
    if decimals is None:
        decimals = 0 if value.is_integer() else 2
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol if symbol is not None else settings.CURRENCY_SYMBOL}{abs(value):,.{decimals}f}"


def format_date(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    return str(value)
