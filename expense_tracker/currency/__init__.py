"""Mini README: Currency helpers for the expense tracker.

``codes`` validates and suggests ISO 4217 codes; ``conversion`` relabels and
revalues recorded expenses and tracks preferred-currency changes.
"""

from .codes import CURRENCIES, currency_name, is_valid_currency, suggest_currency
from .conversion import ConversionResult, change_preferred_currency, convert_expenses

__all__ = [
    "CURRENCIES",
    "ConversionResult",
    "change_preferred_currency",
    "convert_expenses",
    "currency_name",
    "is_valid_currency",
    "suggest_currency",
]
