"""Mini README: Aggregations over filtered expenses.

Structure:
    * CurrencyTotal - amount spent in one currency.
    * total_by_currency - per-currency sums ordered for display.
    * unconverted_currencies - currencies that differ from the preference.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set

from .store import Expense


@dataclass(slots=True)
class CurrencyTotal:
    currency: str
    amount: float
    is_preferred: bool


def total_by_currency(expenses: Iterable[Expense], preferred_currency: Optional[str]) -> List[CurrencyTotal]:
    """Sum amounts per currency, preferred currency first and the rest alphabetical."""

    totals: Dict[str, float] = defaultdict(float)
    for expense in expenses:
        totals[expense.currency] += expense.amount
    ordered = sorted(totals, key=lambda code: (code != preferred_currency, code))
    return [
        CurrencyTotal(currency=code, amount=totals[code], is_preferred=code == preferred_currency)
        for code in ordered
    ]


def unconverted_currencies(expenses: Iterable[Expense], preferred_currency: str) -> List[str]:
    """Return the sorted set of currencies in ``expenses`` other than the preference."""

    found: Set[str] = {expense.currency for expense in expenses if expense.currency != preferred_currency}
    return sorted(found)
