"""Mini README: Ledger persistence for the expense tracker.

This package owns the expense rows and the preferred-currency configuration.
``store`` reads and atomically replaces the JSON records; ``reports`` holds
the read-only aggregations used by the ``total`` command.
"""

from .reports import CurrencyTotal, total_by_currency, unconverted_currencies
from .store import (
    CurrencyChange,
    Expense,
    LedgerConfig,
    LedgerStore,
    ensure_data_files,
    find_expense,
    local_time,
    next_expense_id,
    now,
    parse_timestamp,
)

__all__ = [
    "CurrencyChange",
    "CurrencyTotal",
    "Expense",
    "LedgerConfig",
    "LedgerStore",
    "ensure_data_files",
    "find_expense",
    "local_time",
    "next_expense_id",
    "now",
    "parse_timestamp",
    "total_by_currency",
    "unconverted_currencies",
]
