"""Mini README: Exception hierarchy shared by the tracker components.

Structure:
    * ExpenseTrackerError - base class for every tracker specific failure.
    * InvalidInputError - user supplied values that fail validation.
    * FilterValidationError - invalid or conflicting list/total/export filters.
    * ExpenseNotFoundError - lookups for ids that are not in the ledger.
    * LedgerCorruptedError - the ledger record cannot be parsed.

The CLI turns ``InvalidInputError`` and ``LedgerCorruptedError`` into exit
code 1. ``ExpenseNotFoundError`` is informational and exits cleanly.
"""

from __future__ import annotations


class ExpenseTrackerError(Exception):
    """Base class for tracker errors."""


class InvalidInputError(ExpenseTrackerError, ValueError):
    """Raised when a command argument fails validation."""


class FilterValidationError(InvalidInputError):
    """Raised when filter options are malformed or mutually exclusive."""


class ExpenseNotFoundError(ExpenseTrackerError, LookupError):
    """Raised when no expense carries the requested id."""

    def __init__(self, expense_id: int) -> None:
        super().__init__(f"Expense with ID #{expense_id} not found.")
        self.expense_id = expense_id


class LedgerCorruptedError(ExpenseTrackerError):
    """Raised when the ledger record exists but cannot be parsed."""
