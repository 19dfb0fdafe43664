"""Mini README: Currency conversion of recorded expenses.

Structure:
    * ConversionResult - how many expenses were touched and whether they were revalued.
    * convert_expenses - relabel (and optionally revalue) expenses in one currency.
    * change_preferred_currency - update the preference and its history log.

Conversions always start from ``original_amount`` so a chain of conversions
never compounds rounding. Without a rate the currency label is overwritten but
amounts are left as they are; callers must show ``ConversionResult.warning``
to the user when it is set. The logger only records it at INFO.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from ..ledger import CurrencyChange, Expense, LedgerConfig, now
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class ConversionResult:
    source_currency: str
    target_currency: str
    converted: int
    exchange_rate: Optional[float] = None

    @property
    def revalued(self) -> bool:
        return self.exchange_rate is not None

    @property
    def warning(self) -> Optional[str]:
        if self.revalued:
            return None
        return (
            f"No exchange rate provided. Expenses previously in {self.source_currency} will be "
            f"marked with {self.target_currency}, but their amounts will remain unchanged."
        )


def convert_expenses(
    expenses: Iterable[Expense],
    source_currency: str,
    target_currency: str,
    exchange_rate: Optional[float] = None,
) -> ConversionResult:
    """Move every expense recorded in ``source_currency`` to ``target_currency``."""

    if exchange_rate is not None and exchange_rate <= 0:
        raise ValueError("Exchange rate must be a positive number.")

    converted = 0
    for expense in expenses:
        if expense.currency != source_currency:
            continue
        expense.backfill_originals()
        if exchange_rate is not None:
            expense.amount = expense.effective_original_amount * exchange_rate
        expense.currency = target_currency
        converted += 1

    result = ConversionResult(
        source_currency=source_currency,
        target_currency=target_currency,
        converted=converted,
        exchange_rate=exchange_rate,
    )
    if result.warning:
        LOGGER.info(result.warning)
    LOGGER.info(
        "Converted %s expenses from %s to %s (rate=%s)",
        converted,
        source_currency,
        target_currency,
        exchange_rate,
    )
    return result


def change_preferred_currency(
    config: LedgerConfig,
    new_currency: str,
    exchange_rate: Optional[float] = None,
) -> Optional[str]:
    """Set the preferred currency, returning the previous one.

    A history entry is only appended when a previous preference existed and
    differs from ``new_currency``; setting the same code again is a no-op.
    """

    previous = config.preferred_currency
    if previous == new_currency:
        return previous
    if previous is not None:
        config.currency_history.append(
            CurrencyChange(
                date=now(),
                previous_preferred_currency=previous,
                new_preferred_currency=new_currency,
                exchange_rate=exchange_rate,
            )
        )
    config.preferred_currency = new_currency
    LOGGER.info("Preferred currency changed from %s to %s", previous, new_currency)
    return previous
