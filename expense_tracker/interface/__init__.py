"""Mini README: Interactive layer of the expense tracker.

``commands`` implements each CLI command on top of the store, history and
filter engine; ``prompts`` provides the console abstraction and the bounded
retry prompts for currency codes and exchange rates.
"""

from .commands import ExpenseCommands, parse_calendar_day, parse_expense_id
from .prompts import (
    MAX_PROMPT_ATTEMPTS,
    Console,
    TyperConsole,
    offer_reference_links,
    parse_positive_number,
    request_exchange_rate,
    resolve_currency_code,
)

__all__ = [
    "MAX_PROMPT_ATTEMPTS",
    "Console",
    "ExpenseCommands",
    "TyperConsole",
    "offer_reference_links",
    "parse_calendar_day",
    "parse_expense_id",
    "parse_positive_number",
    "request_exchange_rate",
    "resolve_currency_code",
]
