"""Mini README: Shared fixtures for the expense tracker test-suite.

Structure:
    * ScriptedConsole - Console double that replays canned answers.
    * paths / store / history / commands - components bound to ``tmp_path``.
    * make_expense - factory for ledger rows with explicit dates.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional, Tuple

import pytest

from expense_tracker.configuration import DataPaths, get_settings
from expense_tracker.history import HistoryManager
from expense_tracker.interface import ExpenseCommands
from expense_tracker.ledger import Expense, LedgerStore, ensure_data_files


class ScriptedConsole:
    """Console that records output and answers prompts from queues."""

    def __init__(
        self,
        answers: Iterable[str] = (),
        confirmations: Iterable[bool] = (),
        *,
        confirm_default: bool = True,
    ) -> None:
        self.answers: List[str] = list(answers)
        self.confirmations: List[bool] = list(confirmations)
        self.confirm_default = confirm_default
        self.messages: List[Tuple[str, str]] = []
        self.questions: List[str] = []

    def echo(self, message: str, *, style: str = "info") -> None:
        self.messages.append((style, message))

    def confirm(self, message: str) -> bool:
        self.questions.append(message)
        if self.confirmations:
            return self.confirmations.pop(0)
        return self.confirm_default

    def ask(self, message: str) -> str:
        self.questions.append(message)
        return self.answers.pop(0) if self.answers else ""

    @property
    def output(self) -> str:
        return "\n".join(message for _, message in self.messages)

    def styled(self, style: str) -> List[str]:
        return [message for message_style, message in self.messages if message_style == style]


def make_expense(
    expense_id: int,
    amount: float,
    when: datetime,
    *,
    currency: str = "USD",
    description: Optional[str] = None,
    deleted: bool = False,
) -> Expense:
    return Expense(
        id=expense_id,
        amount=amount,
        description=description or f"Expense {expense_id}",
        date=when,
        currency=currency,
        original_amount=amount,
        original_currency=currency,
        is_deleted=deleted,
        deleted_at=when if deleted else None,
    )


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def paths(tmp_path) -> DataPaths:
    data_paths = DataPaths(data_dir=tmp_path / "data")
    ensure_data_files(data_paths)
    return data_paths


@pytest.fixture
def store(paths) -> LedgerStore:
    return LedgerStore(paths)


@pytest.fixture
def history(store, paths) -> HistoryManager:
    return HistoryManager(store, paths)


@pytest.fixture
def console() -> ScriptedConsole:
    return ScriptedConsole()


@pytest.fixture
def commands(store, history, console, tmp_path) -> ExpenseCommands:
    return ExpenseCommands(
        store,
        history,
        console,
        default_currency="USD",
        export_dir=tmp_path / "exports",
    )
