"""Mini README: Scenario tests for the command layer.

Structure:
    * add / delete / recover / undo - the everyday lifecycle of an expense.
    * edit - partial updates, no-op detection and re-denominated originals.
    * change_currency / total - conversion flows and their single-step undo.
    * export / manual - CSV and PDF output named after the active filters.
"""

from __future__ import annotations

import csv
from datetime import datetime

import pytest

from expense_tracker.errors import ExpenseNotFoundError, FilterValidationError, InvalidInputError
from expense_tracker.filtering import FilterCriteria
from expense_tracker.ledger import LedgerConfig

from conftest import ScriptedConsole, make_expense

ALL = FilterCriteria()


def test_lifecycle_with_soft_delete_and_undo(commands, store) -> None:
    """Add, delete, recover and then unwind everything with undo."""

    commands.add("10", ["Coffee", "beans"])
    assert commands.delete("1") is True
    assert commands.list_expenses(ALL) == []
    assert [expense.id for expense in commands.list_expenses(ALL, include_deleted=True)] == [1]

    assert commands.recover("1") is True
    (listed,) = commands.list_expenses(ALL)
    assert listed.description == "Coffee beans"
    assert listed.is_deleted is False and listed.deleted_at is None

    assert commands.undo() == "recover"
    assert commands.undo() == "delete"
    assert commands.undo() == "add"
    assert store.read_ledger() == []
    assert commands.undo() is None


def test_add_uses_preferred_currency_and_sets_originals(commands, store) -> None:
    store.write_config(LedgerConfig(preferred_currency="BDT"))

    expense = commands.add("250.5", ["Groceries"])

    assert expense.currency == "BDT"
    assert (expense.original_amount, expense.original_currency) == (250.5, "BDT")
    assert expense.date.tzinfo is not None


@pytest.mark.parametrize(("amount", "words"), [("abc", ["Lunch"]), ("-3", ["Lunch"]), ("5", ["  "])])
def test_rejected_add_leaves_no_history(commands, history, store, amount, words) -> None:
    with pytest.raises(InvalidInputError):
        commands.add(amount, words)

    assert history.peek_undo() is None
    assert store.read_ledger() == []


def test_ids_are_never_reused_after_delete(commands) -> None:
    commands.add("1", ["First"])
    commands.add("2", ["Second"])
    commands.delete("2")

    assert commands.add("3", ["Third"]).id == 3


def test_unknown_and_malformed_ids(commands) -> None:
    with pytest.raises(ExpenseNotFoundError, match="#7"):
        commands.delete("7")
    with pytest.raises(InvalidInputError):
        commands.recover("abc")


def test_cancelled_delete_changes_nothing(commands, store, history, console) -> None:
    commands.add("4", ["Snack"])
    console.confirmations = [False]

    assert commands.delete("1") is False
    assert store.read_ledger()[0].is_deleted is False
    assert history.peek_undo() == "add"


def test_deleting_twice_is_informational(commands, console) -> None:
    commands.add("4", ["Snack"])
    commands.delete("1")

    assert commands.delete("1") is False
    assert "Expense #1 is already marked as deleted." in console.styled("warning")


def test_edit_without_options_or_changes(commands, console, history) -> None:
    commands.add("12", ["Lunch"])

    assert commands.edit("1") is None
    assert commands.edit("1", amount="12", description="Lunch") is None
    assert "No changes detected or applied." in console.styled("warning")
    assert history.peek_undo() == "add"


def test_edit_currency_resets_originals(commands) -> None:
    commands.add("12", ["Lunch"])

    edited = commands.edit("1", amount="20", currency="eur", description="Team lunch")

    assert (edited.amount, edited.currency, edited.description) == (20.0, "EUR", "Team lunch")
    assert (edited.original_amount, edited.original_currency) == (20.0, "EUR")
    assert commands.history.peek_undo() == "edit"


def test_edit_amount_only_keeps_originals(commands) -> None:
    commands.add("12", ["Lunch"])

    edited = commands.edit("1", amount="15")

    assert edited.amount == 15.0
    assert edited.original_amount == 12.0


def test_edit_date_keeps_time_of_day(commands, store) -> None:
    store.write_ledger([make_expense(1, 5.0, datetime(2025, 7, 29, 18, 45))])

    edited = commands.edit("1", day="2025-07-01")

    assert edited.date == datetime(2025, 7, 1, 18, 45)
    with pytest.raises(InvalidInputError):
        commands.edit("1", day="01/07/2025")


def test_reset_is_reversible(commands, store) -> None:
    commands.add("1", ["One"])
    commands.add("2", ["Two"])

    assert commands.reset() is True
    assert store.read_ledger() == []

    commands.undo()
    assert len(store.read_ledger()) == 2


def test_first_currency_choice_has_no_history(commands, store, console) -> None:
    assert commands.change_currency("usd") is True

    config = store.read_config()
    assert config.preferred_currency == "USD"
    assert config.currency_history == []
    assert console.questions == []


def test_change_currency_converts_past_expenses(store, history, tmp_path) -> None:
    store.write_config(LedgerConfig(preferred_currency="USD"))
    store.write_ledger(
        [
            make_expense(1, 10.0, datetime(2025, 7, 1), currency="USD"),
            make_expense(2, 7.0, datetime(2025, 7, 2), currency="JPY"),
        ]
    )
    console = ScriptedConsole(answers=["0.5"], confirmations=[True])
    from expense_tracker.interface import ExpenseCommands

    commands = ExpenseCommands(store, history, console, export_dir=tmp_path)

    assert commands.change_currency("EUR") is True

    first, second = store.read_ledger()
    assert (first.amount, first.currency, first.original_currency) == (5.0, "EUR", "USD")
    assert (second.amount, second.currency) == (7.0, "JPY")
    (change,) = store.read_config().currency_history
    assert change.exchange_rate == 0.5

    # One undo reverts the preference and every converted row together.
    commands.undo()
    assert store.read_config().preferred_currency == "USD"
    assert store.read_ledger()[0].currency == "USD"


def test_failed_rate_still_changes_preference(store, history, tmp_path) -> None:
    store.write_config(LedgerConfig(preferred_currency="USD"))
    store.write_ledger([make_expense(1, 10.0, datetime(2025, 7, 1), currency="USD")])
    console = ScriptedConsole(answers=["x", "y", "z"], confirmations=[True])
    from expense_tracker.interface import ExpenseCommands

    commands = ExpenseCommands(store, history, console, export_dir=tmp_path)
    commands.change_currency("GBP")

    assert store.read_config().preferred_currency == "GBP"
    assert store.read_ledger()[0].currency == "USD"
    assert "Conversion of past expenses aborted." in console.styled("error")


def test_same_currency_is_a_no_op(commands, store, history) -> None:
    store.write_config(LedgerConfig(preferred_currency="USD"))

    assert commands.change_currency("USD") is False
    assert history.peek_undo() is None


def test_total_converts_only_filtered_expenses(store, history, tmp_path) -> None:
    store.write_config(LedgerConfig(preferred_currency="USD"))
    store.write_ledger(
        [
            make_expense(1, 10.0, datetime(2025, 7, 1), currency="USD"),
            make_expense(2, 100.0, datetime(2025, 7, 2), currency="JPY"),
            make_expense(3, 200.0, datetime(2025, 6, 2), currency="JPY"),
        ]
    )
    console = ScriptedConsole(answers=["0.01"], confirmations=[True])
    from expense_tracker.interface import ExpenseCommands

    commands = ExpenseCommands(store, history, console, export_dir=tmp_path)
    totals = commands.total(FilterCriteria(month=7, year=2025))

    assert [(total.currency, total.amount) for total in totals] == [("USD", pytest.approx(11.0))]
    rows = {expense.id: expense for expense in store.read_ledger()}
    assert rows[2].currency == "USD"
    assert rows[3].currency == "JPY"
    assert history.peek_undo() == "currency-conversion"

    commands.undo()
    assert store.read_ledger()[1].currency == "JPY"


def test_total_declined_conversion_keeps_currencies(commands, store, console, history) -> None:
    store.write_config(LedgerConfig(preferred_currency="USD"))
    store.write_ledger(
        [
            make_expense(1, 10.0, datetime(2025, 7, 1), currency="USD"),
            make_expense(2, 5.0, datetime(2025, 7, 2), currency="EUR"),
        ]
    )
    console.confirmations = [False]

    totals = commands.total(ALL)

    assert [total.currency for total in totals] == ["USD", "EUR"]
    assert totals[0].is_preferred
    assert history.peek_undo() is None


def test_invalid_filters_abort_queries(commands) -> None:
    with pytest.raises(FilterValidationError):
        commands.list_expenses(FilterCriteria(week=3))
    with pytest.raises(FilterValidationError):
        commands.export(FilterCriteria(date="2025-07-29", day="Tuesday"))


def test_export_writes_labelled_csv(commands, store, tmp_path) -> None:
    store.write_ledger(
        [
            make_expense(1, 10.0, datetime(2025, 7, 29, 9, 0), description="Books"),
            make_expense(2, 3.0, datetime(2025, 6, 1, 9, 0)),
        ]
    )
    opened = []
    commands.launcher = opened.append

    (path,) = commands.export(FilterCriteria(month=7, year=2025), csv=True, open_file=True)

    assert path.parent == tmp_path / "exports"
    assert path.name.startswith("Expense_July_2025_")
    with path.open(newline="", encoding="utf-8") as handle:
        rows = list(csv.reader(handle))
    assert rows[0][0] == "Expense ID"
    assert rows[1][:3] == ["1", "10.00", "USD"]
    assert rows[1][5:8] == ["Books", "29/07/2025", "No"]
    assert len(rows) == 2
    assert opened == [str(path)]


def test_new_command_after_undo_clears_redo(commands, console) -> None:
    commands.add("1", ["One"])
    commands.undo()
    commands.add("2", ["Two"])

    assert commands.redo() is None
    assert any(message.startswith("Nothing to redo") for message in console.styled("warning"))


def test_first_run_setup_stores_currency(commands, store, console) -> None:
    console.answers = ["eur"]

    assert commands.ensure_preferred_currency() is True
    assert store.read_config().preferred_currency == "EUR"
    assert commands.ensure_preferred_currency() is True


def test_first_run_setup_can_be_cancelled(commands, store, console) -> None:
    console.answers = [""]

    assert commands.ensure_preferred_currency() is False
    assert store.read_config().preferred_currency is None


def test_export_requires_a_format(commands, store, console, tmp_path) -> None:
    store.write_ledger([make_expense(1, 10.0, datetime(2025, 7, 29, 9, 0))])

    assert commands.export(ALL) == []
    assert "Please specify an export format: --pdf or --csv." in console.styled("warning")
    assert not (tmp_path / "exports").exists()


def test_export_pdf_and_csv_together(commands, store) -> None:
    store.write_config(LedgerConfig(preferred_currency="EUR"))
    store.write_ledger(
        [
            make_expense(1, 10.0, datetime(2025, 7, 29, 9, 0), currency="EUR", description="Café ☕ with friends"),
            make_expense(2, 3.0, datetime(2025, 7, 1, 9, 0), currency="EUR", deleted=True),
        ]
    )
    opened = []
    commands.launcher = opened.append

    written = commands.export(
        FilterCriteria(month=7, year=2025),
        csv=True,
        pdf=True,
        include_deleted=True,
        open_file=True,
    )

    assert [path.suffix for path in written] == [".csv", ".pdf"]
    assert all(path.name.startswith("Expense_July_2025_") for path in written)
    assert written[1].read_bytes().startswith(b"%PDF-")
    assert opened == [str(path) for path in written]


def test_manual_is_written_to_export_dir(commands, tmp_path) -> None:
    from expense_tracker.export import ManualEntry, ManualOption

    entries = [
        ManualEntry(
            name="add",
            description="Add a new expense.",
            usage="expense add <amount> <description>... [options]",
            aliases=("a",),
            options=(ManualOption("--currency, -c", "Currency code."),),
            example='expense add 50 "Groceries"',
        )
    ]

    path = commands.manual(entries, global_options=[ManualOption("--help", "Show this message and exit.")])

    assert path.parent == tmp_path / "exports"
    assert path.name.startswith("expenses-tracker-cli-manual_")
    assert path.read_bytes().startswith(b"%PDF-")
