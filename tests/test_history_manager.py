"""Mini README: Tests for the snapshot undo/redo history.

Structure:
    * SnapshotStack behaviour - capacity eviction and copy-on-push.
    * HistoryManager behaviour - exact restore, redo invalidation and
      tolerance of unreadable stack records.
"""

from __future__ import annotations

from datetime import datetime

from expense_tracker.history import HISTORY_CAPACITY, Snapshot, SnapshotStack
from expense_tracker.ledger import LedgerConfig

from conftest import make_expense


def _add_row(store, history, expense_id: int) -> None:
    history.record_command("add")
    rows = store.read_ledger()
    rows.append(make_expense(expense_id, float(expense_id), datetime(2025, 7, expense_id, 10, 0)))
    store.write_ledger(rows)


def test_stack_evicts_oldest_snapshot_when_full() -> None:
    stack = SnapshotStack(capacity=HISTORY_CAPACITY)
    for index in range(HISTORY_CAPACITY + 2):
        stack.push(Snapshot(command=f"cmd-{index}"))

    assert len(stack) == HISTORY_CAPACITY
    assert [snapshot.command for snapshot in stack] == [f"cmd-{index}" for index in range(2, 7)]
    assert stack.pop().command == "cmd-6"


def test_stack_push_stores_an_independent_copy() -> None:
    """Mutating the live list after a push must not leak into history."""

    rows = [make_expense(1, 10.0, datetime(2025, 1, 1))]
    stack = SnapshotStack()
    stack.push(Snapshot(command="add", expenses=rows, config=LedgerConfig()))

    rows[0].amount = 999.0

    assert stack.peek().expenses[0].amount == 10.0


def test_undo_and_redo_restore_exact_state(store, history) -> None:
    _add_row(store, history, 1)
    after_add = store.read_ledger()

    assert history.undo() == "add"
    assert store.read_ledger() == []
    assert history.peek_redo() == "add"

    assert history.redo() == "add"
    assert store.read_ledger() == after_add
    assert history.peek_undo() == "add"


def test_undo_restores_config_alongside_ledger(store, history) -> None:
    store.write_config(LedgerConfig(preferred_currency="USD"))
    history.record_command("change-currency")
    store.write_config(LedgerConfig(preferred_currency="EUR"))

    history.undo()

    assert store.read_config().preferred_currency == "USD"


def test_only_five_steps_can_be_undone(store, history) -> None:
    for expense_id in range(1, 8):
        _add_row(store, history, expense_id)

    undone = 0
    while history.undo() is not None:
        undone += 1

    assert undone == HISTORY_CAPACITY
    assert [expense.id for expense in store.read_ledger()] == [1, 2]


def test_new_command_clears_redo_history(store, history) -> None:
    _add_row(store, history, 1)
    history.undo()
    assert history.peek_redo() == "add"

    _add_row(store, history, 2)

    assert history.peek_redo() is None
    assert history.redo() is None


def test_empty_history_reports_nothing(store, history) -> None:
    store.write_ledger([make_expense(1, 5.0, datetime(2025, 2, 2))])

    assert history.undo() is None
    assert history.redo() is None
    assert [expense.id for expense in store.read_ledger()] == [1]


def test_unreadable_stack_is_treated_as_empty(paths, history, caplog) -> None:
    paths.undo_stack_file.write_text("not json at all")

    with caplog.at_level("WARNING"):
        assert history.undo() is None

    assert "treating it as empty" in caplog.text


def test_stacks_persist_across_manager_instances(store, paths, history) -> None:
    from expense_tracker.history import HistoryManager

    _add_row(store, history, 1)

    fresh = HistoryManager(store, paths)
    assert fresh.peek_undo() == "add"
    assert fresh.undo() == "add"
    assert store.read_ledger() == []
