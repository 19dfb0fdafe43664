"""Mini README: Snapshot based undo/redo history for ledger commands.

Structure:
    * Snapshot - full copy of ledger and config tagged with a command name.
    * SnapshotStack - bounded stack that drops its oldest entry on overflow.
    * HistoryManager - persists the undo/redo stacks and moves state between them.

Every command that can change the ledger or the config calls
``begin_mutation`` (and ``clear_redo`` when it is a new user command) before
writing anything. Undo and redo exchange whole snapshots, so even a batch
currency conversion is reverted in a single step. Snapshots are copied on the
way into a stack and again on restore, which keeps stored history from ever
aliasing the live ledger objects.

Stacks live in ``undoStack.json`` and ``redoStack.json`` next to the ledger.
A stack record that cannot be parsed is treated as empty: history is lost,
ledger data is not.
"""

from __future__ import annotations

import copy
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Deque, Dict, Iterable, Iterator, List, Optional

from ..configuration import DataPaths
from ..ledger import Expense, LedgerConfig, LedgerStore
from ..logging_utils import get_logger
from ..utils import read_json, write_json_atomic

LOGGER = get_logger(__name__)

HISTORY_CAPACITY = 5


@dataclass
class Snapshot:
    """Point-in-time copy of the ledger and config."""

    command: str
    expenses: List[Expense] = field(default_factory=list)
    config: LedgerConfig = field(default_factory=LedgerConfig)

    def copy(self) -> "Snapshot":
        return copy.deepcopy(self)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "command": self.command,
            "data": [expense.as_dict() for expense in self.expenses],
            "config": self.config.as_dict(),
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Snapshot":
        return cls(
            command=str(payload["command"]),
            expenses=[Expense.from_dict(entry) for entry in payload.get("data") or []],
            config=LedgerConfig.from_dict(payload.get("config") or {}),
        )


class SnapshotStack:
    """Bounded LIFO of snapshots, ordered oldest first."""

    def __init__(self, snapshots: Iterable[Snapshot] = (), *, capacity: int = HISTORY_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("Stack capacity must be at least 1.")
        self.capacity = capacity
        self._items: Deque[Snapshot] = deque(maxlen=capacity)
        for snapshot in snapshots:
            self.push(snapshot)

    def push(self, snapshot: Snapshot) -> None:
        """Store a copy of ``snapshot``, evicting the oldest entry when full."""

        if len(self._items) == self.capacity:
            LOGGER.debug("History full; dropping oldest '%s' snapshot", self._items[0].command)
        self._items.append(snapshot.copy())

    def pop(self) -> Optional[Snapshot]:
        """Remove and return the newest snapshot, or ``None`` when empty."""

        return self._items.pop() if self._items else None

    def peek(self) -> Optional[Snapshot]:
        return self._items[-1] if self._items else None

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Snapshot]:
        return iter(self._items)

    def as_list(self) -> List[Dict[str, Any]]:
        return [snapshot.as_dict() for snapshot in self._items]


class HistoryManager:
    """Coordinate the undo and redo stacks around a ``LedgerStore``."""

    def __init__(self, store: LedgerStore, paths: DataPaths, *, capacity: int = HISTORY_CAPACITY) -> None:
        self.store = store
        self.paths = paths
        self.capacity = capacity

    def undo_stack(self) -> SnapshotStack:
        return self._load_stack(self.paths.undo_stack_file)

    def redo_stack(self) -> SnapshotStack:
        return self._load_stack(self.paths.redo_stack_file)

    def capture(self, command: str) -> Snapshot:
        """Snapshot the persisted ledger and config under ``command``."""

        return Snapshot(
            command=command,
            expenses=self.store.read_ledger(),
            config=self.store.read_config(),
        )

    def begin_mutation(self, command: str) -> None:
        """Push the current state onto the undo stack before ``command`` mutates it."""

        snapshot = self.capture(command)
        undo_stack = self.undo_stack()
        undo_stack.push(snapshot)
        self._save_stack(self.paths.undo_stack_file, undo_stack)
        LOGGER.info("Saved undo snapshot for '%s' (%s stored)", command, len(undo_stack))

    def clear_redo(self) -> None:
        """Invalidate redo history after a new user command."""

        self._save_stack(self.paths.redo_stack_file, SnapshotStack(capacity=self.capacity))
        LOGGER.debug("Redo history cleared")

    def record_command(self, command: str) -> None:
        """Snapshot for a new user command and invalidate redo history."""

        self.begin_mutation(command)
        self.clear_redo()

    def peek_undo(self) -> Optional[str]:
        snapshot = self.undo_stack().peek()
        return snapshot.command if snapshot else None

    def peek_redo(self) -> Optional[str]:
        snapshot = self.redo_stack().peek()
        return snapshot.command if snapshot else None

    def undo(self) -> Optional[str]:
        """Restore the most recent undo snapshot; ``None`` means nothing to undo."""

        return self._transfer(
            source_file=self.paths.undo_stack_file,
            target_file=self.paths.redo_stack_file,
            action="undo",
        )

    def redo(self) -> Optional[str]:
        """Re-apply the most recently undone command; ``None`` means nothing to redo."""

        return self._transfer(
            source_file=self.paths.redo_stack_file,
            target_file=self.paths.undo_stack_file,
            action="redo",
        )

    def _transfer(self, *, source_file: Path, target_file: Path, action: str) -> Optional[str]:
        source = self._load_stack(source_file)
        snapshot = source.pop()
        if snapshot is None:
            LOGGER.info("Nothing to %s", action)
            return None

        current = self.capture(snapshot.command)
        target = self._load_stack(target_file)
        target.push(current)

        self._save_stack(source_file, source)
        self._save_stack(target_file, target)
        self._restore(snapshot)
        LOGGER.info("Applied %s of '%s'", action, snapshot.command)
        return snapshot.command

    def _restore(self, snapshot: Snapshot) -> None:
        restored = snapshot.copy()
        self.store.write_ledger(restored.expenses)
        self.store.write_config(restored.config)

    def _load_stack(self, path: Path) -> SnapshotStack:
        if not path.exists():
            return SnapshotStack(capacity=self.capacity)
        try:
            payload = read_json(path)
            if not isinstance(payload, list):
                raise ValueError(f"{path.name} must hold a JSON array")
            snapshots = [Snapshot.from_dict(entry) for entry in payload]
        except (ValueError, KeyError, TypeError) as error:
            LOGGER.warning("History record %s is unreadable (%s); treating it as empty.", path, error)
            return SnapshotStack(capacity=self.capacity)
        return SnapshotStack(snapshots, capacity=self.capacity)

    def _save_stack(self, path: Path, stack: SnapshotStack) -> None:
        write_json_atomic(path, stack.as_list())
