"""Mini README: Undo/redo history for the expense tracker.

The `manager` module contains the snapshot type, the bounded stack and the
manager that persists both stacks beside the ledger.
"""

from .manager import HISTORY_CAPACITY, HistoryManager, Snapshot, SnapshotStack

__all__ = ["HISTORY_CAPACITY", "HistoryManager", "Snapshot", "SnapshotStack"]
