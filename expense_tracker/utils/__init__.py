"""Mini README: Utility helpers for the expense tracker.

Exposes the JSON record helpers shared by the ledger store and the undo/redo
history so every persisted file is read and replaced the same way.
"""

from .json_files import read_json, write_json_atomic

__all__ = ["read_json", "write_json_atomic"]
