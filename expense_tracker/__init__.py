"""Mini README: Core package initializer for the expense tracker.

The package is split into a ledger store, an undo/redo history, a filter
engine, currency helpers, CSV export and the interactive command layer used
by ``expense_cli``. Only the logger factory is re-exported here so importing
the package stays cheap.
"""

from .logging_utils import get_logger

__version__ = "1.0.0"

__all__ = ["get_logger", "__version__"]
