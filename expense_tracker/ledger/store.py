"""Mini README: Persistent expense ledger and preferred-currency configuration.

Structure:
    * Expense - dataclass for one ledger row, with JSON helpers.
    * CurrencyChange - one entry of the append-only preference history.
    * LedgerConfig - preferred currency plus its change history.
    * LedgerStore - whole-record reads and atomic writes of ledger and config.
    * ensure_data_files / next_expense_id / find_expense - ledger helpers.

Records are stored as JSON with the camelCase keys used by earlier versions
of the tool, so existing data directories keep working. A ledger that cannot
be parsed is fatal because no safe default exists for financial data; a
broken config quietly falls back to defaults with a warning.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from ..configuration import DataPaths
from ..errors import ExpenseNotFoundError, LedgerCorruptedError
from ..logging_utils import get_logger
from ..utils import read_json, write_json_atomic

LOGGER = get_logger(__name__)


def now() -> datetime:
    """Current local time with its UTC offset attached."""

    return datetime.now().astimezone()


def local_time(moment: datetime) -> datetime:
    """Express an aware timestamp in local time; naive values pass through."""

    return moment.astimezone() if moment.tzinfo is not None else moment


def parse_timestamp(value: object) -> datetime:
    """Parse ISO strings (including a trailing ``Z``) or pass datetimes through."""

    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return datetime.fromisoformat(text)
    raise ValueError("Timestamps must be ISO strings or datetime instances.")


def _optional_timestamp(value: object) -> Optional[datetime]:
    return None if value in (None, "") else parse_timestamp(value)


@dataclass(slots=True)
class Expense:
    """A single ledger row."""

    id: int
    amount: float
    description: str
    date: datetime
    currency: str
    original_amount: Optional[float] = None
    original_currency: Optional[str] = None
    is_deleted: bool = False
    deleted_at: Optional[datetime] = None

    @property
    def effective_original_amount(self) -> float:
        return self.amount if self.original_amount is None else self.original_amount

    @property
    def effective_original_currency(self) -> str:
        return self.original_currency or self.currency

    def backfill_originals(self) -> None:
        """Record the current amount/currency as originals when they are absent."""

        if self.original_amount is None:
            self.original_amount = self.amount
        if self.original_currency is None:
            self.original_currency = self.currency

    def as_dict(self) -> Dict[str, Any]:
        """Export the expense with serialisable values."""

        return {
            "id": self.id,
            "amount": self.amount,
            "description": self.description,
            "date": self.date.isoformat(),
            "currency": self.currency,
            "originalAmount": self.original_amount,
            "originalCurrency": self.original_currency,
            "isDeleted": self.is_deleted,
            "deletedAt": self.deleted_at.isoformat() if self.deleted_at else None,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Expense":
        original_amount = payload.get("originalAmount")
        return cls(
            id=int(payload["id"]),
            amount=float(payload["amount"]),
            description=str(payload["description"]),
            date=parse_timestamp(payload["date"]),
            currency=str(payload["currency"]),
            original_amount=None if original_amount is None else float(original_amount),
            original_currency=payload.get("originalCurrency"),
            is_deleted=bool(payload.get("isDeleted", False)),
            deleted_at=_optional_timestamp(payload.get("deletedAt")),
        )


@dataclass(slots=True)
class CurrencyChange:
    """A recorded change of the preferred currency."""

    date: datetime
    previous_preferred_currency: str
    new_preferred_currency: str
    exchange_rate: Optional[float] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "previousPreferredCurrency": self.previous_preferred_currency,
            "newPreferredCurrency": self.new_preferred_currency,
            "exchangeRate": self.exchange_rate,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "CurrencyChange":
        rate = payload.get("exchangeRate")
        return cls(
            date=parse_timestamp(payload["date"]),
            previous_preferred_currency=str(payload["previousPreferredCurrency"]),
            new_preferred_currency=str(payload["newPreferredCurrency"]),
            exchange_rate=None if rate is None else float(rate),
        )


@dataclass(slots=True)
class LedgerConfig:
    """Preferred currency and the log of how it changed over time."""

    preferred_currency: Optional[str] = None
    currency_history: List[CurrencyChange] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "preferredCurrency": self.preferred_currency,
            "currencyHistory": [change.as_dict() for change in self.currency_history],
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "LedgerConfig":
        if not isinstance(payload, dict):
            raise ValueError("Config record must be a JSON object.")
        history = payload.get("currencyHistory") or []
        return cls(
            preferred_currency=payload.get("preferredCurrency"),
            currency_history=[CurrencyChange.from_dict(entry) for entry in history],
        )


def ensure_data_files(paths: DataPaths) -> None:
    """Create the data directory and any missing record with its default value."""

    paths.data_dir.mkdir(parents=True, exist_ok=True)
    defaults = {
        paths.ledger_file: [],
        paths.config_file: LedgerConfig().as_dict(),
        paths.undo_stack_file: [],
        paths.redo_stack_file: [],
    }
    for path, payload in defaults.items():
        if not path.exists():
            LOGGER.debug("Creating missing record %s", path)
            write_json_atomic(path, payload)


def next_expense_id(expenses: Iterable[Expense]) -> int:
    """Return ``max(existing ids) + 1``, or 1 for an empty ledger."""

    return max((expense.id for expense in expenses), default=0) + 1


def find_expense(expenses: Iterable[Expense], expense_id: int) -> Expense:
    """Retrieve an expense by id, raising informative errors when missing."""

    for expense in expenses:
        if expense.id == expense_id:
            return expense
    raise ExpenseNotFoundError(expense_id)


class LedgerStore:
    """Read and replace the ledger and config records of one data directory."""

    def __init__(self, paths: DataPaths) -> None:
        self.paths = paths

    def read_ledger(self) -> List[Expense]:
        """Load every expense; an unparseable ledger raises ``LedgerCorruptedError``."""

        path = self.paths.ledger_file
        if not path.exists():
            return []
        try:
            payload = read_json(path)
            if not isinstance(payload, list):
                raise ValueError("Ledger record must be a JSON array.")
            return [Expense.from_dict(entry) for entry in payload]
        except (ValueError, KeyError, TypeError) as error:
            LOGGER.error("Ledger record %s is unreadable: %s", path, error)
            raise LedgerCorruptedError(
                f"The expense ledger at {path} is corrupted and cannot be read: {error}"
            ) from error

    def write_ledger(self, expenses: Iterable[Expense]) -> None:
        payload = [expense.as_dict() for expense in expenses]
        write_json_atomic(self.paths.ledger_file, payload)
        LOGGER.debug("Ledger saved with %s expenses", len(payload))

    def read_config(self) -> LedgerConfig:
        """Load the config, falling back to defaults when the record is broken."""

        path = self.paths.config_file
        if not path.exists():
            return LedgerConfig()
        try:
            return LedgerConfig.from_dict(read_json(path))
        except (ValueError, KeyError, TypeError) as error:
            LOGGER.warning("Config record %s is unreadable (%s); using defaults.", path, error)
            return LedgerConfig()

    def write_config(self, config: LedgerConfig) -> None:
        write_json_atomic(self.paths.config_file, config.as_dict())
        LOGGER.debug("Config saved with preferred currency %s", config.preferred_currency)
