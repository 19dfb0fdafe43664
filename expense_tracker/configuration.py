"""Mini README: Centralised configuration models and helpers for the tracker.

Structure:
    * ExpenseSettings - Pydantic settings model describing runtime configuration.
    * DataPaths - explicit value naming every persisted record.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    The CLI reads ``get_settings`` once per invocation and builds a
    ``DataPaths`` value that is handed to the ledger store and the history
    manager. Nothing else in the package looks up file locations on its own,
    so tests can point separate components at separate temporary directories.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LEDGER_FILENAME = "data.json"
CONFIG_FILENAME = "config.json"
UNDO_STACK_FILENAME = "undoStack.json"
REDO_STACK_FILENAME = "redoStack.json"


class ExpenseSettings(BaseSettings):
    """Runtime configuration for the expense tracker."""

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    data_dir: Path = Field(
        Path.home() / ".expense",
        description="Directory holding the ledger, config and undo/redo records.",
    )
    export_dir: Path = Field(
        Path.home() / "Downloads",
        description="Directory where CSV exports are written.",
    )
    default_currency: str = Field(
        "USD",
        description="Currency used for new expenses when no preference has been set.",
        min_length=3,
        max_length=3,
    )
    log_level: str = Field(
        "WARNING",
        description="Logging level for diagnostic output written to stderr.",
    )

    @field_validator("data_dir", mode="before")
    @classmethod
    def _expand_data_dir(cls, value: Optional[str | Path]) -> Path:
        """Ensure the data directory expands user paths and exists."""

        path = Path(value).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @field_validator("export_dir", mode="before")
    @classmethod
    def _expand_export_dir(cls, value: Optional[str | Path]) -> Path:
        return Path(value).expanduser().resolve()

    @field_validator("default_currency")
    @classmethod
    def _upper_currency(cls, value: str) -> str:
        return value.upper()


@dataclass(frozen=True)
class DataPaths:
    """Locations of the four JSON records that make up persisted state."""

    data_dir: Path

    @classmethod
    def from_settings(cls, settings: ExpenseSettings) -> "DataPaths":
        return cls(data_dir=settings.data_dir)

    @property
    def ledger_file(self) -> Path:
        return self.data_dir / LEDGER_FILENAME

    @property
    def config_file(self) -> Path:
        return self.data_dir / CONFIG_FILENAME

    @property
    def undo_stack_file(self) -> Path:
        return self.data_dir / UNDO_STACK_FILENAME

    @property
    def redo_stack_file(self) -> Path:
        return self.data_dir / REDO_STACK_FILENAME


@lru_cache()
def get_settings() -> ExpenseSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return ExpenseSettings()
