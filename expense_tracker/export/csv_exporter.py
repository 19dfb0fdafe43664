"""Mini README: Export filtered expenses to CSV files.

Structure:
    * CSV_HEADERS - column order of every export.
    * CsvExporter - serialises expenses into CSV and names export files.

The exporter receives an already filtered list together with the labels
derived from the filters, so export files always agree with what ``list``
and ``total`` show for the same options.
"""

from __future__ import annotations

import csv
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from ..filtering import ExportLabels
from ..ledger import Expense, local_time, now
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

CSV_HEADERS = [
    "Expense ID",
    "Converted Amount",
    "Converted Currency",
    "Original Amount",
    "Original Currency",
    "Description",
    "Date",
    "Is Deleted",
    "Deleted At",
]


def format_day(moment: datetime) -> str:
    """Render a timestamp as ``DD/MM/YYYY``."""

    return local_time(moment).strftime("%d/%m/%Y")


def expense_row(expense: Expense) -> List[str]:
    return [
        str(expense.id),
        f"{expense.amount:.2f}",
        expense.currency,
        f"{expense.effective_original_amount:.2f}",
        expense.effective_original_currency,
        expense.description,
        format_day(expense.date),
        "Yes" if expense.is_deleted else "No",
        expense.deleted_at.isoformat() if expense.deleted_at else "",
    ]


class CsvExporter:
    """Persist expense listings to CSV files."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._clock = clock or now

    def export(self, expenses: Sequence[Expense], destination: Path) -> Path:
        """Write ``expenses`` to ``destination`` and return the path."""

        LOGGER.info("Exporting %s expenses to %s", len(expenses), destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        with destination.open("w", encoding="utf-8", newline="") as csv_file:
            writer = csv.writer(csv_file)
            writer.writerow(CSV_HEADERS)
            for expense in expenses:
                writer.writerow(expense_row(expense))
        return destination

    def export_filtered(
        self,
        expenses: Sequence[Expense],
        labels: ExportLabels,
        *,
        output_directory: Path,
    ) -> Path:
        """Export into ``output_directory`` using a timestamped, label based name."""

        stamp = int(self._clock().timestamp() * 1000)
        destination = output_directory / f"{labels.filename_label}_{stamp}.csv"
        return self.export(expenses, destination)
