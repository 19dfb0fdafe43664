"""Mini README: Export filtered expenses to a PDF receipt.

Structure:
    * PagedDocument - ``fpdf2`` document with a "Page i of n" footer.
    * pdf_text - reduce text to what the core PDF fonts can encode.
    * PdfExporter - renders the receipt table and names export files.

The receipt mirrors the CSV export: same filtered rows, same nine columns and
the same label based filename, with the title taken from
``ExportLabels.title_label``. Long descriptions wrap inside their cell and
the column headings repeat on every page.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from ..filtering import ExportLabels
from ..ledger import Expense, now
from ..logging_utils import get_logger
from .csv_exporter import format_day

LOGGER = get_logger(__name__)

PAGE_MARGIN = 50
FOOTER_MARGIN = 30
COLUMN_WIDTHS = (30, 60, 50, 60, 50, 85, 75, 40, 75)


def pdf_text(value: object) -> str:
    """Replace characters outside Latin-1, which core fonts cannot encode."""

    return str(value).encode("latin-1", "replace").decode("latin-1")


class PagedDocument(FPDF):
    """A4 portrait document in points with numbered pages."""

    def __init__(self) -> None:
        super().__init__(orientation="P", unit="pt", format="A4")
        self.set_margins(PAGE_MARGIN, PAGE_MARGIN, PAGE_MARGIN)
        self.set_auto_page_break(auto=True, margin=FOOTER_MARGIN + 20)

    def footer(self) -> None:
        self.set_y(-FOOTER_MARGIN)
        self.set_font("Helvetica", size=8)
        self.set_text_color(128, 128, 128)
        self.cell(0, 10, f"Page {self.page_no()} of {{nb}}", align="R")


def receipt_headings(preferred_currency: str) -> List[str]:
    return [
        "ID",
        f"Converted Amount\n({preferred_currency})",
        "Converted\nCurrency",
        "Original\nAmount",
        "Original\nCurrency",
        "Description",
        "Date",
        "Deleted?",
        "Deleted At",
    ]


def receipt_row(expense: Expense) -> List[str]:
    return [
        str(expense.id),
        f"{expense.amount:.2f}",
        expense.currency,
        f"{expense.effective_original_amount:.2f}",
        expense.effective_original_currency,
        pdf_text(expense.description),
        format_day(expense.date),
        "Yes" if expense.is_deleted else "No",
        format_day(expense.deleted_at) if expense.deleted_at else "",
    ]


class PdfExporter:
    """Persist expense listings as PDF receipts."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._clock = clock or now

    def export(
        self,
        expenses: Sequence[Expense],
        destination: Path,
        *,
        title: str,
        preferred_currency: str,
    ) -> Path:
        """Render ``expenses`` into ``destination`` and return the path."""

        LOGGER.info("Exporting %s expenses to %s", len(expenses), destination)
        document = PagedDocument()
        document.add_page()
        document.set_font("Helvetica", style="B", size=18)
        document.cell(0, 24, pdf_text(f"Expense Receipt for {title}"), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        document.ln(16)

        document.set_font("Helvetica", size=8)
        with document.table(col_widths=COLUMN_WIDTHS, text_align="LEFT", line_height=12) as table:
            heading = table.row()
            for text in receipt_headings(preferred_currency):
                heading.cell(text)
            for expense in expenses:
                row = table.row()
                for text in receipt_row(expense):
                    row.cell(text)

        destination.parent.mkdir(parents=True, exist_ok=True)
        document.output(str(destination))
        return destination

    def export_filtered(
        self,
        expenses: Sequence[Expense],
        labels: ExportLabels,
        *,
        output_directory: Path,
        preferred_currency: str,
    ) -> Path:
        """Export into ``output_directory`` using a timestamped, label based name."""

        stamp = int(self._clock().timestamp() * 1000)
        destination = output_directory / f"{labels.filename_label}_{stamp}.pdf"
        return self.export(
            expenses,
            destination,
            title=labels.title_label,
            preferred_currency=preferred_currency,
        )
