"""Mini README: Export utilities for the expense tracker.

Exposes the CSV and PDF exporters used by the ``export`` command and the PDF
manual writer used by ``manual``. Both exporters receive the same filtered
list and labels.
"""

from .csv_exporter import CSV_HEADERS, CsvExporter
from .manual import MANUAL_FILENAME_PREFIX, ManualEntry, ManualOption, PdfManualWriter
from .pdf_exporter import PdfExporter

__all__ = [
    "CSV_HEADERS",
    "MANUAL_FILENAME_PREFIX",
    "CsvExporter",
    "ManualEntry",
    "ManualOption",
    "PdfExporter",
    "PdfManualWriter",
]
