"""Mini README: PDF manual describing every CLI command.

Structure:
    * ManualOption / ManualEntry - plain description of one command.
    * PdfManualWriter - lays the entries out with ``fpdf2``.

The writer knows nothing about typer. The CLI turns its registered commands
into ``ManualEntry`` values, so the manual always matches the installed
commands and options.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Sequence, Tuple

from fpdf.enums import XPos, YPos

from ..ledger import now
from ..logging_utils import get_logger
from .pdf_exporter import PagedDocument, pdf_text

LOGGER = get_logger(__name__)

MANUAL_FILENAME_PREFIX = "expenses-tracker-cli-manual"
MANUAL_TITLE = "expenses-tracker-cli Manual"
MANUAL_INTRODUCTION = (
    "This manual provides a comprehensive guide to all commands and options "
    "available in the Expense Tracker CLI."
)


@dataclass(frozen=True)
class ManualOption:
    flags: str
    description: str


@dataclass(frozen=True)
class ManualEntry:
    """Name, usage and options of one command as shown in the manual."""

    name: str
    description: str
    usage: str
    aliases: Tuple[str, ...] = ()
    options: Tuple[ManualOption, ...] = field(default_factory=tuple)
    example: Optional[str] = None

    @property
    def heading(self) -> str:
        return f"{self.name} ({', '.join(self.aliases)})" if self.aliases else self.name


class PdfManualWriter:
    """Render ``ManualEntry`` values into a timestamped PDF."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._clock = clock or now

    def write(
        self,
        entries: Sequence[ManualEntry],
        *,
        output_directory: Path,
        global_options: Sequence[ManualOption] = (),
    ) -> Path:
        stamp = int(self._clock().timestamp() * 1000)
        destination = output_directory / f"{MANUAL_FILENAME_PREFIX}_{stamp}.pdf"
        LOGGER.info("Writing manual with %s commands to %s", len(entries), destination)

        document = PagedDocument()
        document.add_page()
        self._line(document, MANUAL_TITLE, size=24, style="B", height=30)
        self._line(document, MANUAL_INTRODUCTION, size=10, color=(51, 51, 51))
        document.ln(12)

        if global_options:
            self._line(document, "Global Options:", size=16, style="B", height=20)
            for option in global_options:
                self._line(document, f"{option.flags}: {option.description}", size=10, indent=10)
            document.ln(12)

        self._line(document, "Commands:", size=16, style="B", height=20)
        for entry in entries:
            self._entry(document, entry)

        destination.parent.mkdir(parents=True, exist_ok=True)
        document.output(str(destination))
        return destination

    def _entry(self, document: PagedDocument, entry: ManualEntry) -> None:
        self._line(document, entry.heading, size=14, style="B", color=(26, 102, 204), height=18)
        self._line(document, entry.description, size=10, indent=10, color=(51, 51, 51))
        self._line(document, f"Usage: {entry.usage}", size=10, indent=10, color=(77, 77, 77))
        if entry.options:
            self._line(document, "Options:", size=11, style="B", indent=10, color=(77, 77, 77))
            for option in entry.options:
                self._line(
                    document,
                    f"{option.flags}: {option.description}",
                    size=9,
                    indent=20,
                    color=(102, 102, 102),
                )
        if entry.example:
            self._line(document, "Example:", size=11, style="B", indent=10, color=(77, 77, 77))
            self._line(document, entry.example, size=10, indent=20, color=(26, 128, 26))
        document.ln(14)

    @staticmethod
    def _line(
        document: PagedDocument,
        text: str,
        *,
        size: int,
        style: str = "",
        indent: int = 0,
        color: Tuple[int, int, int] = (0, 0, 0),
        height: Optional[float] = None,
    ) -> None:
        document.set_font("Helvetica", style=style, size=size)
        document.set_text_color(*color)
        document.set_x(document.l_margin + indent)
        document.multi_cell(
            0,
            height or size + 3,
            pdf_text(text),
            new_x=XPos.LMARGIN,
            new_y=YPos.NEXT,
        )
