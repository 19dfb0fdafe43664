"""Mini README: Command implementations behind the ``expense`` CLI.

Structure:
    * ExpenseCommands - one method per CLI command, driven through a Console.
    * parse_expense_id / parse_calendar_day - argument validation helpers.

Every method validates its input and gathers confirmations first. Only once
the command is certain to change state does it call
``HistoryManager.record_command``, immediately followed by the writes, so
cancelled or rejected commands leave no entry in the undo history.

Invalid input raises ``InvalidInputError``; unknown ids raise
``ExpenseNotFoundError``. The CLI decides how those map to exit codes.
"""

from __future__ import annotations

import re
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..currency import change_preferred_currency, convert_expenses
from ..errors import InvalidInputError
from ..export import CsvExporter, ManualEntry, ManualOption, PdfExporter, PdfManualWriter
from ..filtering import FilterCriteria, filter_expenses, generate_export_labels, validate_criteria
from ..history import HistoryManager
from ..ledger import (
    CurrencyTotal,
    Expense,
    LedgerStore,
    find_expense,
    local_time,
    next_expense_id,
    now,
    total_by_currency,
    unconverted_currencies,
)
from ..logging_utils import get_logger
from .prompts import Console, parse_positive_number, request_exchange_rate, resolve_currency_code

LOGGER = get_logger(__name__)

_DAY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_expense_id(raw: object) -> int:
    try:
        expense_id = int(str(raw).strip())
    except ValueError as error:
        raise InvalidInputError("Invalid expense ID. Please enter a positive number.") from error
    if expense_id <= 0:
        raise InvalidInputError("Invalid expense ID. Please enter a positive number.")
    return expense_id


def parse_calendar_day(raw: str) -> date:
    text = raw.strip()
    try:
        if not _DAY_PATTERN.match(text):
            raise ValueError(text)
        return date.fromisoformat(text)
    except ValueError as error:
        raise InvalidInputError("Invalid date format. Please use YYYY-MM-DD.") from error


def describe(expense: Expense) -> str:
    return f"{expense.amount:.2f} {expense.currency} - {expense.description}"


class ExpenseCommands:
    """Execute tracker commands against one data directory."""

    def __init__(
        self,
        store: LedgerStore,
        history: HistoryManager,
        console: Console,
        *,
        default_currency: str = "USD",
        export_dir: Optional[Path] = None,
        exporter: Optional[CsvExporter] = None,
        pdf_exporter: Optional[PdfExporter] = None,
        manual_writer: Optional[PdfManualWriter] = None,
        launcher: Optional[Callable[[str], Any]] = None,
    ) -> None:
        self.store = store
        self.history = history
        self.console = console
        self.default_currency = default_currency
        self.export_dir = export_dir or Path.home() / "Downloads"
        self.exporter = exporter or CsvExporter()
        self.pdf_exporter = pdf_exporter or PdfExporter()
        self.manual_writer = manual_writer or PdfManualWriter()
        self.launcher = launcher

    # -- setup -----------------------------------------------------------

    def ensure_preferred_currency(self) -> bool:
        """Ask for a preferred currency on first use; ``False`` means setup was cancelled."""

        config = self.store.read_config()
        if config.preferred_currency is not None:
            return True

        self.console.echo("Welcome to the expense tracker!", style="heading")
        self.console.echo("To get started, let's set your default currency.")
        self.console.echo(
            "It is used for all future expenses unless you specify a different one. "
            "Change it any time with 'expense change-currency'.",
            style="muted",
        )
        raw = self.console.ask("Please enter your preferred 3-letter currency code (e.g., USD, EUR, BDT)")
        code = resolve_currency_code(raw, self.console, self.launcher) if raw.strip() else None
        if code is None:
            self.console.echo(
                "Setup cancelled. You can set the currency later using the 'change-currency' command.",
                style="warning",
            )
            return False

        config.preferred_currency = code
        self.store.write_config(config)
        self.console.echo(f"Your preferred currency has been set to {code}.", style="success")
        return True

    # -- mutating commands -------------------------------------------------

    def add(self, amount: str, description: Sequence[str], currency: Optional[str] = None) -> Expense:
        parsed_amount = parse_positive_number(amount)
        if parsed_amount is None:
            raise InvalidInputError("Invalid amount. Please enter a positive number.")
        text = " ".join(description).strip()
        if not text:
            raise InvalidInputError("Description cannot be empty.")

        config = self.store.read_config()
        code = config.preferred_currency or self.default_currency
        if currency:
            resolved = resolve_currency_code(currency, self.console, self.launcher)
            if resolved is None:
                raise InvalidInputError("Invalid currency code provided for this expense.")
            code = resolved

        expenses = self.store.read_ledger()
        self.history.record_command("add")
        expense = Expense(
            id=next_expense_id(expenses),
            amount=parsed_amount,
            description=text,
            date=now(),
            currency=code,
            original_amount=parsed_amount,
            original_currency=code,
        )
        expenses.append(expense)
        self.store.write_ledger(expenses)
        LOGGER.info("Added expense #%s", expense.id)
        self.console.echo(f"Added expense #{expense.id}: {describe(expense)}", style="success")
        return expense

    def change_currency(self, currency: str) -> bool:
        """Change the preferred currency, optionally converting past expenses."""

        new_currency = resolve_currency_code(currency, self.console, self.launcher)
        if new_currency is None:
            raise InvalidInputError("No valid currency code was chosen.")

        config = self.store.read_config()
        old_currency = config.preferred_currency
        if old_currency == new_currency:
            self.console.echo(
                f"Preferred currency is already set to {new_currency}. No change needed.",
                style="warning",
            )
            return False

        convert = False
        rate: Optional[float] = None
        if old_currency is not None:
            convert = self.console.confirm(
                f"Do you want to convert past expenses from {old_currency} to {new_currency}?"
            )
            if convert:
                rate = request_exchange_rate(old_currency, new_currency, self.console, self.launcher)
                if rate is None:
                    self.console.echo("Conversion of past expenses aborted.", style="error")
                    convert = False

        expenses = self.store.read_ledger()
        self.history.record_command("change-currency")
        change_preferred_currency(config, new_currency, rate)
        self.store.write_config(config)
        self.console.echo(f"Preferred currency changed to {new_currency}.", style="success")

        if convert and old_currency is not None:
            self.console.echo(f"Converting past expenses to {new_currency}...", style="warning")
            result = convert_expenses(expenses, old_currency, new_currency, rate)
            if result.warning:
                self.console.echo(result.warning, style="warning")
            self.store.write_ledger(expenses)
            self.console.echo(
                f"Processed {result.converted} past expenses to align with {new_currency}.",
                style="success",
            )
        elif old_currency is None:
            self.console.echo(
                "This is the first time setting a preferred currency. No past expenses to convert."
            )
        return True

    def edit(
        self,
        expense_id: str,
        *,
        amount: Optional[str] = None,
        description: Optional[str] = None,
        currency: Optional[str] = None,
        day: Optional[str] = None,
    ) -> Optional[Expense]:
        identifier = parse_expense_id(expense_id)
        expenses = self.store.read_ledger()
        expense = find_expense(expenses, identifier)

        if amount is None and description is None and currency is None and day is None:
            self.console.echo(
                f"To edit expense #{identifier}, please provide at least one option: "
                "--amount <number>, --description <text>, --currency <CODE>, --date <YYYY-MM-DD>.",
                style="warning",
            )
            self.console.echo(
                f'Example: expense edit {identifier} --amount 120 --description "Lunch with team"',
                style="muted",
            )
            return None

        changes: Dict[str, Any] = {}
        if description is not None:
            text = description.strip()
            if not text:
                raise InvalidInputError("Description cannot be empty.")
            if text != expense.description:
                changes["description"] = text
        if amount is not None:
            parsed_amount = parse_positive_number(amount)
            if parsed_amount is None:
                raise InvalidInputError("Invalid amount provided. Amount must be a positive number.")
            if abs(parsed_amount - expense.amount) > 0.001:
                changes["amount"] = parsed_amount
        if currency is not None:
            resolved = resolve_currency_code(currency, self.console, self.launcher)
            if resolved is None:
                raise InvalidInputError("Invalid currency code provided.")
            if resolved != expense.currency:
                changes["currency"] = resolved
        if day is not None:
            new_day = parse_calendar_day(day)
            recorded = local_time(expense.date)
            if new_day != recorded.date():
                changes["date"] = recorded.replace(year=new_day.year, month=new_day.month, day=new_day.day)

        if not changes:
            self.console.echo("No changes detected or applied.", style="warning")
            return None

        new_amount = changes.get("amount", expense.amount)
        new_currency = changes.get("currency", expense.currency)
        new_description = changes.get("description", expense.description)
        new_date = changes.get("date", expense.date)
        confirmed = self.console.confirm(
            f"Are you sure you want to apply these changes to expense #{identifier}?\n"
            f"  Current: {expense.amount:.2f} {expense.currency} - \"{expense.description}\" "
            f"({local_time(expense.date):%d/%m/%Y})\n"
            f"  New:     {new_amount:.2f} {new_currency} - \"{new_description}\" ({local_time(new_date):%d/%m/%Y})"
        )
        if not confirmed:
            self.console.echo("Operation cancelled. Expense was not modified.", style="warning")
            return None

        self.history.record_command("edit")
        expense.amount = new_amount
        expense.description = new_description
        expense.date = new_date
        if "currency" in changes:
            # Re-denominating the row makes the edited value its new original.
            expense.currency = new_currency
            expense.original_currency = new_currency
            expense.original_amount = new_amount
        self.store.write_ledger(expenses)
        LOGGER.info("Edited expense #%s fields=%s", identifier, sorted(changes))
        self.console.echo(f"Expense #{identifier} has been successfully updated.", style="success")
        return expense

    def delete(self, expense_id: str) -> bool:
        identifier = parse_expense_id(expense_id)
        expenses = self.store.read_ledger()
        expense = find_expense(expenses, identifier)
        if expense.is_deleted:
            self.console.echo(f"Expense #{identifier} is already marked as deleted.", style="warning")
            return False

        confirmed = self.console.confirm(
            f"Are you sure you want to delete expense #{identifier}: {describe(expense)}? "
            "It will be hidden from default lists but can be recovered."
        )
        if not confirmed:
            self.console.echo("Operation cancelled. No expense was marked as deleted.", style="warning")
            return False

        self.history.record_command("delete")
        expense.is_deleted = True
        expense.deleted_at = now()
        self.store.write_ledger(expenses)
        self.console.echo(f"Expense #{identifier} has been marked as deleted.", style="success")
        return True

    def recover(self, expense_id: str) -> bool:
        identifier = parse_expense_id(expense_id)
        expenses = self.store.read_ledger()
        expense = find_expense(expenses, identifier)
        if not expense.is_deleted:
            self.console.echo(f"Expense #{identifier} is not currently marked as deleted.", style="warning")
            return False

        confirmed = self.console.confirm(
            f"Are you sure you want to recover expense #{identifier}: {describe(expense)}? "
            "It will reappear in your expense lists."
        )
        if not confirmed:
            self.console.echo("Operation cancelled. No expense was recovered.", style="warning")
            return False

        self.history.record_command("recover")
        expense.is_deleted = False
        expense.deleted_at = None
        self.store.write_ledger(expenses)
        self.console.echo(f"Expense #{identifier} has been successfully recovered.", style="success")
        return True

    def reset(self) -> bool:
        self.store.read_ledger()
        confirmed = self.console.confirm(
            "Are you sure you want to erase all expenses? This action will clear all your data. "
            "Use 'expense undo' to revert immediately after."
        )
        if not confirmed:
            self.console.echo("Operation cancelled. No data was erased.", style="warning")
            return False

        self.history.record_command("reset")
        self.store.write_ledger([])
        self.console.echo("All expenses have been erased.", style="success")
        return True

    # -- queries -------------------------------------------------------------

    def _select(self, criteria: FilterCriteria, include_deleted: bool) -> List[Expense]:
        validate_criteria(criteria)
        return filter_expenses(self.store.read_ledger(), criteria, include_deleted)

    @staticmethod
    def _display_label(criteria: FilterCriteria, include_deleted: bool) -> str:
        label = generate_export_labels(criteria).title_label
        return f"{label} (Including Deleted)" if include_deleted else label

    def list_expenses(
        self,
        criteria: FilterCriteria,
        *,
        include_deleted: bool = False,
        reindex: bool = False,
    ) -> List[Expense]:
        expenses = self._select(criteria, include_deleted)
        if not expenses:
            self.console.echo("No expenses found for the selected filters.", style="warning")
            return []

        label = self._display_label(criteria, include_deleted)
        self.console.echo(f"Expense List for {label} ({len(expenses)} items):", style="heading")
        if reindex:
            expenses = sorted(expenses, key=lambda expense: expense.id)
        for position, expense in enumerate(expenses, start=1):
            shown_id = position if reindex else expense.id
            self.console.echo(self._format_line(shown_id, expense))
        return expenses

    @staticmethod
    def _format_line(shown_id: int, expense: Expense) -> str:
        original = ""
        if (
            abs(expense.effective_original_amount - expense.amount) > 0.001
            or expense.effective_original_currency != expense.currency
        ):
            original = (
                f" (Original: {expense.effective_original_amount:.2f} "
                f"{expense.effective_original_currency})"
            )
        deleted = " [DELETED]" if expense.is_deleted else ""
        return (
            f"{shown_id}. {expense.amount:.2f} {expense.currency}{original} - "
            f"{expense.description} ({local_time(expense.date):%d/%m/%Y %H:%M}){deleted}"
        )

    def _print_totals(self, totals: Sequence[CurrencyTotal], preferred: str) -> None:
        for total in totals:
            if total.is_preferred:
                self.console.echo(f"  {total.currency}: {total.amount:.2f} (Preferred)", style="success")
            else:
                self.console.echo(
                    f"  {total.currency}: {total.amount:.2f} "
                    f"(Not converted to Preferred Currency {preferred})"
                )

    def total(self, criteria: FilterCriteria, *, include_deleted: bool = False) -> List[CurrencyTotal]:
        """Print per-currency totals and offer to convert stray currencies."""

        selected = self._select(criteria, include_deleted)
        if not selected:
            self.console.echo("No expenses to total.", style="warning")
            return []

        label = self._display_label(criteria, include_deleted)
        preferred = self.store.read_config().preferred_currency or self.default_currency
        totals = total_by_currency(selected, preferred)
        self.console.echo(f"Total Spent for {label}:", style="heading")
        self._print_totals(totals, preferred)

        pending = unconverted_currencies(selected, preferred)
        if not pending:
            return totals
        if not self.console.confirm(
            "Do you want to convert unconverted currencies from this filtered list "
            f"to your Preferred Currency ({preferred})?"
        ):
            self.console.echo("Keeping unconverted currencies as they are.", style="warning")
            return totals

        rates: Dict[str, float] = {}
        for code in pending:
            self.console.echo(f"--- Converting {code} to {preferred} ---", style="heading")
            rate = request_exchange_rate(code, preferred, self.console, self.launcher)
            if rate is None:
                self.console.echo(
                    f"Conversion for {code} cancelled due to invalid exchange rate input.",
                    style="warning",
                )
                continue
            rates[code] = rate

        if not rates:
            self.console.echo("No expenses were converted.", style="warning")
            return totals

        expenses = self.store.read_ledger()
        selected_ids = {expense.id for expense in selected}
        targets = [expense for expense in expenses if expense.id in selected_ids]
        self.history.record_command("currency-conversion")
        for code, rate in rates.items():
            result = convert_expenses(targets, code, preferred, rate)
            self.console.echo(
                f"Converted {result.converted} expenses from {code} to {preferred}.",
                style="success",
            )
        self.store.write_ledger(expenses)

        self.console.echo(f"All eligible expenses have been converted to {preferred}.", style="success")
        totals = total_by_currency(filter_expenses(expenses, criteria, include_deleted), preferred)
        self.console.echo(f"Updated Total Spent for {label}:", style="heading")
        self._print_totals(totals, preferred)
        return totals

    def export(
        self,
        criteria: FilterCriteria,
        *,
        csv: bool = False,
        pdf: bool = False,
        include_deleted: bool = False,
        open_file: bool = False,
    ) -> List[Path]:
        """Write the filtered expenses as CSV and/or PDF; return the written paths."""

        validate_criteria(criteria)
        if not csv and not pdf:
            self.console.echo("Please specify an export format: --pdf or --csv.", style="warning")
            return []

        expenses = filter_expenses(self.store.read_ledger(), criteria, include_deleted)
        if not expenses:
            self.console.echo("No expenses to export.", style="warning")
            return []

        labels = generate_export_labels(criteria)
        written: List[Path] = []
        if csv:
            path = self.exporter.export_filtered(expenses, labels, output_directory=self.export_dir)
            self.console.echo(f"Exported CSV to {path}", style="success")
            written.append(path)
        if pdf:
            preferred = self.store.read_config().preferred_currency or self.default_currency
            path = self.pdf_exporter.export_filtered(
                expenses,
                labels,
                output_directory=self.export_dir,
                preferred_currency=preferred,
            )
            self.console.echo(f"Exported PDF to {path}", style="success")
            written.append(path)

        if open_file:
            for path in written:
                self._open(path)
        return written

    def manual(
        self,
        entries: Sequence[ManualEntry],
        *,
        global_options: Sequence[ManualOption] = (),
        open_file: bool = False,
    ) -> Path:
        path = self.manual_writer.write(
            entries,
            output_directory=self.export_dir,
            global_options=global_options,
        )
        self.console.echo(f"PDF manual generated at: {path}", style="success")
        if open_file:
            self._open(path)
        return path

    def _open(self, path: Path) -> None:
        if self.launcher is None:
            return
        self.console.echo(f"Opening {path.name} automatically...", style="muted")
        self.launcher(str(path))

    # -- history ---------------------------------------------------------------

    def undo(self) -> Optional[str]:
        pending = self.history.peek_undo()
        if pending is None:
            self.console.echo("Nothing to undo. The undo history is empty.", style="warning")
            return None
        if not self.console.confirm(
            f"Are you sure you want to undo the last '{pending}' operation? "
            "This will revert your data to its state before that command."
        ):
            self.console.echo("Operation cancelled. Nothing was undone.", style="warning")
            return None

        command = self.history.undo()
        self.console.echo(f"Last operation ('{command}') successfully undone.", style="success")
        return command

    def redo(self) -> Optional[str]:
        pending = self.history.peek_redo()
        if pending is None:
            self.console.echo(
                "Nothing to redo. The redo history is empty or cleared by a new command.",
                style="warning",
            )
            return None
        if not self.console.confirm(
            f"Are you sure you want to redo the last '{pending}' operation? "
            "This will re-apply the previously undone changes."
        ):
            self.console.echo("Operation cancelled. Nothing was redone.", style="warning")
            return None

        command = self.history.redo()
        self.console.echo(f"Last operation ('{command}') successfully redone.", style="success")
        return command
