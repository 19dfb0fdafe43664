"""Mini README: Entry point CLI for the expense tracker.

This script exposes a Typer CLI (``expense``) for recording, editing and
querying expenses with undo/redo support. Settings come from environment
variables (``EXPENSE_DATA_DIR`` and friends); the root callback builds the
store, history and command objects once per invocation and hands them to the
selected command through the Typer context.

Exit codes: 0 for success or a graceful no-op, 1 for invalid input, usage
errors, a corrupt ledger or an unknown command.
"""

from __future__ import annotations

import difflib
from typing import Callable, List, Optional, Sequence, TypeVar

import click
import typer
from typer.core import TyperGroup

from expense_tracker.configuration import DataPaths, get_settings
from expense_tracker.errors import ExpenseNotFoundError, InvalidInputError, LedgerCorruptedError
from expense_tracker.export import ManualEntry, ManualOption
from expense_tracker.filtering import FilterCriteria
from expense_tracker.history import HistoryManager
from expense_tracker.interface import ExpenseCommands, TyperConsole
from expense_tracker.ledger import LedgerStore, ensure_data_files
from expense_tracker.logging_utils import configure_root_logger, get_logger

LOGGER = get_logger(__name__)

T = TypeVar("T")

SETUP_EXEMPT_COMMANDS = {"change-currency", "manual", "undo", "redo", "reset", "delete", "d", "recover"}

COMMAND_ALIASES = {"add": "a", "delete": "d", "list": "l", "total": "t", "export": "x"}

COMMAND_EXAMPLES = {
    "add": 'expense add 50 "Groceries for the week" --currency USD',
    "change-currency": "expense change-currency --currency EUR",
    "edit": 'expense edit 12 --amount 75.50 --description "Updated item" --currency GBP --date 2025-07-30',
    "reset": "expense reset",
    "delete": "expense delete 5",
    "recover": "expense recover 5",
    "list": "expense list --month 7 --year 2025 --reindex",
    "total": "expense total --month 7 --year 2025 --all",
    "export": "expense export --pdf --month 7 --open",
    "manual": "expense manual --open",
    "undo": "expense undo",
    "redo": "expense redo",
}


class SuggestingGroup(TyperGroup):
    """Command group that proposes the closest command for typos.

    Click reports usage errors (missing or unexpected arguments, unknown
    options) with exit code 2; this group reports them with 1 like every
    other invalid input.
    """

    def make_context(self, info_name, args, parent=None, **extra):  # type: ignore[override]
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as error:
            error.exit_code = 1
            raise

    def invoke(self, ctx):  # type: ignore[override]
        try:
            return super().invoke(ctx)
        except click.UsageError as error:
            error.exit_code = 1
            raise

    def resolve_command(self, ctx, args):  # type: ignore[override]
        name = args[0] if args else None
        if name and not name.startswith("-") and self.get_command(ctx, name) is None:
            matches = difflib.get_close_matches(name, self.list_commands(ctx), n=1, cutoff=0.6)
            if matches:
                typer.secho(
                    f"Error: Unknown command '{name}'. Did you mean {matches[0]}?",
                    fg=typer.colors.RED,
                    err=True,
                )
                typer.secho(f"For help with '{matches[0]}', type: expense {matches[0]} --help", err=True)
            else:
                typer.secho(f"Error: Unknown command '{name}'.", fg=typer.colors.RED, err=True)
                typer.secho("For a list of available commands, type: expense --help", err=True)
            raise typer.Exit(code=1)
        cmd_name, command, remaining = super().resolve_command(ctx, args)
        ctx.meta["help_requested"] = any(arg in ctx.help_option_names for arg in remaining)
        return cmd_name, command, remaining


cli = typer.Typer(
    cls=SuggestingGroup,
    help=(
        "A simple command-line expense tracker. Filter list, total and export by "
        "date, day, week, month or year. For a comprehensive PDF manual, type: "
        "expense manual [--open]"
    ),
)


def _run(action: Callable[[], T]) -> T:
    """Execute a command, translating tracker errors into exit codes."""

    try:
        return action()
    except ExpenseNotFoundError as error:
        typer.secho(str(error), fg=typer.colors.YELLOW)
        raise typer.Exit(code=0)
    except (InvalidInputError, LedgerCorruptedError) as error:
        LOGGER.debug("Command failed: %s", error)
        typer.secho(f"Error: {error}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


def _commands(ctx: typer.Context) -> ExpenseCommands:
    return ctx.obj


def _print_welcome() -> None:
    typer.secho("Welcome to the expense tracker! Your personal expense ledger.", fg=typer.colors.CYAN)
    typer.secho("To get started, try one of these commands:", fg=typer.colors.YELLOW)
    typer.echo("  expense add <amount> <description>   Add a new expense")
    typer.echo("  expense list                         View all your expenses")
    typer.echo("  expense total                        See your total spending")
    typer.echo("  expense change-currency --currency <CODE>   Set your preferred currency")
    typer.echo("  expense undo / expense redo          Revert or re-apply your last change")
    typer.echo("  expense manual --open                Generate and open the PDF manual")
    typer.secho("For a full list of commands and options, type: expense --help", fg=typer.colors.BLUE)


@cli.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """Load settings, prepare the data directory and wire the command objects."""

    settings = get_settings()
    configure_root_logger(settings.log_level)
    paths = DataPaths.from_settings(settings)
    ensure_data_files(paths)
    store = LedgerStore(paths)
    ctx.obj = ExpenseCommands(
        store,
        HistoryManager(store, paths),
        TyperConsole(),
        default_currency=settings.default_currency,
        export_dir=settings.export_dir,
        launcher=typer.launch,
    )
    LOGGER.debug("Using data directory %s", paths.data_dir)

    if ctx.invoked_subcommand is None:
        _print_welcome()
        return
    if ctx.invoked_subcommand not in SETUP_EXEMPT_COMMANDS and not ctx.meta.get("help_requested"):
        if not _run(ctx.obj.ensure_preferred_currency):
            raise typer.Exit(code=0)


@cli.command("add")
def add(
    ctx: typer.Context,
    amount: str = typer.Argument(..., help="Amount spent (positive number)."),
    description: List[str] = typer.Argument(..., help="What the money was spent on."),
    currency: Optional[str] = typer.Option(
        None, "--currency", "-c", help="Currency code, e.g. USD, EUR (defaults to preferred currency)."
    ),
) -> None:
    """Add a new expense."""

    _run(lambda: _commands(ctx).add(amount, description, currency))


@cli.command("change-currency")
def change_currency(
    ctx: typer.Context,
    currency: Optional[str] = typer.Option(None, "--currency", "-c", help="New currency code (e.g., USD, EUR, BDT)."),
) -> None:
    """Change the preferred currency and optionally convert past expenses."""

    if not currency:
        typer.secho("Error: The --currency flag is required for this command.", fg=typer.colors.RED, err=True)
        typer.secho("Example: expense change-currency --currency USD", fg=typer.colors.BLUE)
        raise typer.Exit(code=1)
    _run(lambda: _commands(ctx).change_currency(currency))


@cli.command("edit")
def edit(
    ctx: typer.Context,
    expense_id: str = typer.Argument(..., help="ID of the expense to modify."),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="New description."),
    amount: Optional[str] = typer.Option(None, "--amount", "-a", help="New amount (number)."),
    currency: Optional[str] = typer.Option(None, "--currency", "-c", help="New currency code."),
    day: Optional[str] = typer.Option(None, "--date", help="New date (YYYY-MM-DD)."),
) -> None:
    """Modify an existing expense's details."""

    _run(
        lambda: _commands(ctx).edit(
            expense_id,
            amount=amount,
            description=description,
            currency=currency,
            day=day,
        )
    )


@cli.command("reset")
def reset(ctx: typer.Context) -> None:
    """Erase all expenses (reversible with undo)."""

    _run(_commands(ctx).reset)


@cli.command("delete")
def delete(ctx: typer.Context, expense_id: str = typer.Argument(..., help="ID of the expense to delete.")) -> None:
    """Mark a specific expense as deleted (soft delete)."""

    _run(lambda: _commands(ctx).delete(expense_id))


@cli.command("recover")
def recover(ctx: typer.Context, expense_id: str = typer.Argument(..., help="ID of the expense to recover.")) -> None:
    """Recover a previously deleted expense by its ID."""

    _run(lambda: _commands(ctx).recover(expense_id))


def _reject_positional(value: Optional[str], examples: Sequence[str]) -> None:
    """Filters are options only; a bare word such as ``july`` is a usage error."""

    if value is None:
        return
    typer.secho("Error: Invalid command format.", fg=typer.colors.RED, err=True)
    typer.secho(
        "Please provide filters using options like --date, --month, or --year.",
        fg=typer.colors.YELLOW,
        err=True,
    )
    typer.secho("For example:", fg=typer.colors.BLUE)
    for example in examples:
        typer.secho(f"  {example}", fg=typer.colors.GREEN)
    raise typer.Exit(code=1)


@cli.command("list")
def list_expenses(
    ctx: typer.Context,
    stray: Optional[str] = typer.Argument(None, hidden=True, metavar="FILTER"),
    reindex: bool = typer.Option(False, "--reindex", help="Temporarily show sequential IDs."),
    date: Optional[str] = typer.Option(None, "--date", help="Filter by specific date (YYYY-MM-DD)."),
    day: Optional[str] = typer.Option(None, "--day", help="Filter by day name (e.g., Monday)."),
    month: Optional[str] = typer.Option(None, "--month", help="Filter by month (1-12)."),
    week: Optional[str] = typer.Option(None, "--week", help="Filter by week of the month (1-5)."),
    year: Optional[str] = typer.Option(None, "--year", help="Filter by year (YYYY)."),
    include_all: bool = typer.Option(False, "--all", help="Include deleted expenses."),
) -> None:
    """List expenses."""

    _reject_positional(stray, ("expense list --date 2025-08-01", "expense list --month 8 --year 2025"))
    _run(
        lambda: _commands(ctx).list_expenses(
            FilterCriteria.from_options(date=date, day=day, month=month, week=week, year=year),
            include_deleted=include_all,
            reindex=reindex,
        )
    )


@cli.command("total")
def total(
    ctx: typer.Context,
    stray: Optional[str] = typer.Argument(None, hidden=True, metavar="FILTER"),
    date: Optional[str] = typer.Option(None, "--date", help="Filter by specific date (YYYY-MM-DD)."),
    day: Optional[str] = typer.Option(None, "--day", help="Filter by day name (e.g., Monday)."),
    month: Optional[str] = typer.Option(None, "--month", help="Filter by month (1-12)."),
    week: Optional[str] = typer.Option(None, "--week", help="Filter by week of the month (1-5)."),
    year: Optional[str] = typer.Option(None, "--year", help="Filter by year (YYYY)."),
    include_all: bool = typer.Option(False, "--all", help="Include deleted expenses."),
) -> None:
    """Show the total amount spent per currency."""

    _reject_positional(stray, ("expense total --date 2025-08-01", "expense total --month 8 --year 2025"))
    _run(
        lambda: _commands(ctx).total(
            FilterCriteria.from_options(date=date, day=day, month=month, week=week, year=year),
            include_deleted=include_all,
        )
    )


@cli.command("export")
def export(
    ctx: typer.Context,
    stray: Optional[str] = typer.Argument(None, hidden=True, metavar="FILTER"),
    as_csv: bool = typer.Option(False, "--csv", help="Export to a CSV file."),
    as_pdf: bool = typer.Option(False, "--pdf", help="Export to a PDF receipt file."),
    date: Optional[str] = typer.Option(None, "--date", help="Filter by specific date (YYYY-MM-DD)."),
    day: Optional[str] = typer.Option(None, "--day", help="Filter by day name (e.g., Monday)."),
    month: Optional[str] = typer.Option(None, "--month", help="Filter by month (1-12)."),
    week: Optional[str] = typer.Option(None, "--week", help="Filter by week of the month (1-5)."),
    year: Optional[str] = typer.Option(None, "--year", help="Filter by year (YYYY)."),
    include_all: bool = typer.Option(False, "--all", help="Include deleted expenses."),
    open_file: bool = typer.Option(False, "--open", help="Open the exported file automatically."),
) -> None:
    """Export expenses to CSV or PDF."""

    _reject_positional(stray, ("expense export --pdf --date 2025-08-01", "expense export --csv --month 8"))
    _run(
        lambda: _commands(ctx).export(
            FilterCriteria.from_options(date=date, day=day, month=month, week=week, year=year),
            csv=as_csv,
            pdf=as_pdf,
            include_deleted=include_all,
            open_file=open_file,
        )
    )


def _argument_usage(argument: click.Argument) -> str:
    text = f"<{argument.name}>"
    if argument.nargs == -1:
        text += "..."
    return text if argument.required else f"[{text}]"


def manual_entries(group: click.Group) -> List[ManualEntry]:
    """Describe every visible command of ``group`` for the PDF manual."""

    aliases = {name: (alias,) for name, alias in COMMAND_ALIASES.items()}
    entries = []
    for name, command in group.commands.items():
        if command.hidden:
            continue
        arguments = [
            param
            for param in command.params
            if isinstance(param, click.Argument) and not getattr(param, "hidden", False)
        ]
        options = tuple(
            ManualOption(", ".join([*param.opts, *param.secondary_opts]), param.help or "")
            for param in command.params
            if isinstance(param, click.Option) and not param.hidden
        )
        usage = " ".join(
            ["expense", name, *(_argument_usage(argument) for argument in arguments)]
            + (["[options]"] if options else [])
        )
        description = (command.help or command.short_help or "").strip().splitlines()
        entries.append(
            ManualEntry(
                name=name,
                description=description[0] if description else "",
                usage=usage,
                aliases=aliases.get(name, ()),
                options=options,
                example=COMMAND_EXAMPLES.get(name, f"expense {name}"),
            )
        )
    return entries


@cli.command("manual")
def manual(
    ctx: typer.Context,
    open_file: bool = typer.Option(False, "--open", help="Open the generated PDF automatically."),
) -> None:
    """Generate a PDF manual with all commands, options, and examples."""

    root = ctx.find_root()
    global_options = [ManualOption(", ".join(root.help_option_names), "Show this message and exit.")]
    _run(
        lambda: _commands(ctx).manual(
            manual_entries(root.command),
            global_options=global_options,
            open_file=open_file,
        )
    )


@cli.command("undo")
def undo(ctx: typer.Context) -> None:
    """Revert the last change."""

    _run(_commands(ctx).undo)


@cli.command("redo")
def redo(ctx: typer.Context) -> None:
    """Re-apply the last undone change."""

    _run(_commands(ctx).redo)


for _command_info in list(cli.registered_commands):
    if _command_info.name in COMMAND_ALIASES:
        cli.command(COMMAND_ALIASES[_command_info.name], hidden=True)(_command_info.callback)


if __name__ == "__main__":
    cli()
