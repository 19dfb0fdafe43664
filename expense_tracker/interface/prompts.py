"""Mini README: Console abstraction and bounded interactive prompts.

Structure:
    * Console - protocol for messages, yes/no confirmation and free text input.
    * TyperConsole - terminal implementation built on ``typer``.
    * parse_positive_number - shared numeric validation for amounts and rates.
    * resolve_currency_code - up to three attempts to obtain a valid code.
    * request_exchange_rate - up to three attempts to obtain a positive rate.
    * offer_reference_links - optionally open one of the listed sites.

Both retry helpers return ``None`` once the attempt budget is spent so the
caller can abandon just that sub-operation. When a launcher is supplied they
also offer to open a reference site before asking for input.
"""

from __future__ import annotations

import math
from typing import Any, Callable, Optional, Protocol, Sequence, Tuple

import typer

from ..currency import currency_name, is_valid_currency, suggest_currency
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

MAX_PROMPT_ATTEMPTS = 3

CURRENCY_REFERENCE_SITES = (
    ("IBAN.com (Currency Codes by Country)", "https://www.iban.com/currency-codes"),
    (
        "SIX Group (ISO 4217 list)",
        "https://www.six-group.com/en/products-services/financial-information/data-standards.html",
    ),
)

EXCHANGE_RATE_SITES = (
    ("XE.com", "https://www.xe.com/currencyconverter/"),
    ("Wise", "https://wise.com/currency-converter/"),
    ("OANDA", "https://www.oanda.com/currency-converter/en/"),
)

Launcher = Callable[[str], Any]


class Console(Protocol):
    """What commands need from an interactive terminal."""

    def echo(self, message: str, *, style: str = "info") -> None:
        ...

    def confirm(self, message: str) -> bool:
        ...

    def ask(self, message: str) -> str:
        ...


class TyperConsole:
    """Render messages and prompts on the terminal via ``typer``."""

    STYLES = {
        "info": {},
        "success": {"fg": typer.colors.GREEN},
        "warning": {"fg": typer.colors.YELLOW},
        "error": {"fg": typer.colors.RED, "err": True},
        "heading": {"fg": typer.colors.CYAN, "bold": True},
        "muted": {"fg": typer.colors.BRIGHT_BLACK},
    }

    def echo(self, message: str, *, style: str = "info") -> None:
        typer.secho(message, **self.STYLES.get(style, {}))

    def confirm(self, message: str) -> bool:
        return typer.confirm(message, default=False)

    def ask(self, message: str) -> str:
        return str(typer.prompt(message, default="", show_default=False)).strip()


def parse_positive_number(raw: object) -> Optional[float]:
    """Return ``raw`` as a finite positive float, or ``None`` when it is not one."""

    try:
        value = float(str(raw).strip())
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def _show_sites(sites: Sequence[Tuple[str, str]], console: Console) -> None:
    for index, (name, url) in enumerate(sites, start=1):
        console.echo(f"  {index}. {name}: {url}", style="muted")


def offer_reference_links(
    sites: Sequence[Tuple[str, str]],
    console: Console,
    launcher: Optional[Launcher],
) -> Optional[str]:
    """Offer to open one of ``sites`` in the browser; return the opened URL."""

    if launcher is None or not sites:
        return None
    if not console.confirm("Would you like to open one of these links in your browser now?"):
        return None

    choices = [str(index) for index in range(1, len(sites) + 1)]
    for _ in range(MAX_PROMPT_ATTEMPTS):
        choice = console.ask(f"Enter the number of the link you want to open ({', '.join(choices)})")
        if choice.strip() in choices:
            url = sites[int(choice) - 1][1]
            console.echo(f"Opening {url} in your default browser...", style="muted")
            launcher(url)
            return url
        console.echo(f"Invalid choice. Please enter one of: {', '.join(choices)}.", style="warning")
    return None


def resolve_currency_code(
    initial: str,
    console: Console,
    launcher: Optional[Launcher] = None,
) -> Optional[str]:
    """Validate ``initial`` and re-prompt until a known code is chosen."""

    candidate = initial
    for attempt in range(1, MAX_PROMPT_ATTEMPTS + 1):
        if attempt > 1:
            console.echo(
                "To find correct 3-letter currency codes (ISO 4217), check these resources:",
                style="info",
            )
            _show_sites(CURRENCY_REFERENCE_SITES, console)
            offer_reference_links(CURRENCY_REFERENCE_SITES, console, launcher)
            candidate = console.ask(
                f"Please enter a valid currency code (Attempt {attempt}/{MAX_PROMPT_ATTEMPTS})"
            )

        code = candidate.strip().upper()
        if is_valid_currency(code):
            return code

        suggestion = suggest_currency(code)
        if suggestion:
            accepted = console.confirm(
                f'"{candidate}" is not a standard code. Did you mean '
                f'"{suggestion}" ({currency_name(suggestion)})?'
            )
            if accepted:
                return suggestion
            console.echo("Suggestion not accepted.", style="warning")
        else:
            console.echo(
                f'"{candidate}" is not a recognized currency code and no close match was found.',
                style="error",
            )

    LOGGER.info("Currency resolution for %r abandoned after %s attempts", initial, MAX_PROMPT_ATTEMPTS)
    console.echo(
        f"Exceeded maximum attempts ({MAX_PROMPT_ATTEMPTS}). "
        "Please run the command again with a valid currency code.",
        style="error",
    )
    return None


def request_exchange_rate(
    source: str,
    target: str,
    console: Console,
    launcher: Optional[Launcher] = None,
) -> Optional[float]:
    """Ask for ``1 source = X target`` until a positive rate is entered."""

    console.echo(
        f"To find live exchange rates for {source} to {target}, you can visit:",
        style="info",
    )
    _show_sites(EXCHANGE_RATE_SITES, console)
    offer_reference_links(EXCHANGE_RATE_SITES, console, launcher)

    for attempt in range(1, MAX_PROMPT_ATTEMPTS + 1):
        raw = console.ask(
            f"Enter the exchange rate (1 {source} = X {target}) "
            f"(Attempt {attempt}/{MAX_PROMPT_ATTEMPTS})"
        )
        rate = parse_positive_number(raw)
        if rate is not None:
            return rate
        console.echo("Invalid exchange rate. Please enter a positive number.", style="error")

    LOGGER.info("Exchange rate entry for %s->%s abandoned", source, target)
    console.echo(
        f"Exceeded maximum attempts ({MAX_PROMPT_ATTEMPTS}) for exchange rate.",
        style="error",
    )
    return None
