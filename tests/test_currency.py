"""Mini README: Tests for currency conversion and code lookup.

Structure:
    * convert_expenses - revaluing from originals, label-only moves and scoping.
    * change_preferred_currency - history entries only for real changes.
    * suggest_currency / is_valid_currency - code lookup rules.
"""

from __future__ import annotations

from datetime import datetime

import pytest

from expense_tracker.currency import (
    change_preferred_currency,
    convert_expenses,
    is_valid_currency,
    suggest_currency,
)
from expense_tracker.ledger import Expense, LedgerConfig

from conftest import make_expense


def test_conversion_with_rate_revalues_from_originals() -> None:
    rows = [make_expense(1, 10.0, datetime(2025, 7, 1), currency="USD")]

    result = convert_expenses(rows, "USD", "EUR", 1.5)

    assert result.converted == 1
    assert result.warning is None
    assert rows[0].amount == pytest.approx(15.0)
    assert rows[0].currency == "EUR"
    assert (rows[0].original_amount, rows[0].original_currency) == (10.0, "USD")


def test_chained_conversions_do_not_compound() -> None:
    rows = [make_expense(1, 10.0, datetime(2025, 7, 1), currency="USD")]

    convert_expenses(rows, "USD", "EUR", 2.0)
    convert_expenses(rows, "EUR", "GBP", 3.0)

    assert rows[0].amount == pytest.approx(30.0)
    assert rows[0].original_currency == "USD"


def test_conversion_without_rate_only_relabels(caplog) -> None:
    rows = [make_expense(1, 10.0, datetime(2025, 7, 1), currency="USD")]

    with caplog.at_level("INFO"):
        result = convert_expenses(rows, "USD", "EUR")

    assert rows[0].amount == 10.0
    assert rows[0].currency == "EUR"
    assert result.warning is not None
    assert "amounts will remain unchanged" in caplog.text


def test_relabel_warning_is_not_logged_at_warning_level(caplog) -> None:
    """The console shows the warning; the log must not repeat it on stderr."""

    rows = [make_expense(1, 10.0, datetime(2025, 7, 1), currency="USD")]

    with caplog.at_level("WARNING"):
        convert_expenses(rows, "USD", "EUR")

    assert [record for record in caplog.records if record.levelname == "WARNING"] == []


def test_conversion_backfills_missing_originals() -> None:
    legacy = Expense(id=1, amount=8.0, description="Bus", date=datetime(2025, 1, 5), currency="GBP")

    convert_expenses([legacy], "GBP", "USD", 1.25)

    assert (legacy.original_amount, legacy.original_currency) == (8.0, "GBP")
    assert legacy.amount == pytest.approx(10.0)


def test_conversion_leaves_other_currencies_alone() -> None:
    rows = [
        make_expense(1, 10.0, datetime(2025, 7, 1), currency="USD"),
        make_expense(2, 20.0, datetime(2025, 7, 2), currency="JPY"),
    ]

    result = convert_expenses(rows, "USD", "EUR", 0.9)

    assert result.converted == 1
    assert (rows[1].amount, rows[1].currency) == (20.0, "JPY")


def test_rerunning_a_conversion_touches_nothing() -> None:
    rows = [make_expense(1, 10.0, datetime(2025, 7, 1), currency="USD")]
    convert_expenses(rows, "USD", "EUR", 1.5)

    result = convert_expenses(rows, "USD", "EUR", 1.5)

    assert result.converted == 0
    assert rows[0].amount == pytest.approx(15.0)


def test_non_positive_rate_is_rejected() -> None:
    with pytest.raises(ValueError):
        convert_expenses([], "USD", "EUR", 0)


def test_change_preferred_currency_records_history() -> None:
    config = LedgerConfig()

    assert change_preferred_currency(config, "USD") is None
    assert config.currency_history == []

    assert change_preferred_currency(config, "EUR", 0.9) == "USD"
    (entry,) = config.currency_history
    assert (entry.previous_preferred_currency, entry.new_preferred_currency) == ("USD", "EUR")
    assert entry.exchange_rate == 0.9

    change_preferred_currency(config, "EUR")
    assert len(config.currency_history) == 1


@pytest.mark.parametrize(
    ("text", "expected"),
    [("usd", "USD"), ("euro", "EUR"), ("yen", "JPY"), ("ZZZ", None), ("", None)],
)
def test_suggest_currency(text: str, expected) -> None:
    assert suggest_currency(text) == expected


def test_is_valid_currency_ignores_case() -> None:
    assert is_valid_currency("bdt")
    assert not is_valid_currency("ABC")
