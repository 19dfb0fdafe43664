"""Mini README: Declarative time and visibility filters over the ledger.

Structure:
    * FilterCriteria - named optional filters (date, day, month, week, year).
    * validate_criteria - rejects malformed or conflicting filters.
    * filter_expenses - pure conjunction of every supplied filter.
    * week_of_month - 1-based 7-day block of a date within its month.

Validation is a separate step from filtering. Commands validate first and
abort on ``FilterValidationError``; ``filter_expenses`` then assumes the
criteria make sense and only compares values. In particular it does not
insist that ``week`` comes with ``month``.

Dates are compared in local time. Aware timestamps, including legacy UTC
rows written with a trailing ``Z``, are converted before their calendar
components are read; naive values are used as recorded.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Optional

from ..errors import FilterValidationError
from ..ledger import Expense, local_time

WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class FilterCriteria:
    """Optional filters applied together by ``filter_expenses``."""

    date: Optional[str] = None
    day: Optional[str] = None
    month: Optional[int] = None
    week: Optional[int] = None
    year: Optional[int] = None

    @classmethod
    def from_options(
        cls,
        *,
        date: Optional[str] = None,
        day: Optional[str] = None,
        month: Optional[str] = None,
        week: Optional[str] = None,
        year: Optional[str] = None,
    ) -> "FilterCriteria":
        """Build criteria from raw command-line strings."""

        if year is not None and not re.fullmatch(r"\d{4}", year.strip()):
            raise FilterValidationError("Invalid --year value. Please use a 4-digit year (e.g., 2025).")
        return cls(
            date=date.strip() if date else None,
            day=day.strip() if day else None,
            month=_parse_int(month, "Invalid --month value. Must be between 1 and 12."),
            week=_parse_int(
                week,
                f"Invalid --week value '{week}'. Must be between 1 and 5 for week of month.",
            ),
            year=_parse_int(year, "Invalid --year value. Please use a 4-digit year (e.g., 2025)."),
        )

    @property
    def is_empty(self) -> bool:
        return not (self.date or self.day or self.month or self.week or self.year)

    @property
    def calendar_date(self) -> Optional[date]:
        return date.fromisoformat(self.date) if self.date else None


def _parse_int(value: Optional[str], message: str) -> Optional[int]:
    if value is None or not str(value).strip():
        return None
    try:
        return int(str(value).strip())
    except ValueError as error:
        raise FilterValidationError(message) from error


def validate_criteria(criteria: FilterCriteria) -> FilterCriteria:
    """Raise ``FilterValidationError`` for any invalid filter combination."""

    if criteria.date:
        if criteria.day or criteria.month or criteria.week or criteria.year:
            raise FilterValidationError(
                "Cannot use --date with --day, --month, --week, or --year. "
                "Please choose one filtering method."
            )
        if not _DATE_PATTERN.match(criteria.date):
            raise FilterValidationError("Invalid --date format. Please use YYYY-MM-DD (e.g., 2025-07-29).")
        try:
            date.fromisoformat(criteria.date)
        except ValueError as error:
            raise FilterValidationError(
                "Invalid --date format. Please use YYYY-MM-DD (e.g., 2025-07-29)."
            ) from error

    if criteria.week is not None:
        if not 1 <= criteria.week <= 5:
            raise FilterValidationError(
                f"Invalid --week value '{criteria.week}'. Must be between 1 and 5 for week of month."
            )
        if criteria.month is None:
            raise FilterValidationError(
                "The --week option must be used with --month (and optionally --year) for meaningful filtering."
            )

    if criteria.month is not None and not 1 <= criteria.month <= 12:
        raise FilterValidationError("Invalid --month value. Must be between 1 and 12.")

    if criteria.year is not None and len(str(criteria.year)) != 4:
        raise FilterValidationError("Invalid --year value. Please use a 4-digit year (e.g., 2025).")

    if criteria.day is not None and criteria.day.lower() not in WEEKDAY_NAMES:
        valid = ", ".join(name.capitalize() for name in WEEKDAY_NAMES)
        raise FilterValidationError(f"Invalid --day value. Must be one of: {valid}.")

    return criteria


def week_of_month(moment: date | datetime) -> int:
    """Return the 1-based 7-day block of the month containing ``moment``."""

    days_since_first = moment.day - 1
    return math.ceil((days_since_first + 1) / 7)


def _matches(expense: Expense, criteria: FilterCriteria, include_deleted: bool) -> bool:
    if not include_deleted and expense.is_deleted:
        return False

    moment = local_time(expense.date)
    if criteria.date and moment.date() != criteria.calendar_date:
        return False
    if criteria.day and WEEKDAY_NAMES[moment.weekday()] != criteria.day.lower():
        return False
    if criteria.month is not None and moment.month != criteria.month:
        return False
    if criteria.year is not None and moment.year != criteria.year:
        return False
    if criteria.week is not None and week_of_month(moment) != criteria.week:
        return False
    return True


def filter_expenses(
    expenses: Iterable[Expense],
    criteria: Optional[FilterCriteria] = None,
    include_deleted: bool = False,
) -> List[Expense]:
    """Return the expenses matching every supplied filter, in ledger order."""

    criteria = criteria or FilterCriteria()
    return [expense for expense in expenses if _matches(expense, criteria, include_deleted)]
