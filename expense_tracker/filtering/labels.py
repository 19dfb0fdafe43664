"""Mini README: Human readable labels for filter combinations.

``generate_export_labels`` names list/total headings and export files. When
several filters are combined the first matching rule wins:
date, week+month, day+month, day+year, month, day, year, then ``AllTime``.
"""

from __future__ import annotations

from dataclasses import dataclass

from .criteria import FilterCriteria


@dataclass(frozen=True)
class ExportLabels:
    filename_label: str
    title_label: str


MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def month_name(month: int) -> str:
    return MONTH_NAMES[month - 1]


def week_suffix(week: int) -> str:
    """Return ``1stWeek``, ``2ndWeek``, ``3rdWeek`` or ``<n>thWeek``."""

    suffixes = {1: "st", 2: "nd", 3: "rd"}
    return f"{week}{suffixes.get(week, 'th')}Week"


def _base_label(criteria: FilterCriteria) -> str:
    year_suffix = f"_{criteria.year}" if criteria.year else "_AllYears"
    day = criteria.day.capitalize() if criteria.day else None

    if criteria.date:
        return criteria.date
    if criteria.week and criteria.month:
        return f"{week_suffix(criteria.week)}_{month_name(criteria.month)}{year_suffix}"
    if day and criteria.month:
        return f"{day}_{month_name(criteria.month)}{year_suffix}"
    if day and criteria.year:
        return f"{day}_AllMonths_{criteria.year}"
    if criteria.month:
        return f"{month_name(criteria.month)}{year_suffix}"
    if day:
        return f"{day}_AllMonths_AllYears"
    if criteria.year:
        return str(criteria.year)
    return "AllTime"


def generate_export_labels(criteria: FilterCriteria) -> ExportLabels:
    """Derive the export filename stem and the heading for ``criteria``."""

    base = _base_label(criteria)
    return ExportLabels(filename_label=f"Expense_{base}", title_label=base)
