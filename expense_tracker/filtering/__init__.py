"""Mini README: Filter engine shared by list, total and export.

``criteria`` validates and applies the time/visibility filters; ``labels``
turns the same criteria into headings and export filenames.
"""

from .criteria import (
    WEEKDAY_NAMES,
    FilterCriteria,
    filter_expenses,
    validate_criteria,
    week_of_month,
)
from .labels import ExportLabels, generate_export_labels, month_name, week_suffix

__all__ = [
    "WEEKDAY_NAMES",
    "ExportLabels",
    "FilterCriteria",
    "filter_expenses",
    "generate_export_labels",
    "month_name",
    "validate_criteria",
    "week_of_month",
    "week_suffix",
]
