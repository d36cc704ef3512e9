"""Formatting utilities."""

from expense_tracker.utils.formatting import (
    current_month_year,
    format_currency,
    format_date,
    month_name,
    short_month_label,
)

__all__ = [
    "current_month_year",
    "format_currency",
    "format_date",
    "month_name",
    "short_month_label",
]
