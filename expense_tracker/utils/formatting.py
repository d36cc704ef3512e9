"""
Money and date formatting helpers.

Months are 0-indexed throughout the package (January = 0).
"""

import datetime as dt
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from expense_tracker.config import get_settings

Number = Union[Decimal, int, float]

# Fixed English names; output does not follow the process locale
_MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
_MONTH_ABBRS = tuple(name[:3] for name in _MONTH_NAMES)


def _check_month(month_index: int) -> int:
    if not 0 <= month_index <= 11:
        raise ValueError(f"Month index must be 0-11, got {month_index}")
    return month_index


def format_currency(amount: Number, symbol: Optional[str] = None) -> str:
    """
    Format an amount as currency, e.g. '$1,234.56' or '-$1.00'.

    The symbol defaults to the configured currency_symbol.
    """
    if symbol is None:
        symbol = get_settings().app.currency_symbol
    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def format_date(value: dt.date) -> str:
    """Short date, e.g. 'May 1, 2025'."""
    return f"{_MONTH_ABBRS[value.month - 1]} {value.day}, {value.year}"


def month_name(month_index: int) -> str:
    """Full month name for a 0-indexed month, e.g. 4 -> 'May'."""
    return _MONTH_NAMES[_check_month(month_index)]


def short_month_label(month_index: int, year: int) -> str:
    """Short month-and-year label, e.g. 'May 2025'."""
    return f"{_MONTH_ABBRS[_check_month(month_index)]} {year}"


def current_month_year(today: Optional[dt.date] = None) -> tuple[int, int]:
    """(month, year) for today, month 0-indexed."""
    today = today or dt.date.today()
    return today.month - 1, today.year
