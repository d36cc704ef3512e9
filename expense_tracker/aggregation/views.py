"""
View-level helpers built on the aggregation engine.

These are the figures the dashboard, category breakdown, monthly
chart and expense list show: time-window filtering, the monthly trend
series, newest-first ordering with paging, and the combined summary.
"""

import datetime as dt
import math
from typing import Iterable, Optional, Sequence, TypeVar, Union

from expense_tracker.aggregation.engine import (
    average_per_day,
    by_category,
    in_month,
    last_months,
    monthly_total,
    total_of,
)
from expense_tracker.models.expense import (
    Category,
    Expense,
    MonthlyTotal,
    SpendingSummary,
    TimeFilter,
)
from expense_tracker.utils.formatting import month_name


T = TypeVar("T")


def _as_date(value: Union[dt.date, dt.datetime]) -> dt.date:
    return value.date() if isinstance(value, dt.datetime) else value


def filter_expenses(
    expenses: Iterable[Expense],
    time_filter: Union[TimeFilter, str],
    now: Optional[Union[dt.date, dt.datetime]] = None,
    week_days: int = 7,
) -> list[Expense]:
    """
    Expenses inside a time window.

    week:  dated on or after `now - week_days` days
    month: dated in the same calendar month and year as `now`
    all:   everything
    """
    time_filter = TimeFilter(time_filter)
    today = _as_date(now or dt.date.today())

    if time_filter == TimeFilter.WEEK:
        cutoff = today - dt.timedelta(days=week_days)
        return [e for e in expenses if e.date >= cutoff]
    if time_filter == TimeFilter.MONTH:
        return [e for e in expenses if in_month(e, today.month - 1, today.year)]
    return list(expenses)


def monthly_trend(
    expenses: Sequence[Expense],
    reference_date: dt.date,
    months: int = 6,
) -> list[MonthlyTotal]:
    """Total per month for the trailing `months` months, oldest first."""
    return [
        MonthlyTotal(
            month=period.month,
            year=period.year,
            label=period.label,
            total=monthly_total(expenses, period.month, period.year),
        )
        for period in last_months(reference_date, months)
    ]


def has_spending(trend: Iterable[MonthlyTotal]) -> bool:
    """Whether any month in a trend has a non-zero total."""
    return any(bar.total > 0 for bar in trend)


def sort_newest_first(expenses: Iterable[Expense]) -> list[Expense]:
    """Expenses ordered by date, most recent first; same-day order kept."""
    return sorted(expenses, key=lambda e: e.date, reverse=True)


def page_count(total_items: int, per_page: int) -> int:
    """Number of pages needed for `total_items` (0 when empty)."""
    if per_page < 1:
        raise ValueError(f"per_page must be at least 1, got {per_page}")
    return math.ceil(total_items / per_page)


def paginate(items: Sequence[T], page: int, per_page: int) -> list[T]:
    """
    One page of items, pages numbered from 0.

    A page past the end falls back to the first page.
    """
    pages = page_count(len(items), per_page)
    if page < 0 or page >= max(pages, 1):
        page = 0
    start = page * per_page
    return list(items[start:start + per_page])


def summarize(
    expenses: Sequence[Expense],
    categories: Sequence[Category],
    today: Optional[dt.date] = None,
    time_filter: Union[TimeFilter, str] = TimeFilter.ALL,
    week_days: int = 7,
    trend_months: int = 6,
) -> SpendingSummary:
    """
    Dashboard figures for one snapshot.

    The category breakdown honours `time_filter`; the headline totals
    and the trend always use every expense.
    """
    today = _as_date(today or dt.date.today())
    time_filter = TimeFilter(time_filter)
    month, year = today.month - 1, today.year

    month_total = monthly_total(expenses, month, year)
    window = filter_expenses(expenses, time_filter, today, week_days)

    return SpendingSummary(
        generated_for=today,
        time_filter=time_filter,
        expense_count=len(expenses),
        total_to_date=total_of(expenses),
        month=month,
        year=year,
        month_name=month_name(month),
        month_total=month_total,
        average_per_day=average_per_day(month_total, month, year),
        by_category=by_category(window, categories),
        trend=monthly_trend(expenses, today, trend_months),
    )
