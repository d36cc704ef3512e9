"""
Aggregation Engine

Pure functions that derive spending figures from a snapshot.
None of them keep state or modify their inputs; call them again
after every store mutation to get fresh numbers.

Months are 0-indexed (January = 0), matching the utils module.
"""

import calendar
import datetime as dt
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from expense_tracker.models.expense import (
    Category,
    CategoryTotal,
    Expense,
    MonthPeriod,
)
from expense_tracker.utils.formatting import short_month_label


ZERO = Decimal("0")


def _check_month(month: int) -> None:
    if not 0 <= month <= 11:
        raise ValueError(f"Month must be 0-11, got {month}")


def total_of(expenses: Iterable[Expense]) -> Decimal:
    """Sum of all amounts; 0 for no expenses."""
    return sum((expense.amount for expense in expenses), ZERO)


def in_month(expense: Expense, month: int, year: int) -> bool:
    """Whether an expense falls in the given 0-indexed month."""
    return expense.date.month == month + 1 and expense.date.year == year


def monthly_total(expenses: Iterable[Expense], month: int, year: int) -> Decimal:
    """Sum of amounts dated in the given 0-indexed month of `year`."""
    _check_month(month)
    return total_of(e for e in expenses if in_month(e, month, year))


def by_category(
    expenses: Iterable[Expense],
    categories: Iterable[Category],
) -> list[CategoryTotal]:
    """
    Total spending per category, largest first.

    Only categories with at least one expense appear. Ties keep the
    order in which the categories were first seen. Expenses whose
    category id does not resolve are skipped.
    """
    lookup = {category.id: category for category in categories}
    groups: dict[str, Decimal] = {}

    for expense in expenses:
        if expense.category not in lookup:
            continue
        groups[expense.category] = groups.get(expense.category, ZERO) + expense.amount

    grand_total = sum(groups.values(), ZERO)

    rows = []
    for category_id, total in groups.items():
        category = lookup[category_id]
        share = 0.0
        if grand_total > 0:
            share = float((total / grand_total * 100).quantize(Decimal("0.1")))
        rows.append(CategoryTotal(
            category_id=category_id,
            category_name=category.name,
            total=total,
            color=category.color,
            share=share,
        ))

    # sorted() is stable, so ties stay in first-seen order
    return sorted(rows, key=lambda row: row.total, reverse=True)


def last_months(reference_date: dt.date, count: int = 6) -> list[MonthPeriod]:
    """
    The reference month and the `count - 1` months before it, oldest first.

    Year boundaries roll over: a February reference with count 6
    starts at September of the previous year.

    Raises:
        ValueError: if count < 1, or the window would reach before year 1
    """
    if count < 1:
        raise ValueError(f"count must be at least 1, got {count}")

    # Months since year 0, so stepping back is plain subtraction
    anchor = reference_date.year * 12 + reference_date.month - 1
    if anchor - count + 1 < 12:
        raise ValueError(
            f"{count} months back from {reference_date.isoformat()} reaches before year 1"
        )

    periods = []
    for index in range(anchor - count + 1, anchor + 1):
        year, month = divmod(index, 12)
        periods.append(MonthPeriod(
            month=month,
            year=year,
            label=short_month_label(month, year),
        ))
    return periods


def last_six_months(reference_date: dt.date) -> list[MonthPeriod]:
    """Exactly six months ending with the reference month, oldest first."""
    return last_months(reference_date, 6)


def days_in_month(month: int, year: int) -> int:
    """Number of days in a 0-indexed month, leap years included."""
    _check_month(month)
    return calendar.monthrange(year, month + 1)[1]


def average_per_day(month_total: Decimal, month: int, year: int) -> Decimal:
    """Monthly total spread over every day of that month, to the cent."""
    average = Decimal(month_total) / days_in_month(month, year)
    return average.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
