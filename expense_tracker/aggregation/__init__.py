"""Aggregation package: pure spending summaries over a snapshot."""

from expense_tracker.aggregation.engine import (
    average_per_day,
    by_category,
    days_in_month,
    in_month,
    last_months,
    last_six_months,
    monthly_total,
    total_of,
)
from expense_tracker.aggregation.views import (
    filter_expenses,
    has_spending,
    monthly_trend,
    page_count,
    paginate,
    sort_newest_first,
    summarize,
)

__all__ = [
    # Engine
    "average_per_day",
    "by_category",
    "days_in_month",
    "in_month",
    "last_months",
    "last_six_months",
    "monthly_total",
    "total_of",
    # Views
    "filter_expenses",
    "has_spending",
    "monthly_trend",
    "page_count",
    "paginate",
    "sort_newest_first",
    "summarize",
]
