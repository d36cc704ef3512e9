"""
Data Models Package

This package contains all Pydantic models used in the Expense Tracker.
Everything the store holds or the aggregation functions return is one of these.
"""

from expense_tracker.models.expense import (
    Category,
    CategoryTotal,
    Expense,
    MonthlyTotal,
    MonthPeriod,
    SpendingSummary,
    StoreSnapshot,
    TimeFilter,
    ValidationIssue,
    new_id,
)
from expense_tracker.models.events import (
    EventSeverity,
    StoreEvent,
    StoreEventBuilder,
    StoreEventType,
)

__all__ = [
    # Expense models
    "Category",
    "CategoryTotal",
    "Expense",
    "MonthlyTotal",
    "MonthPeriod",
    "SpendingSummary",
    "StoreSnapshot",
    "TimeFilter",
    "ValidationIssue",
    "new_id",
    # Event models
    "EventSeverity",
    "StoreEvent",
    "StoreEventBuilder",
    "StoreEventType",
]
