"""Expense store package."""

from expense_tracker.store.data_store import ExpenseStore
from expense_tracker.store.seed import (
    SEED_CATEGORIES,
    seed_categories,
    seed_expenses,
)

__all__ = [
    "ExpenseStore",
    "SEED_CATEGORIES",
    "seed_categories",
    "seed_expenses",
]
