"""Sample data used when storage holds nothing usable."""

import datetime as dt
from decimal import Decimal

from expense_tracker.models.expense import Category, Expense


SEED_CATEGORIES: tuple[Category, ...] = (
    Category(id="1", name="Food", color="#F2FCE2", icon="utensils"),
    Category(id="2", name="Transportation", color="#D3E4FD", icon="car"),
    Category(id="3", name="Entertainment", color="#FFDEE2", icon="film"),
    Category(id="4", name="Bills", color="#FEF7CD", icon="file-invoice-dollar"),
    Category(id="5", name="Shopping", color="#FEC6A1", icon="shopping-bag"),
    Category(id="6", name="Health", color="#E5DEFF", icon="heartbeat"),
    Category(id="7", name="Other", color="#C8C8C9", icon="ellipsis-h"),
)

# (amount, category id, date, note)
_SAMPLE_ROWS = (
    ("25.50", "1", dt.date(2025, 5, 1), "Grocery shopping"),
    ("35.00", "2", dt.date(2025, 5, 2), "Uber ride"),
    ("15.99", "3", dt.date(2025, 5, 3), "Movie ticket"),
    ("120.00", "4", dt.date(2025, 5, 4), "Electricity bill"),
    ("67.89", "5", dt.date(2025, 5, 5), "New t-shirt"),
)


def seed_categories() -> list[Category]:
    """The seven default categories."""
    return list(SEED_CATEGORIES)


def seed_expenses() -> list[Expense]:
    """Five sample expenses from May 2025, each with a fresh id."""
    return [
        Expense(amount=Decimal(amount), category=category, date=date, note=note)
        for amount, category, date, note in _SAMPLE_ROWS
    ]
