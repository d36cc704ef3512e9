"""
Core Data Models for Expense Tracker

These models define the schemas for everything the store holds
and everything the aggregation functions hand back. They are:
1. Immutable once built (the store replaces records, never edits them)
2. Serializable to JSON for persistence
3. Validated on load, so a corrupt payload is caught at the boundary

DESIGN DECISION: Expense.amount is a Decimal, not a float.
Sums over money must be exact (25.50 + 35.00 + ... == 264.38).
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


def new_id() -> str:
    """Generate a fresh opaque identifier."""
    return str(uuid4())


def local_date(value: dt.datetime) -> dt.date:
    """
    Calendar date of a timestamp as seen in local time.

    Aware timestamps are converted to the local zone first, so a local
    midnight serialized as UTC (e.g. "2025-04-30T22:00:00.000Z" from
    UTC+2) keeps its day. Naive timestamps are already local.
    """
    if value.tzinfo is not None:
        value = value.astimezone()
    return value.date()


def parse_iso_date(text: str) -> dt.date:
    """
    Parse an ISO date or timestamp into a calendar date.

    Raises:
        ValueError: if the text is not ISO 8601
    """
    text = text.strip()
    if "T" in text:
        return local_date(dt.datetime.fromisoformat(text.replace("Z", "+00:00")))
    return dt.date.fromisoformat(text)


# =============================================================================
# ENUMS
# =============================================================================

class TimeFilter(str, Enum):
    """Time windows offered by the category breakdown view."""
    WEEK = "week"    # last N days (N = week_window_days)
    MONTH = "month"  # current calendar month and year
    ALL = "all"      # no filter


# =============================================================================
# STORED ENTITIES
# =============================================================================

class Category(BaseModel):
    """
    A spending category.

    `color` and `icon` are display tokens; the core carries
    them through without interpreting them.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True, extra="ignore")

    id: str = Field(
        default_factory=new_id,
        min_length=1,
        description="Unique category ID"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Display name, unique case-insensitively"
    )
    color: str = Field(
        default="#E5DEFF",
        description="Display color token"
    )
    icon: str = Field(
        default="tag",
        description="Display icon token"
    )


class Expense(BaseModel):
    """
    A single recorded expense.

    `category` holds a Category id. The store guarantees it resolves
    at write time; readers must still tolerate a dangling reference.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True, extra="ignore")

    id: str = Field(
        default_factory=new_id,
        min_length=1,
        description="Unique expense ID, immutable after creation"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount spent, in the configured currency"
    )
    category: str = Field(
        ...,
        min_length=1,
        description="ID of the category this expense belongs to"
    )
    date: dt.date = Field(
        ...,
        description="Calendar date of the expense"
    )
    note: Optional[str] = Field(
        default=None,
        max_length=500,
        description="Free-text annotation"
    )

    @field_validator("date", mode="before")
    @classmethod
    def parse_timestamp(cls, v: object) -> object:
        """
        Accept full timestamps and keep only the calendar date.

        Older snapshots stored local midnight as a UTC timestamp
        (e.g. "2025-04-30T22:00:00.000Z" for May 1 in UTC+2).
        """
        if isinstance(v, dt.datetime):
            return local_date(v)
        if isinstance(v, str) and "T" in v:
            return parse_iso_date(v)
        return v

    @field_validator("note")
    @classmethod
    def blank_note_is_none(cls, v: Optional[str]) -> Optional[str]:
        """An empty note is stored as no note."""
        return v or None


class StoreSnapshot(BaseModel):
    """
    Point-in-time view of the store's two collections.

    Readers get one of these; later store mutations never change it.
    """
    model_config = ConfigDict(frozen=True)

    expenses: tuple[Expense, ...] = ()
    categories: tuple[Category, ...] = ()


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'duplicate')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


# =============================================================================
# AGGREGATION RESULTS
# =============================================================================

class CategoryTotal(BaseModel):
    """One row of the per-category breakdown."""

    category_id: str
    category_name: str
    total: Decimal
    color: str
    share: float = Field(
        default=0.0,
        ge=0.0,
        le=100.0,
        description="Percentage of the breakdown's grand total"
    )


class MonthPeriod(BaseModel):
    """A calendar month. `month` is 0-indexed (January = 0)."""
    model_config = ConfigDict(frozen=True)

    month: int = Field(..., ge=0, le=11)
    year: int = Field(..., ge=1, le=9999)
    label: str = Field(..., description="Short label, e.g. 'May 2025'")


class MonthlyTotal(MonthPeriod):
    """One bar of the monthly trend."""

    total: Decimal = Decimal("0")


class SpendingSummary(BaseModel):
    """
    Dashboard figures derived from one snapshot.

    Everything here is computed; nothing is stored.
    """

    generated_for: dt.date
    time_filter: TimeFilter = TimeFilter.ALL
    expense_count: int = Field(ge=0)
    total_to_date: Decimal
    month: int = Field(..., ge=0, le=11)
    year: int
    month_name: str
    month_total: Decimal
    average_per_day: Decimal
    by_category: list[CategoryTotal] = Field(default_factory=list)
    trend: list[MonthlyTotal] = Field(default_factory=list)
