"""
Write-Boundary Validation

Every value that enters the store passes through here first.
The store calls the validator before touching its collections, so
a rejected write never changes state.

CHECKS:
- Expense amount: a finite number greater than zero
- Expense date: a real calendar date
- Expense category: an id that resolves against current categories
- Category name: non-blank and unique ignoring case

All issues in one call are collected and raised together as a
single ValidationError, so a form can mark every bad field at once.

IMPORTANT: Validation NEVER silently fixes issues beyond normalizing
representation (trimming a name, rounding an amount to cents).
"""

import datetime as dt
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Optional

from expense_tracker.errors import ValidationError
from expense_tracker.models.expense import (
    Category,
    ValidationIssue,
    local_date,
    parse_iso_date,
)


CENTS = Decimal("0.01")
_GROUPED_NUMBER = re.compile(r"^[+-]?\d{1,3}(,\d{3})+(\.\d*)?$")


class ExpenseValidator:
    """Validates expense and category input against the current snapshot."""

    def coerce_amount(self, amount: object) -> Optional[Decimal]:
        """
        Convert a caller-supplied amount to Decimal cents.

        Returns None if the value is not a finite number.
        """
        if isinstance(amount, bool):
            return None
        if isinstance(amount, Decimal):
            value = amount
        elif isinstance(amount, int):
            value = Decimal(amount)
        elif isinstance(amount, float):
            value = Decimal(str(amount))
        elif isinstance(amount, str):
            text = amount.strip()
            if "," in text:
                # Only thousands grouping ("1,234.50"); "1,5" is not 15
                if not _GROUPED_NUMBER.match(text):
                    return None
                text = text.replace(",", "")
            try:
                value = Decimal(text)
            except InvalidOperation:
                return None
        else:
            return None

        if not value.is_finite():
            return None
        try:
            return value.quantize(CENTS, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            # More digits than the decimal context can hold
            return None

    def coerce_date(self, value: object) -> Optional[dt.date]:
        """
        Convert a caller-supplied date to a calendar date.

        Accepts date, datetime (local date kept) and ISO strings.
        Returns None if the value does not name a real date.
        """
        if isinstance(value, dt.datetime):
            return local_date(value)
        if isinstance(value, dt.date):
            return value
        if isinstance(value, str):
            try:
                return parse_iso_date(value)
            except ValueError:
                return None
        return None

    def validate_expense(
        self,
        amount: object,
        category_id: object,
        expense_date: object,
        categories: Iterable[Category],
    ) -> tuple[Decimal, dt.date]:
        """
        Validate expense fields.

        Returns:
            (amount, date) in their canonical types

        Raises:
            ValidationError: listing every problem found
        """
        issues: list[ValidationIssue] = []

        coerced_amount = self.coerce_amount(amount)
        if coerced_amount is None:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message="Please enter a valid amount",
                severity="error",
                suggested_fix="Enter a number such as 12.50",
            ))
        elif coerced_amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be positive",
                severity="error",
            ))

        coerced_date = self.coerce_date(expense_date)
        if coerced_date is None:
            issues.append(ValidationIssue(
                field="date",
                issue_type="invalid_format",
                message="Please select a valid date",
                severity="error",
                suggested_fix="Use YYYY-MM-DD",
            ))

        known_ids = {category.id for category in categories}
        if not isinstance(category_id, str) or category_id not in known_ids:
            issues.append(ValidationIssue(
                field="category",
                issue_type="unknown_reference",
                message="Please select a valid category",
                severity="error",
            ))

        if issues:
            raise ValidationError(issues)

        return coerced_amount, coerced_date

    def validate_category_name(
        self,
        name: object,
        categories: Iterable[Category],
    ) -> str:
        """
        Validate a new category name.

        Returns:
            The trimmed name

        Raises:
            ValidationError: if blank or already taken (ignoring case)
        """
        if not isinstance(name, str) or not name.strip():
            raise ValidationError.single(
                field="name",
                issue_type="missing",
                message="Category name cannot be empty",
            )

        trimmed = name.strip()
        wanted = trimmed.casefold()
        for category in categories:
            if category.name.strip().casefold() == wanted:
                raise ValidationError.single(
                    field="name",
                    issue_type="duplicate",
                    message="Category already exists",
                    suggested_fix=f"Use the existing '{category.name}' category",
                )

        return trimmed
