"""
Store Exceptions

Every failure the store reports to its caller is one of these.
None of them is fatal: the operation that raised it left the
store's collections exactly as they were.
"""

from typing import Optional

from expense_tracker.models.expense import ValidationIssue


class ExpenseTrackerError(Exception):
    """Base exception for store operations."""
    pass


class ValidationError(ExpenseTrackerError):
    """
    Caller-supplied data failed a precondition.

    Carries every issue found, not just the first, so a form
    can flag all offending fields at once.
    """

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = list(issues)
        super().__init__("; ".join(issue.message for issue in self.issues))

    @property
    def fields(self) -> list[str]:
        """Names of the fields with at least one issue."""
        return [issue.field for issue in self.issues]

    @classmethod
    def single(
        cls,
        field: str,
        issue_type: str,
        message: str,
        suggested_fix: Optional[str] = None,
    ) -> "ValidationError":
        """Build an error carrying a single error-level issue."""
        return cls([
            ValidationIssue(
                field=field,
                issue_type=issue_type,
                message=message,
                severity="error",
                suggested_fix=suggested_fix,
            )
        ])


class ConflictError(ExpenseTrackerError):
    """Operation would break an invariant (e.g. deleting a category in use)."""
    pass


class NotFoundError(ExpenseTrackerError):
    """Entity not found in the store."""
    pass
