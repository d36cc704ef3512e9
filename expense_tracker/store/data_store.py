"""
Expense Store

The single source of truth for expenses and categories.

Flow for every mutation:
1. Validate → reject with ValidationError / ConflictError / NotFoundError,
   state untouched
2. Apply → replace the in-memory collection
3. Persist → write both collections to storage
4. Notify → emit a store event

A storage write failure does not undo step 2: the in-memory snapshot
stays authoritative for the rest of the session, the failure is
reported as a persist_failed event and kept in `last_persist_error`.

The store is an ordinary object. Build one per session, call load(),
and pass the instance to whoever needs it.
"""

from decimal import Decimal
from typing import Callable, Optional, TypeVar

import structlog
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from expense_tracker.aggregation.engine import monthly_total, total_of
from expense_tracker.errors import ConflictError, NotFoundError, ValidationError
from expense_tracker.events.logger import StoreEventLogger
from expense_tracker.models.expense import (
    Category,
    Expense,
    StoreSnapshot,
    ValidationIssue,
)
from expense_tracker.services.storage.interface import (
    KeyValueStorageInterface,
    StorageError,
)
from expense_tracker.store.seed import seed_categories, seed_expenses
from expense_tracker.validation.validator import ExpenseValidator


logger = structlog.get_logger(__name__)

T = TypeVar("T")

_EXPENSE_LIST = TypeAdapter(list[Expense])
_CATEGORY_LIST = TypeAdapter(list[Category])


def _issues_from_pydantic(error: PydanticValidationError) -> list[ValidationIssue]:
    """Translate a model construction error into store validation issues."""
    return [
        ValidationIssue(
            field=".".join(str(part) for part in item["loc"]) or "__root__",
            issue_type=item["type"],
            message=item["msg"],
            severity="error",
        )
        for item in error.errors()
    ]


class ExpenseStore:
    """
    Holds expenses and categories and keeps them in storage.

    Collections are replaced, never edited in place, so a snapshot
    handed out earlier is never changed by a later mutation.
    """

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        validator: Optional[ExpenseValidator] = None,
        event_logger: Optional[StoreEventLogger] = None,
        expenses_key: str = "expenses",
        categories_key: str = "categories",
    ):
        self._storage = storage
        self._validator = validator or ExpenseValidator()
        self._events = event_logger or StoreEventLogger()
        self._expenses_key = expenses_key
        self._categories_key = categories_key

        self._expenses: list[Expense] = []
        self._categories: list[Category] = []
        self._loaded = False

        self.last_persist_error: Optional[str] = None

    @classmethod
    def open(
        cls,
        storage: KeyValueStorageInterface,
        **kwargs,
    ) -> "ExpenseStore":
        """Build a store and load its initial snapshot."""
        store = cls(storage, **kwargs)
        store.load()
        return store

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def event_logger(self) -> StoreEventLogger:
        return self._events

    def load(self) -> StoreSnapshot:
        """
        Read both collections from storage.

        Each key falls back to the seed data on its own when absent,
        unreadable, or not a valid payload.
        """
        self._expenses = self._read_collection(
            self._expenses_key, _EXPENSE_LIST, seed_expenses
        )
        self._categories = self._read_collection(
            self._categories_key, _CATEGORY_LIST, seed_categories
        )
        self._loaded = True

        known = {category.id for category in self._categories}
        orphaned = [e.id for e in self._expenses if e.category not in known]
        if orphaned:
            logger.warning(
                "orphaned_expenses_loaded",
                count=len(orphaned),
                expense_ids=orphaned,
            )

        self._events.log_snapshot_loaded(len(self._expenses), len(self._categories))
        return self.snapshot()

    def reset_to_seed(self) -> StoreSnapshot:
        """Replace everything with the sample data and persist it."""
        self._expenses = seed_expenses()
        self._categories = seed_categories()
        self._loaded = True
        self._persist()
        self._events.log_seed_restored(len(self._expenses), len(self._categories))
        return self.snapshot()

    def _read_collection(
        self,
        key: str,
        adapter: TypeAdapter,
        default: Callable[[], list[T]],
    ) -> list[T]:
        try:
            raw = self._storage.get(key)
        except (StorageError, OSError) as e:
            self._events.log_snapshot_load_failed(key, str(e))
            return default()

        if raw is None:
            logger.info("storage_key_missing", key=key, storage=self._storage.describe())
            return default()

        try:
            return adapter.validate_json(raw)
        except PydanticValidationError as e:
            self._events.log_snapshot_load_failed(key, str(e))
            return default()

    def _persist(self) -> bool:
        """
        Write both collections. Returns False if any write failed.

        Each key is attempted even when the other fails, so one bad
        key never leaves the other stale. `last_persist_error` keeps
        the first failure.
        """
        writes = (
            (self._expenses_key, _EXPENSE_LIST.dump_json(self._expenses)),
            (self._categories_key, _CATEGORY_LIST.dump_json(self._categories)),
        )
        first_error: Optional[str] = None
        for key, payload in writes:
            try:
                self._storage.set(key, payload.decode("utf-8"))
            except (StorageError, OSError) as e:
                self._events.log_persist_failed(key, str(e))
                if first_error is None:
                    first_error = str(e)

        self.last_persist_error = first_error
        return first_error is None

    # =========================================================================
    # READ ACCESS
    # =========================================================================

    @property
    def expenses(self) -> tuple[Expense, ...]:
        return tuple(self._expenses)

    @property
    def categories(self) -> tuple[Category, ...]:
        return tuple(self._categories)

    def snapshot(self) -> StoreSnapshot:
        """Point-in-time copy of both collections."""
        return StoreSnapshot(
            expenses=tuple(self._expenses),
            categories=tuple(self._categories),
        )

    def get_category_by_id(self, category_id: str) -> Optional[Category]:
        for category in self._categories:
            if category.id == category_id:
                return category
        return None

    def get_expense_by_id(self, expense_id: str) -> Optional[Expense]:
        for expense in self._expenses:
            if expense.id == expense_id:
                return expense
        return None

    def get_total_expenses(self) -> Decimal:
        """Total of every expense in the store."""
        return total_of(self._expenses)

    def get_monthly_total(self, month: int, year: int) -> Decimal:
        """Total for a 0-indexed month."""
        return monthly_total(self._expenses, month, year)

    # =========================================================================
    # EXPENSES
    # =========================================================================

    def add_expense(
        self,
        amount: object,
        category: str,
        date: object,
        note: Optional[str] = None,
    ) -> Expense:
        """
        Record a new expense.

        Raises:
            ValidationError: bad amount, date, or unknown category
        """
        expense = self._build_expense(None, amount, category, date, note)

        self._expenses = [*self._expenses, expense]
        self._persist()
        self._events.log_expense_added(
            expense.id, str(expense.amount), self._category_name(expense.category)
        )
        return expense

    def update_expense(
        self,
        expense_id: str,
        amount: object,
        category: str,
        date: object,
        note: Optional[str] = None,
    ) -> Expense:
        """
        Replace every field of an existing expense except its id.

        The expense keeps its position in the collection.

        Raises:
            NotFoundError: no expense with this id
            ValidationError: bad amount, date, or unknown category
        """
        index = self._index_of_expense(expense_id)
        if index is None:
            self._events.log_not_found("expense", expense_id)
            raise NotFoundError(f"Expense not found: {expense_id}")

        updated = self._build_expense(expense_id, amount, category, date, note)

        expenses = list(self._expenses)
        expenses[index] = updated
        self._expenses = expenses
        self._persist()
        self._events.log_expense_updated(
            updated.id, str(updated.amount), self._category_name(updated.category)
        )
        return updated

    def delete_expense(self, expense_id: str) -> bool:
        """
        Remove an expense.

        Returns False (and does nothing) if there is no such expense.
        """
        if self._index_of_expense(expense_id) is None:
            return False

        self._expenses = [e for e in self._expenses if e.id != expense_id]
        self._persist()
        self._events.log_expense_deleted(expense_id)
        return True

    def _index_of_expense(self, expense_id: str) -> Optional[int]:
        for index, expense in enumerate(self._expenses):
            if expense.id == expense_id:
                return index
        return None

    def _build_expense(
        self,
        expense_id: Optional[str],
        amount: object,
        category: str,
        date: object,
        note: Optional[str],
    ) -> Expense:
        try:
            amount_value, date_value = self._validator.validate_expense(
                amount, category, date, self._categories
            )
            fields = {
                "amount": amount_value,
                "category": category,
                "date": date_value,
                "note": note,
            }
            if expense_id is not None:
                fields["id"] = expense_id
            try:
                return Expense(**fields)
            except PydanticValidationError as e:
                raise ValidationError(_issues_from_pydantic(e)) from e
        except ValidationError as e:
            self._events.log_validation_failed(
                "expense", expense_id, [issue.model_dump() for issue in e.issues]
            )
            raise

    # =========================================================================
    # CATEGORIES
    # =========================================================================

    def add_category(
        self,
        name: str,
        color: str = "#E5DEFF",
        icon: str = "tag",
    ) -> Category:
        """
        Create a category.

        Raises:
            ValidationError: blank name, or a name already used (ignoring case)
        """
        try:
            trimmed = self._validator.validate_category_name(name, self._categories)
            try:
                category = Category(name=trimmed, color=color, icon=icon)
            except PydanticValidationError as e:
                raise ValidationError(_issues_from_pydantic(e)) from e
        except ValidationError as e:
            self._events.log_validation_failed(
                "category", None, [issue.model_dump() for issue in e.issues]
            )
            raise

        self._categories = [*self._categories, category]
        self._persist()
        self._events.log_category_added(category.id, category.name)
        return category

    def delete_category(self, category_id: str) -> bool:
        """
        Remove a category that no expense uses.

        Returns False (and does nothing) if there is no such category.

        Raises:
            ConflictError: at least one expense references the category
        """
        in_use = sum(1 for e in self._expenses if e.category == category_id)
        if in_use:
            reason = "Can't delete category with existing expenses"
            self._events.log_conflict("category", category_id, reason)
            raise ConflictError(f"{reason} ({in_use} using it)")

        category = self.get_category_by_id(category_id)
        if category is None:
            return False

        self._categories = [c for c in self._categories if c.id != category_id]
        self._persist()
        self._events.log_category_deleted(category_id, category.name)
        return True

    def _category_name(self, category_id: str) -> str:
        category = self.get_category_by_id(category_id)
        return category.name if category else category_id
