"""Tests for the expense store: CRUD, integrity rules and persistence."""

import json
from datetime import date, datetime
from decimal import Decimal

import pytest

from expense_tracker.errors import ConflictError, NotFoundError, ValidationError
from expense_tracker.events import StoreEventLogger
from expense_tracker.models import Category, Expense, StoreEventType
from expense_tracker.services.storage import (
    InMemoryKeyValueStorage,
    KeyValueStorageInterface,
    StorageWriteError,
)
from expense_tracker.store import ExpenseStore


class FailingWriteStorage(InMemoryKeyValueStorage):
    """Reads work, every write fails."""

    def set(self, key, value):
        raise StorageWriteError("quota exceeded")


class ExpensesKeyFailingStorage(InMemoryKeyValueStorage):
    """Writes to the expenses key fail, every other key works."""

    def set(self, key, value):
        if key == "expenses":
            raise StorageWriteError("expenses file locked")
        super().set(key, value)


class BrokenReadStorage(KeyValueStorageInterface):
    """Every read fails."""

    def get(self, key):
        raise OSError("disk unavailable")

    def set(self, key, value):
        pass


def _expense_for_category(store, category_id):
    return next(e for e in store.expenses if e.category == category_id)


class TestStoreLoading:
    """Tests for initial snapshot loading."""

    def test_empty_storage_loads_seed_data(self, store):
        """Test that a fresh store holds the sample data."""
        assert len(store.expenses) == 5
        assert len(store.categories) == 7
        assert store.is_loaded is True

    def test_seed_categories(self, store):
        names = [c.name for c in store.categories]
        assert names == [
            "Food", "Transportation", "Entertainment", "Bills",
            "Shopping", "Health", "Other",
        ]
        assert store.get_category_by_id("1").name == "Food"

    def test_seed_expenses_dated_may_2025(self, store):
        assert all(e.date.year == 2025 and e.date.month == 5 for e in store.expenses)

    def test_store_before_load_is_empty(self, storage):
        store = ExpenseStore(storage)
        assert store.expenses == ()
        assert store.is_loaded is False

    def test_corrupt_expenses_fall_back_to_seed(self):
        """Test that an unparseable key falls back on its own."""
        categories = [{"id": "x", "name": "Only", "color": "#000", "icon": "tag"}]
        storage = InMemoryKeyValueStorage({
            "expenses": "{not json",
            "categories": json.dumps(categories),
        })
        event_logger = StoreEventLogger()
        store = ExpenseStore.open(storage, event_logger=event_logger)

        assert len(store.expenses) == 5
        assert [c.name for c in store.categories] == ["Only"]
        failed = [
            e for e in event_logger.recent_events()
            if e.event_type == StoreEventType.SNAPSHOT_LOAD_FAILED
        ]
        assert len(failed) == 1
        assert failed[0].entity_id == "expenses"

    def test_invalid_record_falls_back_to_seed(self):
        """Test that a payload with a bad record is rejected as a whole."""
        storage = InMemoryKeyValueStorage({
            "expenses": json.dumps([
                {"id": "a", "amount": -3, "category": "1", "date": "2025-01-01"},
            ]),
        })
        store = ExpenseStore.open(storage)
        assert len(store.expenses) == 5

    def test_unreadable_storage_falls_back_to_seed(self):
        store = ExpenseStore.open(BrokenReadStorage())
        assert len(store.expenses) == 5
        assert len(store.categories) == 7

    def test_legacy_timestamp_payload_loads_dates(self, central_european_time):
        """Test that stored ISO timestamps come back as calendar dates."""
        storage = InMemoryKeyValueStorage({
            "expenses": json.dumps([{
                "id": "legacy",
                "amount": 12.5,
                "category": "1",
                "date": "2025-03-10T00:00:00.000Z",
                "note": "old format",
            }]),
        })
        store = ExpenseStore.open(storage)
        expense = store.get_expense_by_id("legacy")
        assert expense.date == date(2025, 3, 10)
        assert isinstance(expense.date, date)
        assert expense.amount == Decimal("12.5")

    def test_legacy_utc_midnight_keeps_local_day(self, central_european_time):
        """Test that local midnight saved as UTC stays in its own month."""
        storage = InMemoryKeyValueStorage({
            "expenses": json.dumps([{
                "id": "x",
                "amount": 25.5,
                "category": "1",
                "date": "2025-04-30T22:00:00.000Z",
            }]),
        })
        store = ExpenseStore.open(storage)

        assert store.get_expense_by_id("x").date == date(2025, 5, 1)
        assert store.get_monthly_total(4, 2025) == Decimal("25.5")
        assert store.get_monthly_total(3, 2025) == 0

    def test_custom_keys(self, storage):
        store = ExpenseStore.open(
            storage, expenses_key="my_expenses", categories_key="my_categories"
        )
        store.add_expense("1.00", "1", date(2025, 1, 1))
        assert storage.get("my_expenses") is not None
        assert storage.get("my_categories") is not None
        assert storage.get("expenses") is None


class TestAddExpense:
    """Tests for adding expenses."""

    def test_add_expense_increments_count(self, store):
        """Test that a valid add grows the collection by one."""
        before = len(store.expenses)
        expense = store.add_expense(Decimal("42.10"), "6", date(2025, 6, 1), "Pharmacy")
        assert len(store.expenses) == before + 1
        assert store.get_expense_by_id(expense.id) == expense
        assert expense.amount == Decimal("42.10")
        assert expense.category == "6"
        assert expense.date == date(2025, 6, 1)
        assert expense.note == "Pharmacy"

    def test_add_expense_appends_at_end(self, store):
        expense = store.add_expense(1, "1", date(2025, 1, 1))
        assert store.expenses[-1].id == expense.id

    def test_add_expense_coerces_inputs(self, store):
        """Test that floats, strings and datetimes are normalized."""
        expense = store.add_expense("19.999", "2", "2025-06-02")
        assert expense.amount == Decimal("20.00")
        assert expense.date == date(2025, 6, 2)

        expense = store.add_expense(3.1, "2", datetime(2025, 6, 3, 14, 0))
        assert expense.amount == Decimal("3.10")
        assert expense.date == date(2025, 6, 3)

    def test_add_expense_reads_timestamps_in_local_time(self, store, central_european_time):
        """Test that UTC and offset timestamps land on the local day."""
        expense = store.add_expense("5", "1", "2025-04-30T22:00:00Z")
        assert expense.date == date(2025, 5, 1)

        expense = store.add_expense("5", "1", "2025-05-31T23:30:00-01:00")
        assert expense.date == date(2025, 6, 1)

    @pytest.mark.parametrize("amount,expected", [
        ("1,234.50", Decimal("1234.50")),
        ("12,000", Decimal("12000.00")),
        (" 1,000,000.5 ", Decimal("1000000.50")),
    ])
    def test_thousands_separators_accepted(self, store, amount, expected):
        expense = store.add_expense(amount, "1", date(2025, 6, 1))
        assert expense.amount == expected

    @pytest.mark.parametrize("amount", ["1,5", "12,34", "1,2345", ",100", "1,,000"])
    def test_misplaced_comma_rejected(self, store, amount):
        """Test that a decimal comma is not read as a thousands separator."""
        with pytest.raises(ValidationError) as exc_info:
            store.add_expense(amount, "1", date(2025, 6, 1))
        assert exc_info.value.fields == ["amount"]
        assert len(store.expenses) == 5

    @pytest.mark.parametrize("amount", [0, -1, Decimal("-0.01"), "0", "0.001"])
    def test_non_positive_amount_rejected(self, store, amount):
        """Test that non-positive amounts leave the collection unchanged."""
        before = store.expenses
        with pytest.raises(ValidationError) as exc_info:
            store.add_expense(amount, "1", date(2025, 6, 1))
        assert exc_info.value.fields == ["amount"]
        assert store.expenses == before

    @pytest.mark.parametrize("amount", ["abc", None, True, float("nan"), float("inf")])
    def test_non_numeric_amount_rejected(self, store, amount):
        with pytest.raises(ValidationError):
            store.add_expense(amount, "1", date(2025, 6, 1))
        assert len(store.expenses) == 5

    @pytest.mark.parametrize("bad_date", ["2025-02-30", "yesterday", None, 20250101])
    def test_invalid_date_rejected(self, store, bad_date):
        with pytest.raises(ValidationError) as exc_info:
            store.add_expense("5", "1", bad_date)
        assert exc_info.value.fields == ["date"]
        assert len(store.expenses) == 5

    def test_unknown_category_rejected(self, store):
        """Test that a category id must resolve."""
        with pytest.raises(ValidationError) as exc_info:
            store.add_expense("5", "new-category", date(2025, 6, 1))
        assert exc_info.value.fields == ["category"]
        assert len(store.expenses) == 5

    def test_all_issues_reported_together(self, store):
        with pytest.raises(ValidationError) as exc_info:
            store.add_expense("-5", "nope", "not-a-date")
        assert sorted(exc_info.value.fields) == ["amount", "category", "date"]

    def test_overlong_note_rejected(self, store):
        with pytest.raises(ValidationError) as exc_info:
            store.add_expense("5", "1", date(2025, 6, 1), "x" * 501)
        assert exc_info.value.fields == ["note"]
        assert len(store.expenses) == 5

    def test_add_expense_persists(self, store, storage):
        expense = store.add_expense("5", "1", date(2025, 6, 1))
        stored = json.loads(storage.get("expenses"))
        assert stored[-1]["id"] == expense.id
        assert stored[-1]["date"] == "2025-06-01"

    def test_add_expense_emits_event(self, store, event_logger):
        received = []
        event_logger.subscribe(received.append)
        expense = store.add_expense("5", "1", date(2025, 6, 1))
        assert received[-1].event_type == StoreEventType.EXPENSE_ADDED
        assert received[-1].entity_id == expense.id
        assert received[-1].details["category"] == "Food"

    def test_rejected_add_emits_warning(self, store, event_logger):
        received = []
        event_logger.subscribe(received.append)
        with pytest.raises(ValidationError):
            store.add_expense("0", "1", date(2025, 6, 1))
        assert received[-1].event_type == StoreEventType.VALIDATION_FAILED
        assert received[-1].is_failure is True


class TestUpdateExpense:
    """Tests for updating expenses."""

    def test_update_replaces_fields_in_place(self, store):
        """Test that update keeps id and position."""
        target = store.expenses[2]
        updated = store.update_expense(target.id, "99.99", "7", date(2025, 7, 7), "Changed")

        assert updated.id == target.id
        assert store.expenses[2] == updated
        assert updated.amount == Decimal("99.99")
        assert updated.category == "7"
        assert updated.note == "Changed"
        assert len(store.expenses) == 5

    def test_update_can_clear_note(self, store):
        target = store.expenses[0]
        updated = store.update_expense(target.id, "1", "1", date(2025, 1, 1))
        assert updated.note is None

    def test_update_unknown_id_raises(self, store):
        """Test that a missing id is reported, not ignored."""
        before = store.expenses
        with pytest.raises(NotFoundError):
            store.update_expense("missing", "5", "1", date(2025, 6, 1))
        assert store.expenses == before

    def test_update_validates_like_add(self, store):
        target = store.expenses[0]
        with pytest.raises(ValidationError):
            store.update_expense(target.id, "-1", "1", date(2025, 6, 1))
        with pytest.raises(ValidationError):
            store.update_expense(target.id, "1", "missing", date(2025, 6, 1))
        assert store.expenses[0] == target

    def test_update_persists(self, store, storage):
        target = store.expenses[0]
        store.update_expense(target.id, "1.00", "1", date(2025, 1, 1))
        stored = json.loads(storage.get("expenses"))
        assert Decimal(stored[0]["amount"]) == Decimal("1.00")


class TestDeleteExpense:
    """Tests for deleting expenses."""

    def test_delete_removes_expense(self, store):
        target = store.expenses[1]
        assert store.delete_expense(target.id) is True
        assert store.get_expense_by_id(target.id) is None
        assert len(store.expenses) == 4

    def test_delete_is_idempotent(self, store):
        """Test that deleting a missing id is a silent no-op."""
        target = store.expenses[1]
        store.delete_expense(target.id)
        assert store.delete_expense(target.id) is False
        assert store.delete_expense("never-existed") is False
        assert len(store.expenses) == 4

    def test_noop_delete_does_not_write(self, store, storage):
        assert storage.get("expenses") is None
        store.delete_expense("never-existed")
        assert storage.get("expenses") is None


class TestCategories:
    """Tests for category operations."""

    def test_add_category(self, store):
        category = store.add_category("  Pets  ", "#123456", "paw")
        assert category.name == "Pets"
        assert category.color == "#123456"
        assert store.get_category_by_id(category.id) == category
        assert len(store.categories) == 8

    def test_add_category_defaults(self, store):
        category = store.add_category("Travel")
        assert category.color == "#E5DEFF"
        assert category.icon == "tag"

    def test_duplicate_name_case_insensitive(self, store):
        """Test that 'food' collides with 'Food'."""
        with pytest.raises(ValidationError) as exc_info:
            store.add_category("food", "#fff", "tag")
        assert exc_info.value.issues[0].issue_type == "duplicate"
        assert len(store.categories) == 7

    def test_duplicate_name_after_trim(self, store):
        with pytest.raises(ValidationError):
            store.add_category("  BILLS ")

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_name_rejected(self, store, name):
        with pytest.raises(ValidationError):
            store.add_category(name)
        assert len(store.categories) == 7

    def test_new_category_usable_for_expenses(self, store):
        category = store.add_category("Pets")
        expense = store.add_expense("12", category.id, date(2025, 6, 1))
        assert expense.category == category.id

    def test_delete_unused_category(self, store):
        """Test that an unreferenced category can be removed."""
        assert store.delete_category("6") is True
        assert store.get_category_by_id("6") is None
        assert len(store.categories) == 6

    def test_delete_missing_category_is_noop(self, store):
        assert store.delete_category("nope") is False
        assert len(store.categories) == 7

    def test_delete_category_in_use_conflicts(self, store):
        """Test deleting Food conflicts until its expense is gone."""
        with pytest.raises(ConflictError):
            store.delete_category("1")
        assert store.get_category_by_id("1") is not None

        store.delete_expense(_expense_for_category(store, "1").id)
        assert store.delete_category("1") is True
        assert store.get_category_by_id("1") is None

    def test_conflict_iff_referenced(self, store):
        """Test that conflicts happen exactly for referenced categories."""
        referenced = {e.category for e in store.expenses}
        for category in list(store.categories):
            if category.id in referenced:
                with pytest.raises(ConflictError):
                    store.delete_category(category.id)
            else:
                assert store.delete_category(category.id) is True
        assert {c.id for c in store.categories} == referenced

    def test_conflict_emits_event(self, store, event_logger):
        received = []
        event_logger.subscribe(received.append)
        with pytest.raises(ConflictError):
            store.delete_category("2")
        assert received[-1].event_type == StoreEventType.CONFLICT


class TestPersistence:
    """Tests for the persistence round trip."""

    def test_round_trip_preserves_snapshot(self, store, storage):
        """Test that reloading yields equal expenses and categories."""
        store.add_category("Pets")
        store.add_expense("7.25", "1", date(2024, 2, 29), "Leap day lunch")
        store.delete_expense(store.expenses[0].id)

        reloaded = ExpenseStore.open(storage)

        assert reloaded.expenses == store.expenses
        assert reloaded.categories == store.categories
        assert all(isinstance(e.date, date) for e in reloaded.expenses)

    def test_writes_both_keys(self, store, storage):
        store.add_category("Pets")
        assert json.loads(storage.get("categories"))[-1]["name"] == "Pets"
        assert len(json.loads(storage.get("expenses"))) == 5

    def test_write_failure_keeps_memory_state(self):
        """Test that a failed write is reported but not fatal."""
        event_logger = StoreEventLogger()
        store = ExpenseStore.open(FailingWriteStorage(), event_logger=event_logger)

        expense = store.add_expense("5", "1", date(2025, 6, 1))

        assert store.get_expense_by_id(expense.id) == expense
        assert store.last_persist_error == "quota exceeded"
        types = [e.event_type for e in event_logger.recent_events()]
        assert StoreEventType.PERSIST_FAILED in types
        assert StoreEventType.EXPENSE_ADDED in types

    def test_failed_key_does_not_block_other_key(self):
        """Test that categories are still written when expenses fail."""
        storage = ExpensesKeyFailingStorage()
        event_logger = StoreEventLogger()
        store = ExpenseStore.open(storage, event_logger=event_logger)

        category = store.add_category("Pets")

        stored = json.loads(storage.get("categories"))
        assert stored[-1]["id"] == category.id
        assert storage.get("expenses") is None
        assert store.last_persist_error == "expenses file locked"
        failed = [
            e for e in event_logger.recent_events()
            if e.event_type == StoreEventType.PERSIST_FAILED
        ]
        assert [e.entity_id for e in failed] == ["expenses"]

    def test_every_failed_key_reported(self):
        event_logger = StoreEventLogger()
        store = ExpenseStore.open(FailingWriteStorage(), event_logger=event_logger)

        store.add_expense("5", "1", date(2025, 6, 1))

        failed = [
            e.entity_id for e in event_logger.recent_events()
            if e.event_type == StoreEventType.PERSIST_FAILED
        ]
        # recent_events is newest first
        assert failed == ["categories", "expenses"]

    def test_successful_write_clears_error(self):
        storage = FailingWriteStorage()
        store = ExpenseStore.open(storage)
        store.add_expense("5", "1", date(2025, 6, 1))
        assert store.last_persist_error is not None

        store._storage = InMemoryKeyValueStorage()
        store.add_expense("6", "1", date(2025, 6, 1))
        assert store.last_persist_error is None

    def test_reset_to_seed(self, store, storage):
        store.add_category("Pets")
        store.delete_expense(store.expenses[0].id)

        snapshot = store.reset_to_seed()

        assert len(snapshot.expenses) == 5
        assert len(snapshot.categories) == 7
        assert len(json.loads(storage.get("categories"))) == 7


class TestSnapshots:
    """Tests for read access."""

    def test_snapshot_unchanged_by_later_mutation(self, store):
        snapshot = store.snapshot()
        store.add_expense("5", "1", date(2025, 6, 1))
        assert len(snapshot.expenses) == 5
        assert len(store.snapshot().expenses) == 6

    def test_collections_are_read_only(self, store):
        assert isinstance(store.expenses, tuple)
        assert isinstance(store.categories, tuple)

    def test_get_category_by_id_missing(self, store):
        assert store.get_category_by_id("missing") is None

    def test_store_totals(self, store):
        assert store.get_total_expenses() == Decimal("264.38")
        assert store.get_monthly_total(4, 2025) == Decimal("264.38")
        assert store.get_monthly_total(5, 2025) == Decimal("0")

    def test_loaded_records_are_models(self, store):
        assert all(isinstance(e, Expense) for e in store.expenses)
        assert all(isinstance(c, Category) for c in store.categories)
