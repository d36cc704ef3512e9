"""
Component Wiring for Expense Tracker

Builds one session's worth of components from settings:
storage → validator → event logger → loaded store.

Nothing here is global. Call create_app_components() once per
session and hand the returned store to whoever needs it.
"""

import datetime as dt
from typing import Optional, Union

from expense_tracker.aggregation.views import (
    paginate,
    sort_newest_first,
    summarize,
)
from expense_tracker.config import get_settings
from expense_tracker.config.settings import StorageSettings
from expense_tracker.events import StoreEventLogger
from expense_tracker.models.expense import Expense, SpendingSummary, TimeFilter
from expense_tracker.services.storage import (
    InMemoryKeyValueStorage,
    JsonFileKeyValueStorage,
    KeyValueStorageInterface,
)
from expense_tracker.store import ExpenseStore
from expense_tracker.validation import ExpenseValidator


def create_storage(settings: StorageSettings) -> KeyValueStorageInterface:
    """Storage backend named by the settings."""
    if settings.backend == "memory":
        return InMemoryKeyValueStorage()
    return JsonFileKeyValueStorage(settings.data_dir)


def create_app_components(
    use_storage: bool = True,
    storage: Optional[KeyValueStorageInterface] = None,
) -> tuple[ExpenseStore, StoreEventLogger]:
    """
    Create a loaded store and its event logger.

    Args:
        use_storage: If False, the session is kept in memory only.
        storage: Explicit backend; overrides settings and use_storage.

    Returns:
        (store, event_logger)
    """
    settings = get_settings()
    storage_settings = settings.storage

    if storage is None:
        storage = create_storage(storage_settings) if use_storage else InMemoryKeyValueStorage()

    event_logger = StoreEventLogger(history_size=settings.app.event_history_size)

    store = ExpenseStore.open(
        storage,
        validator=ExpenseValidator(),
        event_logger=event_logger,
        expenses_key=storage_settings.expenses_key,
        categories_key=storage_settings.categories_key,
    )
    return store, event_logger


def build_summary(
    store: ExpenseStore,
    today: Optional[dt.date] = None,
    time_filter: Union[TimeFilter, str] = TimeFilter.ALL,
) -> SpendingSummary:
    """Dashboard summary of the store's current snapshot, using app settings."""
    app_settings = get_settings().app
    snapshot = store.snapshot()
    return summarize(
        snapshot.expenses,
        snapshot.categories,
        today=today,
        time_filter=time_filter,
        week_days=app_settings.week_window_days,
        trend_months=app_settings.trend_months,
    )


def expense_page(store: ExpenseStore, page: int = 0) -> list[Expense]:
    """One page of the expense list, newest first, sized by app settings."""
    per_page = get_settings().app.items_per_page
    return paginate(sort_newest_first(store.expenses), page, per_page)
