"""
Store Event Logger

Every store mutation and every rejected operation is reported here.
The event logger:
- Writes each event to the structured local log at its severity
- Forwards each event to subscribed listeners (UI notifications)
- Keeps a bounded history of recent events
- Never lets a failing listener break the store operation that emitted it
"""

from collections import deque
from typing import Callable, Optional

import structlog

from expense_tracker.models.events import (
    EventSeverity,
    StoreEvent,
    StoreEventBuilder,
)


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


EventListener = Callable[[StoreEvent], None]


class StoreEventLogger:
    """
    Central event reporting for the store.

    Listeners receive every event in emission order. A listener is
    the presentation layer's hook for "Expense added successfully" /
    "Category already exists" style messages.
    """

    def __init__(self, history_size: int = 100):
        """
        Initialize event logger.

        Args:
            history_size: How many recent events to keep in memory.
                          0 disables the history.
        """
        self._logger = structlog.get_logger("expense_tracker.events")
        self._listeners: list[EventListener] = []
        self._history: deque[StoreEvent] = deque(maxlen=history_size)

    def subscribe(self, listener: EventListener) -> None:
        """Register a listener; registering the same one twice is a no-op."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: EventListener) -> None:
        """Remove a listener if registered."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def recent_events(self, limit: Optional[int] = None) -> list[StoreEvent]:
        """Most recent events, newest first."""
        events = list(reversed(self._history))
        return events if limit is None else events[:limit]

    def log(self, event: StoreEvent) -> StoreEvent:
        """
        Log an event and notify listeners.

        Returns the event so callers can chain on it.
        """
        log_dict = event.to_log_dict()

        if event.severity == EventSeverity.ERROR:
            self._logger.error("store_event", **log_dict)
        elif event.severity == EventSeverity.WARNING:
            self._logger.warning("store_event", **log_dict)
        elif event.severity == EventSeverity.DEBUG:
            self._logger.debug("store_event", **log_dict)
        else:
            self._logger.info("store_event", **log_dict)

        self._history.append(event)

        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "event_listener_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                    listener=getattr(listener, "__name__", repr(listener)),
                )

        return event

    def log_snapshot_loaded(self, expense_count: int, category_count: int) -> None:
        self.log(StoreEventBuilder.snapshot_loaded(expense_count, category_count))

    def log_snapshot_load_failed(self, key: str, error_message: str) -> None:
        self.log(StoreEventBuilder.snapshot_load_failed(key, error_message))

    def log_seed_restored(self, expense_count: int, category_count: int) -> None:
        self.log(StoreEventBuilder.seed_restored(expense_count, category_count))

    def log_expense_added(self, expense_id: str, amount: str, category_name: str) -> None:
        self.log(StoreEventBuilder.expense_added(expense_id, amount, category_name))

    def log_expense_updated(self, expense_id: str, amount: str, category_name: str) -> None:
        self.log(StoreEventBuilder.expense_updated(expense_id, amount, category_name))

    def log_expense_deleted(self, expense_id: str) -> None:
        self.log(StoreEventBuilder.expense_deleted(expense_id))

    def log_category_added(self, category_id: str, name: str) -> None:
        self.log(StoreEventBuilder.category_added(category_id, name))

    def log_category_deleted(self, category_id: str, name: str) -> None:
        self.log(StoreEventBuilder.category_deleted(category_id, name))

    def log_validation_failed(
        self,
        entity_type: str,
        entity_id: Optional[str],
        issues: list[dict],
    ) -> None:
        """Log a rejected write."""
        self.log(StoreEventBuilder.validation_failed(entity_type, entity_id, issues))

    def log_conflict(self, entity_type: str, entity_id: str, reason: str) -> None:
        self.log(StoreEventBuilder.conflict(entity_type, entity_id, reason))

    def log_not_found(self, entity_type: str, entity_id: str) -> None:
        self.log(StoreEventBuilder.not_found(entity_type, entity_id))

    def log_persist_failed(self, key: str, error_message: str) -> None:
        """Log a storage write that did not complete."""
        self.log(StoreEventBuilder.persist_failed(key, error_message))
