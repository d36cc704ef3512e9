"""
Store Event Models

Every store mutation, rejected write, and storage problem produces a
StoreEvent. Events are what the presentation layer listens to for its
success/failure notifications, and what ends up in the structured log.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StoreEventType(str, Enum):
    """Types of events the store emits."""
    # Lifecycle
    SNAPSHOT_LOADED = "snapshot_loaded"
    SNAPSHOT_LOAD_FAILED = "snapshot_load_failed"
    SEED_RESTORED = "seed_restored"

    # Expenses
    EXPENSE_ADDED = "expense_added"
    EXPENSE_UPDATED = "expense_updated"
    EXPENSE_DELETED = "expense_deleted"

    # Categories
    CATEGORY_ADDED = "category_added"
    CATEGORY_DELETED = "category_deleted"

    # Rejected operations
    VALIDATION_FAILED = "validation_failed"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"

    # Persistence
    PERSIST_FAILED = "persist_failed"


class EventSeverity(str, Enum):
    """Severity level for store events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class StoreEvent(BaseModel):
    """A single store event."""

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Classification
    event_type: StoreEventType = Field(
        ...,
        description="Type of event"
    )
    severity: EventSeverity = Field(
        default=EventSeverity.INFO,
        description="Event severity"
    )

    # What entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity ('expense', 'category', 'snapshot')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    @property
    def is_failure(self) -> bool:
        """Whether this event reports something that did not go as asked."""
        return self.severity in (EventSeverity.WARNING, EventSeverity.ERROR)

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class StoreEventBuilder:
    """
    Helper class to build store events with common patterns.

    Usage:
        event = StoreEventBuilder.expense_added(expense_id, amount, category_name)
        event = StoreEventBuilder.conflict("category", category_id, reason)
    """

    @staticmethod
    def snapshot_loaded(expense_count: int, category_count: int) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.SNAPSHOT_LOADED,
            entity_type="snapshot",
            description=(
                f"Loaded {expense_count} expenses and {category_count} categories"
            ),
            details={
                "expense_count": expense_count,
                "category_count": category_count,
            },
        )

    @staticmethod
    def snapshot_load_failed(key: str, error_message: str) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.SNAPSHOT_LOAD_FAILED,
            severity=EventSeverity.WARNING,
            entity_type="snapshot",
            entity_id=key,
            description=f"Could not read '{key}', using defaults",
            error_message=error_message,
        )

    @staticmethod
    def seed_restored(expense_count: int, category_count: int) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.SEED_RESTORED,
            entity_type="snapshot",
            description="Store reset to sample data",
            details={
                "expense_count": expense_count,
                "category_count": category_count,
            },
        )

    @staticmethod
    def expense_added(expense_id: str, amount: str, category_name: str) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=expense_id,
            description="Expense added successfully",
            details={"amount": amount, "category": category_name},
        )

    @staticmethod
    def expense_updated(expense_id: str, amount: str, category_name: str) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.EXPENSE_UPDATED,
            entity_type="expense",
            entity_id=expense_id,
            description="Expense updated successfully",
            details={"amount": amount, "category": category_name},
        )

    @staticmethod
    def expense_deleted(expense_id: str) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.EXPENSE_DELETED,
            entity_type="expense",
            entity_id=expense_id,
            description="Expense deleted successfully",
        )

    @staticmethod
    def category_added(category_id: str, name: str) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.CATEGORY_ADDED,
            entity_type="category",
            entity_id=category_id,
            description="Category added successfully",
            details={"name": name},
        )

    @staticmethod
    def category_deleted(category_id: str, name: str) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.CATEGORY_DELETED,
            entity_type="category",
            entity_id=category_id,
            description="Category deleted successfully",
            details={"name": name},
        )

    @staticmethod
    def validation_failed(
        entity_type: str,
        entity_id: Optional[str],
        issues: list[dict],
    ) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.VALIDATION_FAILED,
            severity=EventSeverity.WARNING,
            entity_type=entity_type,
            entity_id=entity_id,
            description=issues[0]["message"] if issues else "Validation failed",
            details={"issues": issues},
        )

    @staticmethod
    def conflict(entity_type: str, entity_id: str, reason: str) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.CONFLICT,
            severity=EventSeverity.WARNING,
            entity_type=entity_type,
            entity_id=entity_id,
            description=reason,
        )

    @staticmethod
    def not_found(entity_type: str, entity_id: str) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.NOT_FOUND,
            severity=EventSeverity.WARNING,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"No {entity_type} with id {entity_id}",
        )

    @staticmethod
    def persist_failed(key: str, error_message: str) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.PERSIST_FAILED,
            severity=EventSeverity.ERROR,
            entity_type="snapshot",
            entity_id=key,
            description="Changes could not be saved; they are kept for this session",
            error_message=error_message,
        )
