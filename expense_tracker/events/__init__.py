"""Store event logging package."""

from expense_tracker.events.logger import EventListener, StoreEventLogger

__all__ = ["EventListener", "StoreEventLogger"]
