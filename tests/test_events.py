"""Tests for the store event logger."""

from expense_tracker.events import StoreEventLogger
from expense_tracker.models import StoreEventBuilder, StoreEventType


class TestStoreEventLogger:
    """Tests for listener dispatch and history."""

    def test_listener_receives_events(self):
        event_logger = StoreEventLogger()
        received = []
        event_logger.subscribe(received.append)

        event_logger.log_expense_deleted("abc")

        assert len(received) == 1
        assert received[0].event_type == StoreEventType.EXPENSE_DELETED

    def test_subscribe_twice_delivers_once(self):
        event_logger = StoreEventLogger()
        received = []
        event_logger.subscribe(received.append)
        event_logger.subscribe(received.append)
        event_logger.log_category_added("9", "Pets")
        assert len(received) == 1

    def test_unsubscribe(self):
        event_logger = StoreEventLogger()
        received = []
        event_logger.subscribe(received.append)
        event_logger.unsubscribe(received.append)
        event_logger.unsubscribe(received.append)
        event_logger.log_category_added("9", "Pets")
        assert received == []

    def test_failing_listener_does_not_propagate(self):
        """Test that one broken listener neither raises nor starves others."""
        event_logger = StoreEventLogger()
        received = []

        def broken(event):
            raise RuntimeError("toast widget gone")

        event_logger.subscribe(broken)
        event_logger.subscribe(received.append)

        event = event_logger.log(StoreEventBuilder.expense_deleted("abc"))

        assert received == [event]

    def test_history_is_newest_first_and_bounded(self):
        event_logger = StoreEventLogger(history_size=2)
        event_logger.log_expense_deleted("1")
        event_logger.log_expense_deleted("2")
        event_logger.log_expense_deleted("3")

        recent = event_logger.recent_events()
        assert [e.entity_id for e in recent] == ["3", "2"]
        assert [e.entity_id for e in event_logger.recent_events(limit=1)] == ["3"]

    def test_persist_failed_is_error(self):
        event_logger = StoreEventLogger()
        event_logger.log_persist_failed("expenses", "quota exceeded")
        event = event_logger.recent_events()[0]
        assert event.is_failure is True
        assert event.error_message == "quota exceeded"
