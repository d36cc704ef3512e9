"""Shared fixtures: a fresh in-memory store per test."""

import os
import time

import pytest

from expense_tracker.config import get_settings
from expense_tracker.events import StoreEventLogger
from expense_tracker.services.storage import InMemoryKeyValueStorage
from expense_tracker.store import ExpenseStore


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep tests away from any real .env or data directory."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("EXPENSE_STORAGE_BACKEND", "memory")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def central_european_time():
    """
    Local time zone set to CET/CEST (UTC+2 in May).

    Local midnight of 2025-05-01 is then 2025-04-30T22:00:00Z.
    """
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")

    original = os.environ.get("TZ")
    os.environ["TZ"] = "CET-1CEST,M3.5.0,M10.5.0/3"
    time.tzset()
    yield
    if original is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = original
    time.tzset()


@pytest.fixture
def storage():
    return InMemoryKeyValueStorage()


@pytest.fixture
def event_logger():
    return StoreEventLogger()


@pytest.fixture
def store(storage, event_logger):
    """Store loaded from empty storage, i.e. holding the seed data."""
    return ExpenseStore.open(storage, event_logger=event_logger)
