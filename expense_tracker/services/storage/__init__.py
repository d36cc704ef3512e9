"""
Storage Services Package

Provides the abstract key-value interface and its implementations.
JSON files are the durable backend; memory is for tests and demos.
"""

from expense_tracker.services.storage.interface import (
    KeyValueStorageInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from expense_tracker.services.storage.json_file import JsonFileKeyValueStorage
from expense_tracker.services.storage.memory import InMemoryKeyValueStorage

__all__ = [
    # Interface
    "KeyValueStorageInterface",
    # Exceptions
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "InMemoryKeyValueStorage",
    "JsonFileKeyValueStorage",
]
