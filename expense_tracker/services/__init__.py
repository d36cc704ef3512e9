"""Services package."""

from expense_tracker.services.storage import (
    InMemoryKeyValueStorage,
    JsonFileKeyValueStorage,
    KeyValueStorageInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)

__all__ = [
    "InMemoryKeyValueStorage",
    "JsonFileKeyValueStorage",
    "KeyValueStorageInterface",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
]
