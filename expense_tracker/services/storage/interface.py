"""
Abstract Storage Interface

The store persists its snapshot through a durable key-value slot:
one serialized string per key, read once at startup and rewritten
after every mutation. Anything that can get and set strings by key
can back the store (JSON files, memory, browser-style local storage).

The interface is intentionally tiny. Serialization belongs to the
store; storage only moves strings.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorageInterface(ABC):
    """
    Abstract interface for durable key-value storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StorageReadError: If the backend could not be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Write a value under a key, replacing any previous value.

        Args:
            key: Storage key
            value: Serialized payload

        Raises:
            StorageWriteError: If the write did not complete
        """
        pass

    def describe(self) -> str:
        """Short human-readable description of the backend, for logs."""
        return type(self).__name__


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """Stored value could not be read."""
    pass


class StorageWriteError(StorageError):
    """Value could not be written (disk full, permissions, quota)."""
    pass
