"""In-memory key-value storage, for tests and throwaway sessions."""

from typing import Optional

from expense_tracker.services.storage.interface import KeyValueStorageInterface


class InMemoryKeyValueStorage(KeyValueStorageInterface):
    """Dict-backed storage. Nothing survives the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def keys(self) -> list[str]:
        return list(self._data)

    def describe(self) -> str:
        return f"memory ({len(self._data)} keys)"
