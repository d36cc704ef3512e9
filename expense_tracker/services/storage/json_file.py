"""
JSON File Storage Implementation

Each key is one file, `<data_dir>/<key>.json`, holding the serialized
payload exactly as the store produced it.

TRADEOFFS:
- Single writer only; two processes writing the same directory
  overwrite each other (last write wins)
- Whole-collection rewrites on every mutation (fine for personal use)

Writes go to a temporary file in the same directory and are then
renamed over the target, so a crash mid-write leaves the previous
snapshot intact.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional, Union

import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from expense_tracker.services.storage.interface import (
    KeyValueStorageInterface,
    StorageReadError,
    StorageWriteError,
)


logger = structlog.get_logger(__name__)


class JsonFileKeyValueStorage(KeyValueStorageInterface):
    """File-per-key storage in a local directory."""

    def __init__(self, directory: Union[str, Path], encoding: str = "utf-8"):
        self._directory = Path(directory)
        self._encoding = encoding

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        """Path of the file holding a key."""
        return self._directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        """Read a key; None if its file does not exist."""
        path = self.path_for(key)
        try:
            return path.read_text(encoding=self._encoding)
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(f"Failed to read {path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        """Write a key atomically, retrying transient I/O failures."""
        path = self.path_for(key)
        try:
            self._write_atomic(path, value)
        except OSError as e:
            logger.error("storage_write_failed", path=str(path), error=str(e))
            raise StorageWriteError(f"Failed to write {path}: {e}") from e

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        reraise=True,
    )
    def _write_atomic(self, path: Path, value: str) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._directory,
            prefix=f".{path.stem}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding=self._encoding) as handle:
                handle.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            # Leave no stray temp files behind on failure
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise

    def describe(self) -> str:
        return f"json files in {self._directory}"
