"""
JSON File Storage Implementation

DESIGN DECISION: A single JSON object on disk plays the role a browser's
local storage plays for a web page:
1. Keys map to plain strings, exactly like localStorage
2. No database setup required
3. The user can open and inspect the file directly

TRADEOFFS:
- Every write rewrites the whole file (fine for a personal expense list)
- Writes go to a temp file first and are moved into place, so a crash
  mid-write never leaves a half-written file behind
"""

import json
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

from quickbill.services.storage.interface import (
    KeyValueStoreInterface,
    StorageCorruptError,
    StorageError,
)


logger = structlog.get_logger(__name__)


class JsonFileKeyValueStore(KeyValueStoreInterface):
    """
    Key-value store persisted as one JSON object file.

    The file holds {"<key>": "<string value>", ...}. A missing file is an
    empty store. A file that is not a JSON object of strings is corrupt.
    """

    def __init__(self, path: Union[Path, str]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        """Load the whole mapping from disk."""
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StorageError(f"Failed to read storage file {self._path}: {e}")

        if not raw.strip():
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageCorruptError(f"Storage file {self._path} is not valid JSON: {e}")

        if not isinstance(data, dict):
            raise StorageCorruptError(
                f"Storage file {self._path} must hold a JSON object, got {type(data).__name__}"
            )
        bad_keys = [k for k, v in data.items() if not isinstance(v, str)]
        if bad_keys:
            raise StorageCorruptError(
                f"Storage file {self._path} has non-string values for keys: {bad_keys}"
            )
        return data

    def _read_for_update(self) -> dict[str, str]:
        """Load the mapping before a write; a corrupt file is replaced."""
        try:
            return self._read_all()
        except StorageCorruptError as e:
            logger.warning("storage_file_replaced", path=str(self._path), error=str(e))
            return {}

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        reraise=True,
    )
    def _write_all(self, data: dict[str, str]) -> None:
        """Atomically replace the file with the given mapping."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent,
            prefix=f".{self._path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_for_update()
        data[key] = value
        try:
            self._write_all(data)
        except OSError as e:
            raise StorageError(f"Failed to write '{key}' to {self._path}: {e}")

    def remove(self, key: str) -> None:
        data = self._read_for_update()
        if key not in data:
            return
        del data[key]
        try:
            self._write_all(data)
        except OSError as e:
            raise StorageError(f"Failed to remove '{key}' from {self._path}: {e}")
