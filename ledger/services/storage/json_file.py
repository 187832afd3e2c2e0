"""
JSON File Storage Implementation

DESIGN DECISION: Local files are used as the storage backend because:
1. The ledger is personal and single-user
2. No database setup required
3. The user can back up or inspect the files directly

Each key becomes one file inside the data directory. Writes go to a
temporary file first and are moved into place, so a crash mid-write
leaves the previous snapshot intact.
"""

import os
import re
from pathlib import Path
from typing import Optional

from ledger.services.storage.interface import (
    KeyValueStoreInterface,
    StorageError,
    StorageUnavailableError,
)


_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class JsonFileKeyValueStore(KeyValueStoreInterface):
    """One file per key under a data directory."""

    def __init__(self, data_dir: Path):
        self._data_dir = Path(data_dir)

    def _path_for(self, key: str) -> Path:
        return self._data_dir / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageUnavailableError(f"Failed to read {path}: {e}")

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(value, encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}")

    def remove(self, key: str) -> None:
        try:
            self._path_for(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to remove {key}: {e}")
