"""
JSON File Storage Implementation

DESIGN DECISION: Local JSON files are used as the store because:
1. The tracker is single-user and runs on the user's machine
2. No database setup required
3. Users can back up or inspect their data with any editor

TRADEOFFS:
- No transactions (every write replaces a whole file atomically)
- Whole collections are rewritten on every change (fine at personal scale)

Each key maps to one `<key>.json` file under the data directory.
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Optional

from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from savings_tracker.config import get_settings
from savings_tracker.logs import get_logger
from savings_tracker.storage.interface import (
    KeyValueStoreInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)

logger = get_logger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_-][A-Za-z0-9_.-]*$")


class JsonFileStore(KeyValueStoreInterface):
    """
    File-per-key store with atomic replace and retried writes.
    """

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        write_attempts: Optional[int] = None,
    ):
        settings = get_settings().storage
        self._data_dir = Path(data_dir or settings.data_dir)
        self._retrying = Retrying(
            stop=stop_after_attempt(write_attempts or settings.write_attempts),
            wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path_for(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self._data_dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(f"Could not read {path}: {e}")

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        try:
            self._retrying(self._write_atomic, path, value)
        except OSError as e:
            logger.error("storage_write_failed", key=key, path=str(path), error=str(e))
            raise StorageWriteError(f"Could not write {path}: {e}")

    def delete(self, key: str) -> bool:
        path = self._path_for(key)
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageWriteError(f"Could not delete {path}: {e}")

    def _write_atomic(self, path: Path, value: str) -> None:
        """Write to a temp file in the same directory, then rename over the target."""
        self._data_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._data_dir, prefix=f".{path.stem}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_name, path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise
