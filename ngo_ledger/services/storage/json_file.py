"""
Local JSON File Storage

DESIGN DECISION: One file per key (`<data_dir>/<key>.json`) because:
1. Mirrors the browser key-value layout the data was designed for
2. Users can inspect or back up their data with a file manager
3. No database setup required

TRADEOFFS:
- Last writer wins if two processes share a data_dir (no locking)
- Every mutation rewrites the whole blob (fine at bookkeeping scale)

Writes go to a temporary file first and are swapped in with os.replace,
so a reader never sees a half-written blob.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

import structlog
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ngo_ledger.config import get_settings
from ngo_ledger.services.storage.interface import (
    ConnectionError,
    KeyValueStorage,
    StorageError,
)

logger = structlog.get_logger(__name__)


class JsonFileStorage(KeyValueStorage):
    """
    File-backed implementation of key-value storage.

    Values are written as UTF-8 JSON. Unparsable files are logged and
    reported as absent instead of raising.
    """

    def __init__(self, data_dir: Optional[str] = None):
        self._data_dir = Path(data_dir or get_settings().storage.data_dir)
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConnectionError(f"Cannot use data directory {self._data_dir}: {e}")

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self._data_dir / f"{key}.json"

    def load(self, key: str) -> Optional[Any]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as fh:
                return json.load(fh)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("persisted_blob_unparsable", key=key, error=str(e))
            return None
        except OSError as e:
            logger.warning("persisted_blob_unreadable", key=key, error=str(e))
            return None

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        reraise=True,
    )
    def _write_atomic(self, path: Path, payload: str) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=self._data_dir, prefix=f".{path.stem}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_name, path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def save(self, key: str, value: Any) -> None:
        path = self._path(key)
        try:
            payload = json.dumps(value, ensure_ascii=False, indent=2)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for {key!r} is not JSON-serializable: {e}")
        try:
            self._write_atomic(path, payload)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}")
        logger.debug("blob_saved", key=key, bytes=len(payload))

    def delete(self, key: str) -> bool:
        path = self._path(key)
        if not path.exists():
            return False
        path.unlink()
        return True
