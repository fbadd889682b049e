"""In-memory key-value storage for tests and throwaway sessions."""

import json
from typing import Any, Optional

from ngo_ledger.services.storage.interface import KeyValueStorage, StorageError


class InMemoryStorage(KeyValueStorage):
    """
    Dict-backed storage.

    Values round-trip through json so anything this accepts would also
    be accepted by JsonFileStorage.
    """

    def __init__(self, initial: Optional[dict[str, Any]] = None):
        self._blobs: dict[str, str] = {}
        self.save_count = 0
        for key, value in (initial or {}).items():
            self._blobs[key] = json.dumps(value)

    def load(self, key: str) -> Optional[Any]:
        raw = self._blobs.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            return None

    def save(self, key: str, value: Any) -> None:
        try:
            self._blobs[key] = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for {key!r} is not JSON-serializable: {e}")
        self.save_count += 1

    def delete(self, key: str) -> bool:
        return self._blobs.pop(key, None) is not None

    def put_raw(self, key: str, raw: str) -> None:
        """Store raw text verbatim (simulates corrupted blobs)."""
        self._blobs[key] = raw

    def snapshot(self) -> dict[str, Any]:
        return {key: self.load(key) for key in list(self._blobs)}
