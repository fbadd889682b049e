"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap local JSON files for a database later
2. Use in-memory storage for testing
3. Keep store logic decoupled from the storage implementation

The interface is intentionally tiny: each store owns one JSON blob under a
fixed key and writes it in full on every mutation. There is no schema
version; loaders coerce what they read.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class KeyValueStorage(ABC):
    """
    Abstract interface for blob persistence.

    Any storage implementation (local files, browser-like key-value
    store, database table) must implement these methods.
    """

    @abstractmethod
    def load(self, key: str) -> Optional[Any]:
        """
        Load the JSON value stored under a key.

        Args:
            key: Fixed store key, e.g. 'ngo_transactions'

        Returns:
            The decoded value, or None if nothing usable is stored
            (missing or unparsable blobs are both None)
        """
        pass

    @abstractmethod
    def save(self, key: str, value: Any) -> None:
        """
        Replace the value stored under a key.

        Args:
            key: Fixed store key
            value: JSON-serializable value (written in full)

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove a key.

        Returns:
            True if something was removed
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class ConnectionError(StorageError):
    """Could not reach the storage backend."""
    pass
