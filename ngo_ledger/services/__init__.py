"""Services package."""

from ngo_ledger.services.storage import (
    ConnectionError,
    DuplicateError,
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorage,
    StorageError,
)

__all__ = [
    # Storage services
    "ConnectionError",
    "DuplicateError",
    "InMemoryStorage",
    "JsonFileStorage",
    "KeyValueStorage",
    "StorageError",
]
