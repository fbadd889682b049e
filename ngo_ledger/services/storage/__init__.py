"""
Storage Services Package

Provides the abstract key-value interface and concrete implementations.
Local JSON files are the default backend; the in-memory backend serves
tests and throwaway sessions.
"""

from ngo_ledger.services.storage.interface import (
    ConnectionError,
    DuplicateError,
    KeyValueStorage,
    StorageError,
)
from ngo_ledger.services.storage.json_file import JsonFileStorage
from ngo_ledger.services.storage.memory import InMemoryStorage

__all__ = [
    # Interface
    "KeyValueStorage",
    # Exceptions
    "ConnectionError",
    "DuplicateError",
    "StorageError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
]
