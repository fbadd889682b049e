"""
Shared plumbing for the three persisted stores.

Every store follows the same contract:
- state is loaded once from its key at construction
- a mutation builds the new collection, persists it in full, and only
  then swaps it in, so a failed write leaves memory untouched
- readers get snapshots (new lists), never the internal list
"""

from typing import Any, Callable, Generic, Optional, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from ngo_ledger.services.storage import KeyValueStorage

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class BlobStore(Generic[ModelT]):
    """Ordered collection of pydantic models persisted as one JSON array."""

    model: type[ModelT]

    def __init__(self, storage: KeyValueStorage, key: str):
        self._storage = storage
        self._key = key
        self._items: list[ModelT] = self._load()

    @property
    def key(self) -> str:
        return self._key

    def _prepare_row(self, row: dict) -> dict:
        """Hook for per-store coercion before validation."""
        return row

    def _load(self) -> list[ModelT]:
        raw = self._storage.load(self._key)
        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.warning("persisted_blob_not_a_list", key=self._key, found=type(raw).__name__)
            return []

        items = []
        skipped = 0
        for row in raw:
            if not isinstance(row, dict):
                skipped += 1
                continue
            try:
                items.append(self.model.model_validate(self._prepare_row(dict(row))))
            except (ValidationError, ValueError) as e:
                skipped += 1
                logger.warning("persisted_row_skipped", key=self._key, error=str(e))

        items = self._dedupe(items)
        logger.info("store_loaded", key=self._key, count=len(items), skipped=skipped)
        return items

    def _identity(self, item: ModelT) -> str:
        raise NotImplementedError

    def _dedupe(self, items: list[ModelT]) -> list[ModelT]:
        """
        Collapse duplicate identities, last write wins.

        The surviving record keeps the position of the first occurrence
        (dict insertion order).
        """
        unique: dict[str, ModelT] = {}
        for item in items:
            unique[self._identity(item)] = item
        if len(unique) != len(items):
            logger.warning("duplicate_ids_collapsed", key=self._key, dropped=len(items) - len(unique))
        return list(unique.values())

    def _commit(self, items: list[ModelT]) -> None:
        """Persist then swap."""
        self._storage.save(self._key, [item.model_dump(mode="json", by_alias=True) for item in items])
        self._items = items

    def all(self) -> list[ModelT]:
        return list(self._items)

    def find(self, predicate: Callable[[ModelT], bool]) -> Optional[ModelT]:
        return next((item for item in self._items if predicate(item)), None)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(list(self._items))

    def __contains__(self, identity: Any) -> bool:
        return any(self._identity(item) == identity for item in self._items)
