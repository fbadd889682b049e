"""
Transaction Store

The single source of truth for ledger entries. Mutated only through
add / update / delete / overwrite; each persists the full collection.

Ids are normalized at this boundary (ngo_ledger.models.ids.normalize_id),
so a numeric id from old data and its string form are the same record.
"""

from typing import Any, Iterable, Optional

import structlog

from ngo_ledger.config import get_settings
from ngo_ledger.models.ids import new_transaction_id, normalize_id
from ngo_ledger.models.ledger import TEXT_FIELD_LIMITS, Transaction, clip_text
from ngo_ledger.services.storage import DuplicateError, KeyValueStorage
from ngo_ledger.stores.base import BlobStore

logger = structlog.get_logger(__name__)


def _safe_id(value: Any) -> Optional[str]:
    try:
        return normalize_id(value)
    except ValueError:
        return None


class TransactionStore(BlobStore[Transaction]):
    """
    Ordered transactions, newest insert first.

    Policies:
    - add() rejects an id that is already present (DuplicateError)
    - update() of an unknown id is a logged no-op (a concurrent delete
      may have removed it)
    - delete() of an unknown id is a no-op, so it is idempotent
    """

    model = Transaction

    def __init__(self, storage: KeyValueStorage, key: Optional[str] = None):
        super().__init__(storage, key or get_settings().storage.transactions_key)

    def _identity(self, item: Transaction) -> str:
        return item.id

    def _prepare_row(self, row: dict) -> dict:
        # Old blobs may lack ids or store them as numbers
        row["id"] = _safe_id(row.get("id")) or new_transaction_id()
        # Over-long text is cut rather than losing the row on the next write
        for name, limit in TEXT_FIELD_LIMITS.items():
            for key in {name, Transaction.model_fields[name].alias or name}:
                value = row.get(key)
                if isinstance(value, str) and len(value) > limit:
                    row[key] = clip_text(value, limit)
                    logger.warning(
                        "persisted_field_truncated",
                        key=self.key,
                        transaction_id=row["id"],
                        field=name,
                    )
        return row

    def __contains__(self, tx_id: Any) -> bool:
        return self.get(tx_id) is not None

    def get(self, tx_id: Any) -> Optional[Transaction]:
        wanted = _safe_id(tx_id)
        if wanted is None:
            return None
        return self.find(lambda tx: tx.id == wanted)

    def add(self, tx: Transaction) -> Transaction:
        """
        Insert at the head of the collection.

        Raises:
            DuplicateError: If a transaction with the same id exists
        """
        if tx.id in self:
            raise DuplicateError(f"Transaction {tx.id} already exists")
        self._commit([tx] + self._items)
        logger.info("transaction_added", transaction_id=tx.id, type=tx.type.value, amount=str(tx.amount))
        return tx

    def update(self, tx: Transaction) -> bool:
        """Replace the transaction with the same id. Returns False if none matched."""
        if tx.id not in self:
            logger.warning("transaction_update_missed", transaction_id=tx.id)
            return False
        self._commit([tx if existing.id == tx.id else existing for existing in self._items])
        logger.info("transaction_updated", transaction_id=tx.id, status=tx.status.value)
        return True

    def delete(self, tx_id: Any) -> int:
        """Remove every transaction with this id. Returns how many were removed."""
        wanted = _safe_id(tx_id)
        if wanted is None:
            return 0
        kept = [tx for tx in self._items if tx.id != wanted]
        removed = len(self._items) - len(kept)
        if removed == 0:
            logger.debug("transaction_delete_missed", transaction_id=wanted)
            return 0
        self._commit(kept)
        logger.info("transaction_deleted", transaction_id=wanted)
        return removed

    def overwrite(self, transactions: Iterable[Transaction]) -> None:
        """Replace the whole collection (bulk import). Duplicate ids collapse."""
        items = self._dedupe(list(transactions))
        self._commit(items)
        logger.info("transactions_overwritten", count=len(items))
