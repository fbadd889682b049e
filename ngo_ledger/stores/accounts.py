"""
Chart of Accounts Store

Keyed by account code. Deleting an account never touches transactions
that reference it; reports fall back to an "Unknown" label for them.
"""

from typing import Optional

import structlog

from ngo_ledger.config import get_settings
from ngo_ledger.models.ledger import ChartOfAccountItem
from ngo_ledger.services.storage import DuplicateError, KeyValueStorage
from ngo_ledger.stores.base import BlobStore

logger = structlog.get_logger(__name__)

UNKNOWN_CATEGORY = "Unknown"


class ChartOfAccountsStore(BlobStore[ChartOfAccountItem]):

    model = ChartOfAccountItem

    def __init__(self, storage: KeyValueStorage, key: Optional[str] = None):
        super().__init__(storage, key or get_settings().storage.accounts_key)

    def _identity(self, item: ChartOfAccountItem) -> str:
        return item.code

    def get(self, code: str) -> Optional[ChartOfAccountItem]:
        return self.find(lambda acc: acc.code == code)

    def category_for(self, code: str) -> str:
        """Display label for a code, 'Unknown' for orphaned codes."""
        account = self.get(code)
        return account.category if account else UNKNOWN_CATEGORY

    def postable(self) -> list[ChartOfAccountItem]:
        return [acc for acc in self._items if not acc.is_header]

    def add(self, item: ChartOfAccountItem) -> ChartOfAccountItem:
        """
        Append an account.

        Raises:
            DuplicateError: If the code is already used
        """
        if item.code in self:
            raise DuplicateError(f"Account code {item.code} already exists")
        self._commit(self._items + [item])
        logger.info("account_added", code=item.code, is_header=item.is_header)
        return item

    def update(self, item: ChartOfAccountItem) -> bool:
        """Replace the account with the same code in place."""
        if item.code not in self:
            logger.warning("account_update_missed", code=item.code)
            return False
        self._commit([item if acc.code == item.code else acc for acc in self._items])
        logger.info("account_updated", code=item.code)
        return True

    def delete(self, code: str) -> bool:
        kept = [acc for acc in self._items if acc.code != code]
        if len(kept) == len(self._items):
            return False
        self._commit(kept)
        logger.info("account_deleted", code=code)
        return True

    def rename(self, old_code: str, item: ChartOfAccountItem) -> ChartOfAccountItem:
        """
        Edit an account whose code may have changed.

        Same code: plain update. New code: the old entry is removed and the
        new one appended, in a single write.

        Raises:
            DuplicateError: If the new code belongs to another account
        """
        if old_code == item.code:
            self.update(item)
            return item
        if item.code in self:
            raise DuplicateError(f"Account code {item.code} already exists")
        self._commit([acc for acc in self._items if acc.code != old_code] + [item])
        logger.info("account_renamed", old_code=old_code, code=item.code)
        return item
