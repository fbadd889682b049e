"""
Budget Store

Monthly budget per account code. Bulk uploads replace the whole set
(last upload wins); single edits go through upsert().
"""

from decimal import Decimal
from typing import Iterable, Optional

import structlog

from ngo_ledger.config import get_settings
from ngo_ledger.models.ledger import BudgetLine
from ngo_ledger.models.money import ZERO, MoneyInput
from ngo_ledger.services.storage import KeyValueStorage
from ngo_ledger.stores.base import BlobStore

logger = structlog.get_logger(__name__)


class BudgetStore(BlobStore[BudgetLine]):

    model = BudgetLine

    def __init__(self, storage: KeyValueStorage, key: Optional[str] = None):
        super().__init__(storage, key or get_settings().storage.budget_key)

    def _identity(self, item: BudgetLine) -> str:
        return item.code

    def monthly_budget(self, code: str) -> Decimal:
        line = self.find(lambda b: b.code == code)
        return line.monthly_budget if line else ZERO

    def as_mapping(self) -> dict[str, Decimal]:
        return {line.code: line.monthly_budget for line in self._items}

    def update(self, lines: Iterable[BudgetLine]) -> None:
        """Replace every budget line."""
        items = self._dedupe(list(lines))
        self._commit(items)
        logger.info("budget_replaced", count=len(items))

    def upsert(self, code: str, monthly_budget: MoneyInput) -> BudgetLine:
        """Set one code's monthly budget, adding the line if needed."""
        line = BudgetLine(code=code, monthly_budget=monthly_budget)
        if code in self:
            items = [line if b.code == code else b for b in self._items]
        else:
            items = self._items + [line]
        self._commit(items)
        logger.info("budget_line_set", code=code, monthly_budget=str(line.monthly_budget))
        return line
