"""
Reconciliation Matcher

A reconciliation session holds the bank-statement lines loaded for the
current sitting. Ledger candidates for a line are computed on demand,
never stored: every unreconciled transaction whose amount equals the
line's magnitude.

CRITICAL: Matching is a human decision. The session suggests candidates
but only match() changes anything, and it changes exactly two things:
- the ledger transaction moves to RECONCILED (persisted)
- the bank line leaves the working set (never persisted)

PENDING/CLEARED -> RECONCILED is one-way; already reconciled
transactions are not candidates and cannot be matched again.
"""

from typing import Iterable, Optional

import structlog

from ngo_ledger.models.ledger import BankTransaction, Transaction, TransactionStatus
from ngo_ledger.stores.transactions import TransactionStore

logger = structlog.get_logger(__name__)


def is_candidate(tx: Transaction, line: BankTransaction) -> bool:
    """Unreconciled and equal in magnitude (amounts are exact 2dp Decimals)."""
    return tx.status != TransactionStatus.RECONCILED and tx.amount == line.magnitude


def find_candidates(transactions: Iterable[Transaction], line: BankTransaction) -> list[Transaction]:
    return [tx for tx in transactions if is_candidate(tx, line)]


class ReconciliationSession:
    """
    Working set of bank lines matched against a TransactionStore.

    The session reads the store on every query so candidates always
    reflect the latest ledger.
    """

    def __init__(self, store: TransactionStore, lines: Optional[Iterable[BankTransaction]] = None):
        self._store = store
        self._lines: list[BankTransaction] = []
        if lines:
            self.load(lines)

    @property
    def lines(self) -> list[BankTransaction]:
        return list(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def load(self, lines: Iterable[BankTransaction]) -> None:
        """Replace the working set with freshly imported statement lines."""
        self._lines = list(lines)
        logger.info("bank_lines_loaded", count=len(self._lines))

    def clear(self) -> None:
        self._lines = []

    def get_line(self, line_id: str) -> Optional[BankTransaction]:
        return next((line for line in self._lines if line.id == line_id), None)

    def unreconciled(self) -> list[Transaction]:
        return [tx for tx in self._store.all() if tx.status != TransactionStatus.RECONCILED]

    def candidates(self, line_id: str) -> list[Transaction]:
        line = self.get_line(line_id)
        if line is None:
            return []
        return find_candidates(self._store.all(), line)

    def suggest_matches(self) -> dict[str, list[Transaction]]:
        """Candidate ledger transactions for every line in the working set."""
        ledger = self.unreconciled()
        return {line.id: find_candidates(ledger, line) for line in self._lines}

    def match(self, ledger_id: str, line_id: str) -> bool:
        """
        Commit a user-chosen pairing.

        Returns False (and changes nothing) when either side is missing or
        the transaction is not a candidate for the line.
        """
        line = self.get_line(line_id)
        tx = self._store.get(ledger_id)
        if line is None or tx is None:
            logger.warning("match_target_missing", ledger_id=ledger_id, line_id=line_id)
            return False
        if not is_candidate(tx, line):
            logger.warning(
                "match_rejected",
                ledger_id=tx.id,
                line_id=line_id,
                status=tx.status.value,
                ledger_amount=str(tx.amount),
                line_amount=str(line.amount),
            )
            return False

        self._store.update(tx.model_copy(update={"status": TransactionStatus.RECONCILED}))
        self._lines = [other for other in self._lines if other.id != line_id]
        logger.info("transaction_reconciled", ledger_id=tx.id, line_id=line_id)
        return True
