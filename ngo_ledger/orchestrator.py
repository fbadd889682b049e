"""
Application State Container for NGO Ledger

This module ties the stores, engine, matcher and agents together behind
one object, FinanceApp. A UI holds a single FinanceApp and calls:

- commands (add_transaction, delete_account, upload_budget_csv, ...)
  which validate input, then mutate exactly one store
- views (trial_balance, bank_reconciliation, ...) which recompute from
  current store snapshots on every call
- async helpers (suggest_account_code, load_bank_statement,
  analyze_variance) which consult the AI agents and degrade gracefully

DESIGN DECISION: Nothing outside this module writes to a store directly.
Rejected input raises ValidationFailedError before any mutation.
"""

import time
from decimal import Decimal
from typing import Callable, Optional

import structlog

from ngo_ledger import engine
from ngo_ledger.agents import (
    AccountSuggestion,
    CategorizationAgent,
    StatementParsingAgent,
    VarianceAnalysisAgent,
)
from ngo_ledger.config import get_settings
from ngo_ledger.engine.ledger import LedgerFilter
from ngo_ledger.logging_setup import configure_logging
from ngo_ledger.models.ledger import (
    BankTransaction,
    BudgetLine,
    ChartOfAccountItem,
    DateRange,
    Transaction,
    TransactionDraft,
    ValidationIssue,
    ValidationResult,
)
from ngo_ledger.models.money import MoneyInput
from ngo_ledger.models.reports import (
    BankReconciliationSummary,
    DashboardSummary,
    IncomeStatement,
    LedgerEntry,
    OutstandingSummary,
    TrialBalance,
    VarianceRow,
)
from ngo_ledger.reconciliation import ReconciliationSession
from ngo_ledger.services import csv_io
from ngo_ledger.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorage,
    StorageError,
)
from ngo_ledger.stores import BudgetStore, ChartOfAccountsStore, TransactionStore
from ngo_ledger.validation import (
    AccountValidator,
    TransactionValidator,
    ValidationFailedError,
)

logger = structlog.get_logger(__name__)


class FinanceApp:
    """
    The application's single state object.

    Owns the three stores and the current reconciliation session.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        categorization_agent: Optional[CategorizationAgent] = None,
        statement_agent: Optional[StatementParsingAgent] = None,
        analysis_agent: Optional[VarianceAnalysisAgent] = None,
        clock: Callable[[], float] = time.monotonic,
        undo_window_seconds: Optional[int] = None,
    ):
        self._storage = storage
        self.transactions = TransactionStore(storage)
        self.accounts = ChartOfAccountsStore(storage)
        self.budget = BudgetStore(storage)
        self.reconciliation = ReconciliationSession(self.transactions)

        self._categorization_agent = categorization_agent or CategorizationAgent()
        self._statement_agent = statement_agent or StatementParsingAgent()
        self._analysis_agent = analysis_agent or VarianceAnalysisAgent()

        self._clock = clock
        self._undo_window = (
            get_settings().app.undo_window_seconds
            if undo_window_seconds is None
            else undo_window_seconds
        )
        self._last_deleted: Optional[tuple[Transaction, float]] = None

    # =========================================================================
    # TRANSACTION COMMANDS
    # =========================================================================

    def _transaction_validator(self) -> TransactionValidator:
        return TransactionValidator(self.accounts.all())

    def add_transaction(self, draft: TransactionDraft) -> Transaction:
        """
        Validate a form draft and record it as a new transaction.

        Raises:
            ValidationFailedError: If the draft is rejected
        """
        tx = self._transaction_validator().to_transaction(draft)
        return self.transactions.add(tx)

    def update_transaction(self, tx_id: str, draft: TransactionDraft) -> Optional[Transaction]:
        """
        Validate an edited draft and replace the transaction with that id.

        Returns None if the transaction no longer exists. A reconciled
        transaction keeps its status.

        Raises:
            ValidationFailedError: If the draft is rejected
        """
        current = self.transactions.get(tx_id)
        tx = self._transaction_validator().to_transaction(draft, tx_id=tx_id, current=current)
        return tx if self.transactions.update(tx) else None

    def delete_transaction(self, tx_id: str) -> bool:
        """Delete by id. Safe to repeat; the last deletion can be undone."""
        existing = self.transactions.get(tx_id)
        if existing is None:
            return False
        self.transactions.delete(tx_id)
        self._last_deleted = (existing, self._clock())
        return True

    def undo_delete(self) -> Optional[Transaction]:
        """Restore the most recently deleted transaction within the undo window."""
        if self._last_deleted is None:
            return None
        tx, deleted_at = self._last_deleted
        self._last_deleted = None
        if self._clock() - deleted_at > self._undo_window:
            logger.info("undo_window_expired", transaction_id=tx.id)
            return None
        return self.transactions.add(tx)

    def import_ledger_csv(self, text: str) -> int:
        """Bulk-add transactions from ledger CSV. Returns how many were added."""
        imported = csv_io.parse_ledger_csv(text)
        if imported:
            # Each row is inserted at the head, as if added one by one
            self.transactions.overwrite(list(reversed(imported)) + self.transactions.all())
        logger.info("ledger_imported", count=len(imported))
        return len(imported)

    def export_ledger_csv(self) -> str:
        return csv_io.export_ledger_csv(self.transactions.all())

    # =========================================================================
    # CHART OF ACCOUNTS COMMANDS
    # =========================================================================

    def _check_account(self, item: ChartOfAccountItem, editing_code: Optional[str] = None) -> ValidationResult:
        result = AccountValidator(acc.code for acc in self.accounts.all()).validate(item, editing_code)
        if result.has_errors:
            raise ValidationFailedError(result)
        return result

    def add_account(self, item: ChartOfAccountItem) -> ChartOfAccountItem:
        """
        Raises:
            ValidationFailedError: If the code is already used
        """
        self._check_account(item)
        return self.accounts.add(item)

    def update_account(self, item: ChartOfAccountItem, editing_code: Optional[str] = None) -> ValidationResult:
        """
        Save an edited account. `editing_code` is the code before the edit;
        when it differs from item.code the account is renamed.

        Returns the validation result so warnings can be shown.
        """
        editing_code = editing_code or item.code
        result = self._check_account(item, editing_code)
        if editing_code == item.code and item.code not in self.accounts:
            result.issues.append(ValidationIssue(
                field="code",
                issue_type="not_found",
                message=f"Account {item.code} no longer exists",
                severity="warning",
            ))
            return result
        self.accounts.rename(editing_code, item)
        return result

    def delete_account(self, code: str) -> bool:
        """Remove an account. Transactions using the code are left as they are."""
        return self.accounts.delete(code)

    # =========================================================================
    # BUDGET COMMANDS
    # =========================================================================

    def update_budget(self, lines: list[BudgetLine]) -> None:
        self.budget.update(lines)

    def set_monthly_budget(self, code: str, amount: MoneyInput) -> BudgetLine:
        return self.budget.upsert(code, amount)

    def upload_budget_csv(self, text: str) -> int:
        """Replace the budget from CSV. Returns the number of lines loaded."""
        lines = csv_io.parse_budget_csv(text)
        self.budget.update(lines)
        return len(lines)

    def export_budget_csv(self) -> str:
        return csv_io.export_budget_csv(self.budget.all())

    # =========================================================================
    # VIEWS (recomputed on every call)
    # =========================================================================

    def balance(self) -> Decimal:
        return engine.get_balance(self.transactions.all())

    def ledger(self, flt: Optional[LedgerFilter] = None) -> list[LedgerEntry]:
        entries = engine.running_balance(self.transactions.all())
        return engine.filter_ledger(entries, flt, self.accounts.all())

    def budget_vs_actuals(self, date_range: DateRange) -> list[VarianceRow]:
        return engine.budget_vs_actuals(
            self.transactions.all(),
            self.accounts.all(),
            self.budget.all(),
            date_range,
        )

    def trial_balance(self) -> TrialBalance:
        return engine.trial_balance(self.transactions.all(), self.accounts.all())

    def bank_reconciliation(self, as_of_date: str, statement_balance: MoneyInput) -> BankReconciliationSummary:
        return engine.bank_reconciliation(self.transactions.all(), as_of_date, statement_balance)

    def income_statement(self, date_range: Optional[DateRange] = None) -> IncomeStatement:
        return engine.income_statement(self.transactions.all(), self.accounts.all(), date_range)

    def dashboard(self) -> DashboardSummary:
        return engine.dashboard_summary(self.transactions.all())

    def outstanding(self) -> OutstandingSummary:
        return engine.outstanding_items(self.transactions.all())

    # =========================================================================
    # RECONCILIATION
    # =========================================================================

    def match(self, ledger_id: str, line_id: str) -> bool:
        return self.reconciliation.match(ledger_id, line_id)

    # =========================================================================
    # AI-ASSISTED HELPERS (never raise)
    # =========================================================================

    async def suggest_account_code(self, description: str) -> AccountSuggestion:
        return await self._categorization_agent.suggest_account_code(
            description, self.accounts.all()
        )

    async def load_bank_statement(self, raw_text: str) -> list[BankTransaction]:
        """
        Parse a statement into the reconciliation working set.

        AI parsing first; the naive CSV split when it yields nothing.
        """
        lines = await self._statement_agent.parse_statement(raw_text)
        if not lines:
            lines = csv_io.parse_statement_csv(raw_text)
            logger.info("statement_parsed_naively", count=len(lines))
        self.reconciliation.load(lines)
        return lines

    async def analyze_variance(self, date_range: DateRange) -> str:
        return await self._analysis_agent.analyze_variance(self.budget_vs_actuals(date_range))


def create_app(
    data_dir: Optional[str] = None,
    use_storage: bool = True,
) -> FinanceApp:
    """
    Factory function to create the application state.

    Args:
        data_dir: Directory for the JSON blobs (defaults to settings)
        use_storage: False keeps everything in memory (tests, demos)
    """
    configure_logging()

    storage: KeyValueStorage
    if use_storage:
        try:
            storage = JsonFileStorage(data_dir)
        except StorageError as e:
            # Storage not usable - continue without persistence
            logger.warning("storage_unavailable", error=str(e))
            storage = InMemoryStorage()
    else:
        storage = InMemoryStorage()

    return FinanceApp(storage)
