"""
Transaction Type Classification

DESIGN DECISION: Which transaction types count as inflow, income, expense,
receivable or payable is decided HERE and nowhere else. Reports ask these
tables; they never list types inline.

Tables and the reports that use them:

- CASH_INFLOW_TYPES: balance, running balance, trial balance credit bucket,
  bank reconciliation. Every other type is a cash outflow (and a trial
  balance debit), so the two buckets partition the type set.
- REPORT_INCOME_TYPES: income statement and dashboard income.
  OPENING moves cash but is not income.
- REPORT_EXPENSE_TYPES: budget vs actuals, income statement, dashboard and
  expense-by-category. Strict: only EXPENSE. Advances, transfers, taxes and
  non-billables are cash outflows but not spending against a budget line.
- RECEIVABLE_TYPES / PAYABLE_TYPES: the AP/AR view of PENDING items.
"""

from decimal import Decimal

from ngo_ledger.models.ledger import Transaction, TransactionType


CASH_INFLOW_TYPES = frozenset({
    TransactionType.INCOME,
    TransactionType.CONT,
    TransactionType.OPENING,
})

CASH_OUTFLOW_TYPES = frozenset(TransactionType) - CASH_INFLOW_TYPES

REPORT_INCOME_TYPES = frozenset({
    TransactionType.INCOME,
    TransactionType.CONT,
})

REPORT_EXPENSE_TYPES = frozenset({
    TransactionType.EXPENSE,
})

RECEIVABLE_TYPES = frozenset({
    TransactionType.INCOME,
    TransactionType.CONT,
    TransactionType.ADV,
    TransactionType.PCA,
})

PAYABLE_TYPES = frozenset({
    TransactionType.EXPENSE,
    TransactionType.NB,
    TransactionType.WHT,
    TransactionType.ITAX,
    TransactionType.SSEC,
})


def is_inflow(tx_type: TransactionType) -> bool:
    """Does this type bring cash in?"""
    return tx_type in CASH_INFLOW_TYPES


def is_outflow(tx_type: TransactionType) -> bool:
    """Does this type take cash out? Exactly the complement of is_inflow."""
    return tx_type in CASH_OUTFLOW_TYPES


def is_report_income(tx_type: TransactionType) -> bool:
    return tx_type in REPORT_INCOME_TYPES


def is_report_expense(tx_type: TransactionType) -> bool:
    return tx_type in REPORT_EXPENSE_TYPES


def signed_amount(tx: Transaction) -> Decimal:
    """The transaction's effect on cash: +amount for inflows, -amount otherwise."""
    return tx.amount if is_inflow(tx.type) else -tx.amount
