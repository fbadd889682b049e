"""
Data Models Package

This package contains all Pydantic models used in the NGO Ledger system.
All data flowing through the system must conform to these schemas.
"""

from ngo_ledger.models.ledger import (
    BankTransaction,
    BudgetLine,
    ChartOfAccountItem,
    DateRange,
    Transaction,
    TransactionDraft,
    TransactionStatus,
    TransactionType,
    ValidationIssue,
    ValidationResult,
)
from ngo_ledger.models.reports import (
    BankReconciliationSummary,
    CategoryTotal,
    DashboardSummary,
    IncomeStatement,
    IncomeStatementLine,
    LedgerEntry,
    OutstandingSummary,
    TrialBalance,
    TrialBalanceRow,
    VarianceRow,
)

__all__ = [
    # Ledger models
    "BankTransaction",
    "BudgetLine",
    "ChartOfAccountItem",
    "DateRange",
    "Transaction",
    "TransactionDraft",
    "TransactionStatus",
    "TransactionType",
    "ValidationIssue",
    "ValidationResult",
    # Report views
    "BankReconciliationSummary",
    "CategoryTotal",
    "DashboardSummary",
    "IncomeStatement",
    "IncomeStatementLine",
    "LedgerEntry",
    "OutstandingSummary",
    "TrialBalance",
    "TrialBalanceRow",
    "VarianceRow",
]
