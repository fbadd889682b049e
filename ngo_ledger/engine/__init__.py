"""
Aggregation Engine

Pure functions from store snapshots (transactions, chart of accounts,
budget) to disposable report views. Nothing here mutates its inputs,
holds state, or raises for well-typed input: an empty ledger produces
all-zero reports.
"""

from ngo_ledger.engine.bank_reconciliation import bank_reconciliation
from ngo_ledger.engine.budget import budget_vs_actuals, months_in_range
from ngo_ledger.engine.classification import (
    is_inflow,
    is_outflow,
    is_report_expense,
    is_report_income,
    signed_amount,
)
from ngo_ledger.engine.ledger import (
    LedgerFilter,
    filter_ledger,
    get_balance,
    iter_running_balance,
    running_balance,
)
from ngo_ledger.engine.reports import (
    dashboard_summary,
    expense_by_category,
    income_statement,
    outstanding_items,
)
from ngo_ledger.engine.trial_balance import trial_balance

__all__ = [
    "LedgerFilter",
    "bank_reconciliation",
    "budget_vs_actuals",
    "dashboard_summary",
    "expense_by_category",
    "filter_ledger",
    "get_balance",
    "income_statement",
    "is_inflow",
    "is_outflow",
    "is_report_expense",
    "is_report_income",
    "iter_running_balance",
    "months_in_range",
    "outstanding_items",
    "running_balance",
    "signed_amount",
    "trial_balance",
]
