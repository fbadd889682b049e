"""Persisted stores: transactions, chart of accounts, budget."""

from ngo_ledger.stores.accounts import ChartOfAccountsStore
from ngo_ledger.stores.budget import BudgetStore
from ngo_ledger.stores.transactions import TransactionStore

__all__ = [
    "BudgetStore",
    "ChartOfAccountsStore",
    "TransactionStore",
]
