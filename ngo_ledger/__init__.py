"""
NGO Ledger - Source Package

A bookkeeping assistant for a small organization: transactions against a
chart of accounts, budget variance, bank reconciliation and the standard
financial reports.

DESIGN PRINCIPLES:
1. Stores are the single source of truth, mutated only through named commands
2. Reports are derived, never stored
3. AI suggests → Human confirms → Store records
4. Bad persisted data is recovered, never fatal
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "NGO Ledger Team"
