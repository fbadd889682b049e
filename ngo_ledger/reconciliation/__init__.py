"""Bank reconciliation matching."""

from ngo_ledger.reconciliation.matcher import (
    ReconciliationSession,
    find_candidates,
    is_candidate,
)

__all__ = [
    "ReconciliationSession",
    "find_candidates",
    "is_candidate",
]
