"""
Trial Balance

Per-account net position derived from transaction type, not from
double-entry postings. Outflow types go to the debit bucket, inflow types
to the credit bucket; each account shows only the net of the two.

Because every type lands in exactly one bucket and every transaction lands
in exactly one row, the report satisfies:

    total_debits - total_credits == -get_balance(transactions)

A trial balance whose columns disagree is therefore expected whenever the
organisation holds (or owes) cash. It is a diagnostic, not an error.

Transactions whose code has no postable account (deleted code, typo, or a
header code) are grouped into trailing rows labelled "Unknown" so their
amounts are not silently dropped.
"""

from collections import defaultdict
from decimal import Decimal
from typing import Iterable

import structlog

from ngo_ledger.engine.classification import is_inflow
from ngo_ledger.models.ledger import ChartOfAccountItem, Transaction
from ngo_ledger.models.money import ZERO
from ngo_ledger.models.reports import TrialBalance, TrialBalanceRow

logger = structlog.get_logger(__name__)

UNKNOWN_CATEGORY = "Unknown"


def net_row(code: str, category: str, debits: Decimal, credits: Decimal, **extra) -> TrialBalanceRow:
    """Collapse the two buckets into a single debit or credit figure."""
    if debits > credits:
        return TrialBalanceRow(code=code, category=category, debit=debits - credits, **extra)
    return TrialBalanceRow(code=code, category=category, credit=credits - debits, **extra)


def trial_balance(
    transactions: Iterable[Transaction],
    accounts: Iterable[ChartOfAccountItem],
) -> TrialBalance:
    accounts = list(accounts)
    postable = {acc.code for acc in accounts if not acc.is_header}

    debits: dict[str, Decimal] = defaultdict(lambda: ZERO)
    credits: dict[str, Decimal] = defaultdict(lambda: ZERO)
    orphan_codes: list[str] = []

    for tx in transactions:
        if tx.account_code not in postable and tx.account_code not in orphan_codes:
            orphan_codes.append(tx.account_code)
        if is_inflow(tx.type):
            credits[tx.account_code] += tx.amount
        else:
            debits[tx.account_code] += tx.amount

    rows = []
    for account in accounts:
        if account.is_header:
            rows.append(TrialBalanceRow(
                code=account.code,
                category=account.category,
                is_header=True,
            ))
            continue
        rows.append(net_row(
            account.code,
            account.category,
            debits[account.code],
            credits[account.code],
        ))

    for code in orphan_codes:
        rows.append(net_row(
            code,
            UNKNOWN_CATEGORY,
            debits[code],
            credits[code],
            is_orphan=True,
        ))

    if orphan_codes:
        logger.info("trial_balance_orphan_codes", codes=orphan_codes)

    return TrialBalance(rows=rows)
