"""
Bank Reconciliation Statement

    Balance as per ledger
    ADD:  unpresented cheques   (unreconciled outflows)
    LESS: outstanding deposits  (unreconciled inflows)
    = Projected bank balance
    - Actual statement balance
    = Difference

Amounts are Decimal with two places, so "balanced" is an exact
difference == 0 comparison.
"""

from typing import Iterable

from ngo_ledger.engine.classification import is_inflow
from ngo_ledger.engine.ledger import get_balance
from ngo_ledger.models.ledger import Transaction, TransactionStatus, coerce_iso_date
from ngo_ledger.models.money import MoneyInput, sum_money, to_money
from ngo_ledger.models.reports import BankReconciliationSummary


def bank_reconciliation(
    transactions: Iterable[Transaction],
    as_of_date: str,
    statement_balance: MoneyInput,
) -> BankReconciliationSummary:
    as_of_date = coerce_iso_date(as_of_date)
    statement_balance = to_money(statement_balance)
    relevant = [tx for tx in transactions if tx.date <= as_of_date]

    ledger_balance = get_balance(relevant)

    reconciled = [tx for tx in relevant if tx.status == TransactionStatus.RECONCILED]
    unreconciled = [tx for tx in relevant if tx.status != TransactionStatus.RECONCILED]

    unpresented = [tx for tx in unreconciled if not is_inflow(tx.type)]
    outstanding = [tx for tx in unreconciled if is_inflow(tx.type)]

    total_unpresented = sum_money(tx.amount for tx in unpresented)
    total_outstanding = sum_money(tx.amount for tx in outstanding)

    projected = ledger_balance + total_unpresented - total_outstanding

    return BankReconciliationSummary(
        as_of_date=as_of_date,
        statement_balance=statement_balance,
        ledger_balance=ledger_balance,
        reconciled=reconciled,
        unreconciled=unreconciled,
        unpresented_cheques=unpresented,
        outstanding_deposits=outstanding,
        total_unpresented=total_unpresented,
        total_outstanding=total_outstanding,
        projected_bank_balance=projected,
        difference=projected - statement_balance,
    )
