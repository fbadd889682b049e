"""
Balance and running-balance derivation for the ledger view.
"""

from decimal import Decimal
from typing import Iterable, Iterator, Mapping, Optional

from pydantic import BaseModel

from ngo_ledger.engine.classification import signed_amount
from ngo_ledger.models.ledger import ChartOfAccountItem, Transaction
from ngo_ledger.models.money import ZERO, sum_money
from ngo_ledger.models.reports import LedgerEntry


def get_balance(transactions: Iterable[Transaction]) -> Decimal:
    """Total cash balance over all transactions, no date filtering."""
    return sum_money(signed_amount(tx) for tx in transactions)


def iter_running_balance(transactions: Iterable[Transaction]) -> Iterator[LedgerEntry]:
    """
    Yield transactions in ascending date order with the balance after each.

    sorted() is stable, so same-day transactions keep insertion order.
    The final running_balance equals get_balance() of the same input.
    """
    balance = ZERO
    for tx in sorted(transactions, key=lambda t: t.date):
        balance += signed_amount(tx)
        yield LedgerEntry(transaction=tx, running_balance=balance)


def running_balance(transactions: Iterable[Transaction]) -> list[LedgerEntry]:
    return list(iter_running_balance(transactions))


class LedgerFilter(BaseModel):
    """
    Ledger view filters.

    Column filters are case-insensitive substring matches; `search` is
    matched against description, payee, amount and cheque number.
    """

    voucher: str = ""
    activity: str = ""
    clause: str = ""
    category: str = ""
    search: str = ""

    @property
    def is_empty(self) -> bool:
        return not any((self.voucher, self.activity, self.clause, self.category, self.search))


def _matches(entry: LedgerEntry, flt: LedgerFilter, categories: Mapping[str, str]) -> bool:
    tx = entry.transaction
    category_name = categories.get(tx.account_code, "")

    if flt.voucher.lower() not in tx.voucher_number.lower():
        return False
    if flt.activity.lower() not in (tx.activity or "").lower():
        return False
    if flt.clause.lower() not in tx.account_code.lower():
        return False
    if flt.category.lower() not in category_name.lower():
        return False

    needle = flt.search.lower()
    return (
        needle in tx.description.lower()
        or needle in tx.payee_or_payer.lower()
        or needle in str(tx.amount)
        or needle in (tx.cheque_number or "").lower()
    )


def filter_ledger(
    entries: Iterable[LedgerEntry],
    flt: Optional[LedgerFilter],
    accounts: Iterable[ChartOfAccountItem] = (),
) -> list[LedgerEntry]:
    """
    Apply view filters to already-computed ledger entries.

    Filtering happens after running balances are computed so that the
    balance column always reflects the full ledger.
    """
    entries = list(entries)
    if flt is None or flt.is_empty:
        return entries
    categories = {acc.code: acc.category for acc in accounts}
    return [e for e in entries if _matches(e, flt, categories)]
