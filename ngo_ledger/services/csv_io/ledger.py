"""
Ledger CSV (bulk import / export)

Positional format, header row first:

    date,voucher,activity,accountCode,description,amount

The sign of `amount` decides the type on import: >= 0 is INCOME,
< 0 is EXPENSE, and the magnitude is stored. Missing or unusable
columns fall back to placeholders instead of rejecting the row.
Export writes the same columns with the cash-signed amount, so an
exported INCOME/EXPENSE ledger re-imports to the same figures.
"""

from datetime import date
from typing import Iterable, Optional

import structlog
from pydantic import ValidationError

from ngo_ledger.engine.classification import signed_amount
from ngo_ledger.models.ids import new_transaction_id
from ngo_ledger.models.ledger import (
    TEXT_FIELD_LIMITS,
    Transaction,
    TransactionStatus,
    TransactionType,
    clip_text,
    coerce_iso_date,
)
from ngo_ledger.models.money import ZERO, parse_money
from ngo_ledger.services.csv_io.common import cell, read_rows, write_rows

logger = structlog.get_logger(__name__)

LEDGER_HEADER = ("date", "voucher", "activity", "accountCode", "description", "amount")

DEFAULT_VOUCHER = "IMP"
DEFAULT_ACCOUNT_CODE = "NB"
DEFAULT_DESCRIPTION = "Imported Transaction"
DEFAULT_PAYEE = "Imported"


def _import_date(value: str, today: date) -> str:
    try:
        return coerce_iso_date(value)
    except ValueError:
        return today.isoformat()


def _import_row(row: list[str], today: date) -> Transaction:
    amount = parse_money(cell(row, 5), default=ZERO)
    return Transaction(
        id=new_transaction_id(),
        date=_import_date(cell(row, 0), today),
        voucher_number=clip_text(cell(row, 1), TEXT_FIELD_LIMITS["voucher_number"]) or DEFAULT_VOUCHER,
        activity=clip_text(cell(row, 2), TEXT_FIELD_LIMITS["activity"]),
        account_code=cell(row, 3) or DEFAULT_ACCOUNT_CODE,
        description=clip_text(cell(row, 4), TEXT_FIELD_LIMITS["description"]) or DEFAULT_DESCRIPTION,
        amount=abs(amount),
        type=TransactionType.INCOME if amount >= 0 else TransactionType.EXPENSE,
        status=TransactionStatus.PENDING,
        payee_or_payer=DEFAULT_PAYEE,
    )


def parse_ledger_csv(text: str, today: Optional[date] = None) -> list[Transaction]:
    """
    Convert ledger CSV text into new PENDING transactions with fresh ids.

    Over-long text cells are cut to the field limits. A row that still
    cannot form a transaction is skipped and logged.
    """
    today = today or date.today()
    transactions = []
    skipped = 0
    for row_number, row in enumerate(read_rows(text)[1:], start=1):
        try:
            transactions.append(_import_row(row, today))
        except ValidationError as e:
            skipped += 1
            logger.warning("ledger_csv_row_skipped", row=row_number, error=str(e))
    logger.info("ledger_csv_parsed", count=len(transactions), skipped=skipped)
    return transactions


def export_ledger_csv(transactions: Iterable[Transaction]) -> str:
    return write_rows(LEDGER_HEADER, (
        (
            tx.date,
            tx.voucher_number,
            tx.activity or "",
            tx.account_code,
            tx.description,
            signed_amount(tx),
        )
        for tx in transactions
    ))
