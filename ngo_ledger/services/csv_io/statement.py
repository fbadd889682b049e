"""
Naive bank statement parser.

Fallback for when the statement-parsing agent is unavailable or returns
nothing. Expects `Date,Description,Amount` with a header row; amounts
are signed (negative = withdrawal).
"""

import structlog

from ngo_ledger.models.ledger import BankTransaction
from ngo_ledger.models.money import ZERO, parse_money
from ngo_ledger.services.csv_io.common import cell, read_rows

logger = structlog.get_logger(__name__)


def parse_statement_csv(text: str) -> list[BankTransaction]:
    lines = [
        BankTransaction(
            id=f"bank-man-{idx}",
            date=cell(row, 0),
            description=cell(row, 1),
            amount=parse_money(cell(row, 2), default=ZERO),
        )
        for idx, row in enumerate(read_rows(text)[1:])
    ]
    logger.info("statement_csv_parsed", count=len(lines))
    return lines
