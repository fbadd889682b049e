"""
Budget CSV

Format: one `code,monthlyAmount` pair per line. Lines missing either
field, or with an amount that is not a number (such as a header line),
are skipped. An import replaces the whole budget.
"""

from typing import Iterable

import structlog

from ngo_ledger.models.ledger import BudgetLine
from ngo_ledger.models.money import parse_money
from ngo_ledger.services.csv_io.common import cell, read_rows, write_rows

logger = structlog.get_logger(__name__)

BUDGET_HEADER = ("code", "monthly_budget")


def parse_budget_csv(text: str) -> list[BudgetLine]:
    lines = []
    skipped = 0
    for row in read_rows(text):
        code = cell(row, 0)
        amount = parse_money(cell(row, 1))
        if not code or amount is None or amount < 0:
            skipped += 1
            continue
        lines.append(BudgetLine(code=code, monthly_budget=amount))
    logger.info("budget_csv_parsed", lines=len(lines), skipped=skipped)
    return lines


def export_budget_csv(lines: Iterable[BudgetLine]) -> str:
    return write_rows(BUDGET_HEADER, ((line.code, line.monthly_budget) for line in lines))
