"""
Summary reports: expense breakdown, income statement, dashboard, AP/AR.

All income/expense figures use the strict report tables from
ngo_ledger.engine.classification (income = INCOME + CONT, expense = EXPENSE).
"""

from decimal import Decimal
from typing import Iterable, Optional

from ngo_ledger.engine.classification import (
    PAYABLE_TYPES,
    RECEIVABLE_TYPES,
    is_report_expense,
    is_report_income,
)
from ngo_ledger.engine.ledger import get_balance
from ngo_ledger.models.ledger import (
    ChartOfAccountItem,
    DateRange,
    Transaction,
    TransactionStatus,
    TransactionType,
)
from ngo_ledger.models.money import ZERO, sum_money
from ngo_ledger.models.reports import (
    CategoryTotal,
    DashboardSummary,
    IncomeStatement,
    IncomeStatementLine,
    OutstandingSummary,
)

MISC_GROUP = "Misc"
UNKNOWN_CATEGORY = "Unknown"


def category_group(account_code: str) -> str:
    """Leading whitespace-separated token of the code, e.g. '1.6.5 h' -> '1.6.5'."""
    parts = account_code.split()
    return parts[0] if parts else MISC_GROUP


def expense_by_category(transactions: Iterable[Transaction]) -> list[CategoryTotal]:
    """Strict EXPENSE totals grouped by code prefix, in first-seen order."""
    totals: dict[str, Decimal] = {}
    for tx in transactions:
        if not is_report_expense(tx.type):
            continue
        key = category_group(tx.account_code)
        totals[key] = totals.get(key, ZERO) + tx.amount
    return [CategoryTotal(name=name, value=value) for name, value in totals.items()]


def income_statement(
    transactions: Iterable[Transaction],
    accounts: Iterable[ChartOfAccountItem],
    date_range: Optional[DateRange] = None,
) -> IncomeStatement:
    """
    Income and expenditure account.

    Income is listed per transaction, expenditure per account code.
    With a date range, every figure is restricted to it.
    """
    categories = {acc.code: acc.category for acc in accounts}
    selected = [
        tx for tx in transactions
        if date_range is None or date_range.contains(tx.date)
    ]

    income_lines = [
        IncomeStatementLine(label=f"{tx.account_code} - {tx.description}", amount=tx.amount)
        for tx in selected
        if is_report_income(tx.type)
    ]

    spend: dict[str, Decimal] = {}
    for tx in selected:
        if is_report_expense(tx.type):
            spend[tx.account_code] = spend.get(tx.account_code, ZERO) + tx.amount
    expenditure_lines = [
        IncomeStatementLine(
            label=f"{code} - {categories.get(code, UNKNOWN_CATEGORY)}",
            amount=amount,
        )
        for code, amount in spend.items()
    ]

    return IncomeStatement(
        income_lines=income_lines,
        expenditure_lines=expenditure_lines,
        total_income=sum_money(line.amount for line in income_lines),
        total_expenditure=sum_money(line.amount for line in expenditure_lines),
    )


def _total(transactions: list[Transaction], tx_type: TransactionType, pending_only: bool = False) -> Decimal:
    return sum_money(
        tx.amount for tx in transactions
        if tx.type == tx_type
        and (not pending_only or tx.status == TransactionStatus.PENDING)
    )


def dashboard_summary(transactions: Iterable[Transaction]) -> DashboardSummary:
    transactions = list(transactions)
    return DashboardSummary(
        balance=get_balance(transactions),
        total_income=sum_money(tx.amount for tx in transactions if is_report_income(tx.type)),
        total_expenses=sum_money(tx.amount for tx in transactions if is_report_expense(tx.type)),
        total_advances=_total(transactions, TransactionType.ADV),
        outstanding_advances=_total(transactions, TransactionType.ADV, pending_only=True),
        total_withholding_tax=_total(transactions, TransactionType.WHT),
        outstanding_withholding_tax=_total(transactions, TransactionType.WHT, pending_only=True),
        expense_by_category=expense_by_category(transactions),
    )


def outstanding_items(transactions: Iterable[Transaction]) -> OutstandingSummary:
    """PENDING receivables (owed to us) and payables (owed by us)."""
    pending = [tx for tx in transactions if tx.status == TransactionStatus.PENDING]
    return OutstandingSummary(
        receivables=[tx for tx in pending if tx.type in RECEIVABLE_TYPES],
        payables=[tx for tx in pending if tx.type in PAYABLE_TYPES],
    )
