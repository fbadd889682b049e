"""
Budget vs Actuals

Budgets are held per month. For a report period the monthly figure is
pro-rated by the number of calendar months the period touches
(inclusive, at least one), so 2024-01-15..2024-03-02 counts as 3 months.
"""

from decimal import Decimal
from typing import Iterable, Mapping

from ngo_ledger.engine.classification import is_report_expense
from ngo_ledger.models.ledger import (
    BudgetLine,
    ChartOfAccountItem,
    DateRange,
    Transaction,
)
from ngo_ledger.models.money import CENT, ZERO, sum_money
from ngo_ledger.models.reports import VarianceRow


def months_in_range(date_range: DateRange) -> int:
    """Inclusive count of calendar months spanned, minimum 1."""
    start_year, start_month = int(date_range.start[:4]), int(date_range.start[5:7])
    end_year, end_month = int(date_range.end[:4]), int(date_range.end[5:7])
    months = (end_year - start_year) * 12 - start_month + end_month
    return max(months + 1, 1)


def budget_lookup(budget: Iterable[BudgetLine]) -> dict[str, Decimal]:
    """code -> monthly budget; the last line wins if a code repeats."""
    lookup: dict[str, Decimal] = {}
    for line in budget:
        lookup[line.code] = line.monthly_budget
    return lookup


def variance_percent(variance: Decimal, total_budget: Decimal) -> Decimal:
    if total_budget <= 0:
        return ZERO
    return (variance / total_budget * 100).quantize(CENT)


def budget_vs_actuals(
    transactions: Iterable[Transaction],
    accounts: Iterable[ChartOfAccountItem],
    budget: Iterable[BudgetLine],
    date_range: DateRange,
) -> list[VarianceRow]:
    """
    One row per postable account, largest absolute variance first.

    Actuals are strict EXPENSE transactions dated inside the range.
    Ties keep chart-of-accounts order (sorted() is stable).
    """
    transactions = list(transactions)
    monthly: Mapping[str, Decimal] = budget_lookup(budget)
    months = months_in_range(date_range)

    rows = []
    for account in accounts:
        if account.is_header:
            continue

        actual = sum_money(
            tx.amount
            for tx in transactions
            if tx.account_code == account.code
            and is_report_expense(tx.type)
            and date_range.contains(tx.date)
        )
        monthly_budget = monthly.get(account.code, ZERO)
        total_budget = monthly_budget * months
        variance = total_budget - actual

        rows.append(VarianceRow(
            code=account.code,
            category=account.category,
            actual=actual,
            monthly_budget=monthly_budget,
            budget=total_budget,
            variance=variance,
            variance_percent=variance_percent(variance, total_budget),
        ))

    return sorted(rows, key=lambda row: abs(row.variance), reverse=True)
