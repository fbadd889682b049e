"""CSV exports of the financial reports."""

from typing import Iterable

from ngo_ledger.models.reports import (
    BankReconciliationSummary,
    IncomeStatement,
    TrialBalance,
    VarianceRow,
)
from ngo_ledger.services.csv_io.common import write_rows


def export_variance_csv(rows: Iterable[VarianceRow]) -> str:
    return write_rows(
        ("Code", "Category", "Actual", "Pro-rated Budget", "Variance", "Variance %"),
        (
            (r.code, r.category, r.actual, r.budget, r.variance, f"{r.variance_percent:.2f}")
            for r in rows
        ),
    )


def export_income_statement_csv(statement: IncomeStatement) -> str:
    return write_rows(
        ("Item", "Amount"),
        [
            ("Total Income", statement.total_income),
            ("Total Expense", statement.total_expenditure),
            ("Net Result", statement.net_result),
        ],
    )


def export_trial_balance_csv(report: TrialBalance) -> str:
    rows = [(row.code, row.category, row.debit, row.credit) for row in report.rows]
    rows.append(("TOTAL", "", report.total_debits, report.total_credits))
    return write_rows(("Code", "Description", "Debit", "Credit"), rows)


def export_bank_reconciliation_csv(summary: BankReconciliationSummary) -> str:
    rows = [
        ("Balance as per Ledger", summary.ledger_balance),
        ("ADD: Unpresented Cheques", summary.total_unpresented),
        ("LESS: Outstanding Deposits", summary.total_outstanding),
        ("Projected Bank Balance", summary.projected_bank_balance),
        ("Actual Statement Balance", summary.statement_balance),
        ("Difference", summary.difference),
        (),
        ("--- Unreconciled Transactions ---",),
    ]
    rows.extend(
        (f"{tx.date} - {tx.description} ({tx.voucher_number})", tx.amount)
        for tx in summary.unreconciled
    )
    return write_rows(("Item", "Amount"), rows)
