"""
Report view models.

Everything here is derived by ngo_ledger.engine from store snapshots and
is disposable: nothing in this module is ever persisted.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from ngo_ledger.models.ledger import Transaction
from ngo_ledger.models.money import ZERO, sum_money


class LedgerEntry(BaseModel):
    """A transaction with the running balance after it."""

    transaction: Transaction
    running_balance: Decimal


class CategoryTotal(BaseModel):
    """Expense total for one account-code group."""

    name: str
    value: Decimal


class VarianceRow(BaseModel):
    """Budget vs actual for one postable account over a date range."""

    code: str
    category: str
    actual: Decimal
    monthly_budget: Decimal
    budget: Decimal = Field(
        ...,
        description="Monthly budget pro-rated over the months in range"
    )
    variance: Decimal = Field(
        ...,
        description="budget - actual; positive means under budget"
    )
    variance_percent: Decimal

    @property
    def is_over_budget(self) -> bool:
        return self.variance < 0


class TrialBalanceRow(BaseModel):
    """Net debit or credit position of one account. Never both non-zero."""

    code: str
    category: str
    debit: Decimal = ZERO
    credit: Decimal = ZERO
    is_header: bool = False
    is_orphan: bool = Field(
        default=False,
        description="Code has no postable chart-of-accounts entry"
    )


class TrialBalance(BaseModel):
    """
    Trial balance report.

    This is a single-entry model: totals only agree when total inflows
    equal total outflows. A non-equal pair is not an error, it is the
    organisation's net cash position (total_credits - total_debits).
    """

    rows: list[TrialBalanceRow] = Field(default_factory=list)

    @property
    def total_debits(self) -> Decimal:
        return sum_money(row.debit for row in self.rows)

    @property
    def total_credits(self) -> Decimal:
        return sum_money(row.credit for row in self.rows)

    @property
    def net_position(self) -> Decimal:
        return self.total_credits - self.total_debits

    @property
    def is_balanced(self) -> bool:
        return self.total_debits == self.total_credits


class BankReconciliationSummary(BaseModel):
    """Bank reconciliation statement as of a date."""

    as_of_date: str
    statement_balance: Decimal
    ledger_balance: Decimal
    reconciled: list[Transaction] = Field(default_factory=list)
    unreconciled: list[Transaction] = Field(default_factory=list)
    unpresented_cheques: list[Transaction] = Field(default_factory=list)
    outstanding_deposits: list[Transaction] = Field(default_factory=list)
    total_unpresented: Decimal = ZERO
    total_outstanding: Decimal = ZERO
    projected_bank_balance: Decimal
    difference: Decimal

    @property
    def is_balanced(self) -> bool:
        return self.difference == ZERO


class IncomeStatementLine(BaseModel):
    label: str
    amount: Decimal


class IncomeStatement(BaseModel):
    """Income and expenditure account."""

    income_lines: list[IncomeStatementLine] = Field(default_factory=list)
    expenditure_lines: list[IncomeStatementLine] = Field(default_factory=list)
    total_income: Decimal = ZERO
    total_expenditure: Decimal = ZERO

    @property
    def net_result(self) -> Decimal:
        """Surplus when positive, deficit when negative."""
        return self.total_income - self.total_expenditure


class DashboardSummary(BaseModel):
    """Headline figures for the dashboard."""

    balance: Decimal
    total_income: Decimal
    total_expenses: Decimal
    total_advances: Decimal
    outstanding_advances: Decimal
    total_withholding_tax: Decimal
    outstanding_withholding_tax: Decimal
    expense_by_category: list[CategoryTotal] = Field(default_factory=list)


class OutstandingSummary(BaseModel):
    """Pending receivables and payables."""

    receivables: list[Transaction] = Field(default_factory=list)
    payables: list[Transaction] = Field(default_factory=list)

    @property
    def total_receivables(self) -> Decimal:
        return sum_money(t.amount for t in self.receivables)

    @property
    def total_payables(self) -> Decimal:
        return sum_money(t.amount for t in self.payables)
