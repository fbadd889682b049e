"""Tests for the aggregation engine: balances, budgets and summary reports."""

from decimal import Decimal

from ngo_ledger.engine import (
    LedgerFilter,
    budget_vs_actuals,
    dashboard_summary,
    expense_by_category,
    filter_ledger,
    get_balance,
    income_statement,
    is_inflow,
    is_outflow,
    months_in_range,
    outstanding_items,
    running_balance,
    signed_amount,
)
from ngo_ledger.engine.budget import budget_lookup, variance_percent
from ngo_ledger.engine.classification import CASH_INFLOW_TYPES, CASH_OUTFLOW_TYPES
from ngo_ledger.models.ledger import BudgetLine, DateRange, TransactionStatus, TransactionType


class TestClassification:
    """Tests for the transaction type tables."""

    def test_inflow_and_outflow_partition_the_types(self):
        assert CASH_INFLOW_TYPES | CASH_OUTFLOW_TYPES == frozenset(TransactionType)
        assert not CASH_INFLOW_TYPES & CASH_OUTFLOW_TYPES

    def test_inflow_types(self):
        for tx_type in TransactionType:
            expected = tx_type in {TransactionType.INCOME, TransactionType.CONT, TransactionType.OPENING}
            assert is_inflow(tx_type) is expected
            assert is_outflow(tx_type) is not expected

    def test_signed_amount(self, make_tx):
        assert signed_amount(make_tx("10", TransactionType.OPENING)) == Decimal("10.00")
        assert signed_amount(make_tx("10", TransactionType.PCA)) == Decimal("-10.00")


class TestBalance:
    """Tests for getBalance and running balance."""

    def test_empty_ledger(self):
        assert get_balance([]) == Decimal("0.00")
        assert running_balance([]) == []

    def test_income_minus_expense(self, make_tx):
        """Test the basic INCOME 1000 / EXPENSE 300 scenario."""
        transactions = [
            make_tx("1000", TransactionType.INCOME, account_code="1.1"),
            make_tx("300", TransactionType.EXPENSE),
        ]
        assert get_balance(transactions) == Decimal("700.00")

    def test_every_non_inflow_type_reduces_balance(self, make_tx):
        transactions = [make_tx("1", tx_type) for tx_type in TransactionType]
        # 3 inflow types, 8 outflow types
        assert get_balance(transactions) == Decimal("-5.00")

    def test_balance_ignores_status(self, make_tx):
        transactions = [
            make_tx("50", TransactionType.INCOME, status=TransactionStatus.RECONCILED),
            make_tx("20", TransactionType.EXPENSE, status=TransactionStatus.CLEARED),
        ]
        assert get_balance(transactions) == Decimal("30.00")

    def test_running_balance_sorted_by_date(self, make_tx):
        transactions = [
            make_tx("300", TransactionType.EXPENSE, date="2024-01-20"),
            make_tx("1000", TransactionType.INCOME, date="2024-01-01"),
            make_tx("50", TransactionType.CONT, date="2024-01-10"),
        ]
        entries = running_balance(transactions)
        assert [e.transaction.date for e in entries] == ["2024-01-01", "2024-01-10", "2024-01-20"]
        assert [e.running_balance for e in entries] == [
            Decimal("1000.00"), Decimal("1050.00"), Decimal("750.00")
        ]

    def test_running_balance_same_day_keeps_input_order(self, make_tx):
        first = make_tx("10", TransactionType.INCOME)
        second = make_tx("5", TransactionType.EXPENSE)
        entries = running_balance([first, second])
        assert [e.transaction.id for e in entries] == [first.id, second.id]

    def test_final_running_balance_equals_balance(self, make_tx):
        transactions = [
            make_tx("12.34", TransactionType.INCOME, date="2024-03-01"),
            make_tx("0.10", TransactionType.WHT, date="2024-01-01"),
            make_tx("0.20", TransactionType.NB, date="2024-02-01"),
        ]
        assert running_balance(transactions)[-1].running_balance == get_balance(transactions)


class TestLedgerFilter:
    """Tests for ledger view filtering."""

    def test_empty_filter_returns_everything(self, make_tx):
        entries = running_balance([make_tx("1"), make_tx("2")])
        assert filter_ledger(entries, LedgerFilter()) == entries
        assert filter_ledger(entries, None) == entries

    def test_filters_are_case_insensitive(self, make_tx, chart):
        rent = make_tx("300", description="Office RENT", account_code="2.1 b", activity="Admin")
        salary = make_tx("900", description="January salaries", activity="Programs")
        entries = running_balance([rent, salary])

        by_search = filter_ledger(entries, LedgerFilter(search="rent"), chart)
        assert [e.transaction.id for e in by_search] == [rent.id]

        by_category = filter_ledger(entries, LedgerFilter(category="salar"), chart)
        assert [e.transaction.id for e in by_category] == [salary.id]

        by_activity = filter_ledger(entries, LedgerFilter(activity="admin"), chart)
        assert [e.transaction.id for e in by_activity] == [rent.id]

    def test_filtered_rows_keep_full_ledger_balance(self, make_tx):
        income = make_tx("1000", TransactionType.INCOME, date="2024-01-01", description="Grant")
        expense = make_tx("300", date="2024-01-02", description="Rent")
        entries = running_balance([income, expense])
        filtered = filter_ledger(entries, LedgerFilter(search="rent"))
        assert filtered[0].running_balance == Decimal("700.00")

    def test_search_matches_amount_and_cheque(self, make_tx):
        tx = make_tx("123.45", cheque_number="009876")
        entries = running_balance([tx])
        assert filter_ledger(entries, LedgerFilter(search="123.45"))
        assert filter_ledger(entries, LedgerFilter(search="9876"))
        assert not filter_ledger(entries, LedgerFilter(search="nothing"))


class TestBudgetVsActuals:
    """Tests for budget vs actuals."""

    def test_months_in_range(self):
        assert months_in_range(DateRange(start="2024-01-15", end="2024-03-02")) == 3
        assert months_in_range(DateRange(start="2024-01-01", end="2024-01-31")) == 1
        assert months_in_range(DateRange(start="2023-12-01", end="2024-01-01")) == 2

    def test_pro_rated_budget_and_variance(self, make_tx, chart, budget_lines):
        """Test 1000/month over 3 months against 2500 actual."""
        transactions = [
            make_tx("1500", date="2024-01-20"),
            make_tx("1000", date="2024-03-01"),
            make_tx("999", date="2024-04-01"),  # outside range
        ]
        rows = budget_vs_actuals(
            transactions, chart, budget_lines,
            DateRange(start="2024-01-15", end="2024-03-02"),
        )
        salaries = next(r for r in rows if r.code == "2.1 a")
        assert salaries.budget == Decimal("3000.00")
        assert salaries.actual == Decimal("2500.00")
        assert salaries.variance == Decimal("500.00")
        assert salaries.variance_percent == Decimal("16.67")
        assert not salaries.is_over_budget

    def test_one_row_per_postable_account(self, chart, budget_lines):
        rows = budget_vs_actuals([], chart, budget_lines, DateRange(start="2024-01-01", end="2024-01-31"))
        assert {r.code for r in rows} == {"1.1", "2.1 a", "2.1 b", "3.2"}

    def test_only_strict_expenses_count(self, make_tx, chart, budget_lines):
        transactions = [
            make_tx("100", TransactionType.ADV),
            make_tx("100", TransactionType.WHT),
            make_tx("40", TransactionType.EXPENSE),
        ]
        rows = budget_vs_actuals(transactions, chart, budget_lines, DateRange(start="2024-01-01", end="2024-01-31"))
        salaries = next(r for r in rows if r.code == "2.1 a")
        assert salaries.actual == Decimal("40.00")

    def test_sorted_by_absolute_variance(self, make_tx, chart, budget_lines):
        transactions = [make_tx("2000", account_code="3.2")]
        rows = budget_vs_actuals(transactions, chart, budget_lines, DateRange(start="2024-01-01", end="2024-01-31"))
        assert [r.code for r in rows] == ["3.2", "2.1 a", "2.1 b", "1.1"]
        assert rows[0].variance == Decimal("-2000.00")
        assert rows[0].is_over_budget
        assert rows[0].variance_percent == Decimal("0.00")

    def test_budget_lookup_last_line_wins(self):
        lines = [BudgetLine(code="2.1 a", monthly_budget="10"), BudgetLine(code="2.1 a", monthly_budget="30")]
        assert budget_lookup(lines) == {"2.1 a": Decimal("30.00")}

    def test_zero_budget_percent(self):
        assert variance_percent(Decimal("-10"), Decimal("0")) == Decimal("0.00")


class TestSummaryReports:
    """Tests for expense breakdown, income statement, dashboard and AP/AR."""

    def test_expense_by_category_groups_by_prefix(self, make_tx):
        transactions = [
            make_tx("100", account_code="2.1 a"),
            make_tx("50", account_code="2.1 b"),
            make_tx("25", account_code="3.2"),
            make_tx("999", TransactionType.ADV, account_code="3.2"),
            make_tx("5", account_code=""),
        ]
        totals = {c.name: c.value for c in expense_by_category(transactions)}
        assert totals == {
            "2.1": Decimal("150.00"),
            "3.2": Decimal("25.00"),
            "Misc": Decimal("5.00"),
        }

    def test_income_statement(self, make_tx, chart):
        transactions = [
            make_tx("1000", TransactionType.INCOME, account_code="1.1", description="Grant"),
            make_tx("200", TransactionType.CONT, account_code="1.1", description="Donation"),
            make_tx("5000", TransactionType.OPENING, account_code="1.1"),
            make_tx("300", account_code="2.1 b"),
            make_tx("100", account_code="2.1 b"),
            make_tx("70", account_code="9.9"),
        ]
        statement = income_statement(transactions, chart)
        assert [line.label for line in statement.income_lines] == ["1.1 - Grant", "1.1 - Donation"]
        assert statement.total_income == Decimal("1200.00")
        expenditure = {line.label: line.amount for line in statement.expenditure_lines}
        assert expenditure == {"2.1 b - Rent": Decimal("400.00"), "9.9 - Unknown": Decimal("70.00")}
        assert statement.net_result == Decimal("730.00")

    def test_income_statement_date_range(self, make_tx, chart):
        transactions = [
            make_tx("1000", TransactionType.INCOME, account_code="1.1", date="2024-01-05"),
            make_tx("300", date="2024-02-05"),
        ]
        statement = income_statement(transactions, chart, DateRange(start="2024-02-01", end="2024-02-29"))
        assert statement.total_income == Decimal("0.00")
        assert statement.total_expenditure == Decimal("300.00")

    def test_dashboard(self, make_tx):
        transactions = [
            make_tx("1000", TransactionType.INCOME, account_code="1.1"),
            make_tx("300"),
            make_tx("80", TransactionType.ADV),
            make_tx("20", TransactionType.ADV, status=TransactionStatus.CLEARED),
            make_tx("15", TransactionType.WHT),
        ]
        summary = dashboard_summary(transactions)
        assert summary.balance == Decimal("585.00")
        assert summary.total_income == Decimal("1000.00")
        assert summary.total_expenses == Decimal("300.00")
        assert summary.total_advances == Decimal("100.00")
        assert summary.outstanding_advances == Decimal("80.00")
        assert summary.total_withholding_tax == Decimal("15.00")
        assert summary.outstanding_withholding_tax == Decimal("15.00")

    def test_outstanding_items(self, make_tx):
        transactions = [
            make_tx("1000", TransactionType.INCOME),
            make_tx("50", TransactionType.PCA),
            make_tx("300", TransactionType.EXPENSE),
            make_tx("10", TransactionType.SSEC),
            make_tx("999", TransactionType.EXPENSE, status=TransactionStatus.RECONCILED),
            make_tx("7", TransactionType.TRF),
        ]
        summary = outstanding_items(transactions)
        assert summary.total_receivables == Decimal("1050.00")
        assert summary.total_payables == Decimal("310.00")
