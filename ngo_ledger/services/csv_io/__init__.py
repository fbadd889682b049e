"""CSV import/export."""

from ngo_ledger.services.csv_io.budget import export_budget_csv, parse_budget_csv
from ngo_ledger.services.csv_io.ledger import export_ledger_csv, parse_ledger_csv
from ngo_ledger.services.csv_io.reports import (
    export_bank_reconciliation_csv,
    export_income_statement_csv,
    export_trial_balance_csv,
    export_variance_csv,
)
from ngo_ledger.services.csv_io.statement import parse_statement_csv

__all__ = [
    "export_bank_reconciliation_csv",
    "export_budget_csv",
    "export_income_statement_csv",
    "export_ledger_csv",
    "export_trial_balance_csv",
    "export_variance_csv",
    "parse_budget_csv",
    "parse_ledger_csv",
    "parse_statement_csv",
]
